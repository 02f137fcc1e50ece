"""API routers."""

from itiac.api.routers import admin, analysis

__all__ = [
    "admin",
    "analysis",
]
