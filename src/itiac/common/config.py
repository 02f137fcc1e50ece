"""Service configuration using Pydantic Settings.

Every value can come from the environment (``ANALYSIS_*``, ``API_*``,
``LOG_*``) or from a ``.env`` file. Nested values can also be set through
the top-level settings with ``__`` as delimiter, e.g.
``ANALYSIS__MAX_DEPTH=5``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ScopeName = Literal["all-components", "non-online"]


class AnalysisSettings(BaseSettings):
    """Limits and defaults for impact analysis runs."""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    # Scope used by /analysis/results when the request names neither a
    # scope nor a component
    default_scope: ScopeName = "non-online"

    max_graph_nodes: int = Field(
        default=10000, ge=1, le=1_000_000,
        description="Largest component count accepted in one snapshot",
    )
    max_graph_edges: int = Field(
        default=50000, ge=1, le=5_000_000,
        description="Largest dependency count accepted in one snapshot",
    )
    max_depth: int | None = Field(
        default=None, ge=1, le=1000,
        description="Hop limit for per-component analysis (unbounded if unset)",
    )

    spof_outgoing_threshold: int = Field(
        default=3, ge=1, le=100,
        description="Outgoing dependencies that make a component a SPOF candidate",
    )
    spof_escalation_downstream: int = Field(
        default=5, ge=1,
        description="Downstream size at which SPOF severity is raised one level",
    )


class APISettings(BaseSettings):
    """HTTP service configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    workers: int = Field(default=2, ge=1, le=32)
    reload: bool = False

    # Comma-separated in the environment, exposed as a list
    cors_origins_str: str = Field(default="*", alias="cors_origins")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_str.split(",") if o.strip()]


class LoggingSettings(BaseSettings):
    """Log output configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    include_timestamp: bool = True
    include_caller: bool = False

    # Id lists longer than this are logged as count plus preview
    max_logged_ids: int = Field(default=20, ge=0)

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """Top-level settings for the ITIAC service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = "ITIAC"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    api: APISettings = Field(default_factory=APISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings()
