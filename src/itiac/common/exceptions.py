"""Error types raised at the edges of the impact core.

The propagation, attribution and scoring functions never raise for odd
graph shapes (cycles, dangling edges, unknown ids). Errors come from three
places only: loading a snapshot, choosing an analysis scope, and checking
a candidate dependency before a collaborator stores it. Each error knows
the HTTP status and machine-readable code the API reports for it.
"""

from typing import Any


class ItiacError(Exception):
    """Base class; subclasses override the three class attributes."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message or type(self).message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Response body: ``error`` and ``message``, plus ``details`` when set."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


# Snapshot boundary

class SnapshotValidationError(ItiacError):
    """Components, dependencies or workflows are missing or malformed."""

    status_code = 422
    error_code = "INVALID_SNAPSHOT"
    message = "Snapshot is missing required fields"


class GraphTooLargeError(ItiacError):
    """More components or dependencies than the configured limits allow."""

    status_code = 413
    error_code = "GRAPH_TOO_LARGE"
    message = "Snapshot exceeds the configured graph size limits"


# Analysis requests

class InvalidScopeError(ItiacError):
    """Scope and component id do not make a usable combination."""

    status_code = 400
    error_code = "INVALID_SCOPE"
    message = "Invalid analysis scope"


# Dependency rules

class BusinessLogicError(ItiacError):
    """A candidate dependency breaks a modelling rule."""

    status_code = 422
    error_code = "BUSINESS_LOGIC_ERROR"
    message = "Business logic validation failed"


class SelfDependencyError(BusinessLogicError):
    error_code = "SELF_DEPENDENCY"
    message = "An IT asset cannot depend on itself"


class CircularDependencyError(BusinessLogicError):
    error_code = "CIRCULAR_DEPENDENCY"
    message = "This dependency would create a circular dependency"


class DuplicateDependencyError(BusinessLogicError):
    """Same source/target pair as an existing dependency."""

    status_code = 409
    error_code = "DUPLICATE_DEPENDENCY"
    message = "This dependency already exists"
