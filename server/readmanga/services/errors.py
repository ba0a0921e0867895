"""Error taxonomy for catalog operations."""

from typing import Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response body."""
    code: str
    message: str
    details: dict[str, Any] = {}


class CatalogError(Exception):
    """Base exception for catalog operations."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(code=self.code, message=self.message, details=self.details)


class UpstreamUnavailable(CatalogError):
    """The upstream call failed (network error, timeout, non-2xx or bad body)."""

    status_code = 500

    def __init__(self, message: str = "Catalog operation failed", details: Optional[dict[str, Any]] = None):
        super().__init__("UPSTREAM_UNAVAILABLE", message, details)


class NotFound(CatalogError):
    """The requested entity does not exist upstream."""

    status_code = 404

    def __init__(self, message: str = "Not found", details: Optional[dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class MalformedParams(CatalogError):
    """Caller-supplied parameters outside the allowed set."""

    status_code = 400

    def __init__(self, message: str = "Invalid parameters", details: Optional[dict[str, Any]] = None):
        super().__init__("MALFORMED_PARAMS", message, details)
