"""
Typed failures raised by the core components.

Every error carries the HTTP status and the short label the API uses
when rendering it; translation into a response happens in
``middleware.error_handler``.  The core never swallows these: they
propagate unchanged to the request boundary.
"""

from typing import Any, Iterable, Optional


class ResourceAPIError(Exception):
    """Base class for all errors raised by the service core."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidArgument(ResourceAPIError):
    """Malformed pagination parameters (limit out of range, non‑string cursor)."""

    status_code = 400
    error = "Invalid Argument"


class NotFound(ResourceAPIError):
    """A get/update/delete referenced a record id that does not exist."""

    status_code = 404
    error = "Not Found"

    def __init__(self, record_id: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Record {record_id} not found")
        self.record_id = record_id


class ValidationError(ResourceAPIError):
    """Record fields rejected by the schema collaborator."""

    status_code = 400
    error = "Validation Error"


class VersionUnsupported(ResourceAPIError):
    status_code = 400
    error = "Version Error"

    def __init__(self, version: str, supported: Iterable[str]) -> None:
        self.version = version
        self.supported_versions = list(supported)
        super().__init__(f"API version {version!r} is not supported")

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["supported_versions"] = self.supported_versions
        return body


class CacheClosed(ResourceAPIError):
    """The TTL cache was used after ``close()``."""

    status_code = 503
    error = "Service Unavailable"

    def __init__(self, message: str = "Cache is closed") -> None:
        super().__init__(message)
