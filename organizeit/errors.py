"""Error taxonomy shared by every OrganizeIT component.

Each class carries the HTTP status and a stable error code, so the API
layer can convert any of them with a single exception handler.
"""

from __future__ import annotations


class OrganizeITError(Exception):
    """Base class for component-level failures."""

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class AuthRequired(OrganizeITError):
    """Credential header absent."""
    status_code = 401
    error_code = "auth_required"


class MalformedInput(OrganizeITError):
    """Required fields missing or invalid on a write operation."""
    status_code = 400
    error_code = "malformed_input"


class NotFound(OrganizeITError):
    """Referenced id absent from its collection."""
    status_code = 404
    error_code = "not_found"


class StoreFailure(OrganizeITError):
    """Underlying persistence error."""
    status_code = 500
    error_code = "store_failure"


class CorruptRecord(StoreFailure):
    """A stored value does not match its record schema."""
    error_code = "corrupt_record"


__all__ = [
    "OrganizeITError",
    "AuthRequired",
    "MalformedInput",
    "NotFound",
    "StoreFailure",
    "CorruptRecord",
]
