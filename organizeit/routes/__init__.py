"""OrganizeIT API sub-routers.

Shared helpers and router modules for the FastAPI application.
"""

from __future__ import annotations

from fastapi import Header
from fastapi.responses import JSONResponse

from organizeit.errors import AuthRequired


def error_response(
    status_code: int,
    message: str,
    detail: str | None = None,
    code: str | None = None,
) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict = {"error": message}
    if code:
        body["code"] = code
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def require_auth(authorization: str | None = Header(default=None)) -> None:
    """Reject requests with no Authorization header.

    Only presence is checked; the token itself is validated upstream.
    """
    if not authorization or not authorization.strip():
        raise AuthRequired("Authorization required")


def body_field(payload: object, name: str) -> object:
    """Read one field from a JSON body that may not be an object."""
    if isinstance(payload, dict):
        return payload.get(name)
    return None
