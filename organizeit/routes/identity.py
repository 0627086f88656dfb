"""Identity endpoints -- directory, audit trail, per-user dashboard, demo sign-in."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from organizeit.routes import body_field, require_auth
from organizeit.runtime import Runtime

router = APIRouter(tags=["identity"])


@router.get("/identity/users", dependencies=[Depends(require_auth)])
def users() -> dict:
    return Runtime.get().identity.users()


@router.get("/audit/events", dependencies=[Depends(require_auth)])
def audit_events(limit: int | None = Query(default=None)) -> dict:
    """Most recent audit events; `limit` defaults to the configured value (50)."""
    return Runtime.get().identity.audit_events(limit=limit)


@router.get("/user/{user_id}/dashboard", dependencies=[Depends(require_auth)])
def user_dashboard(user_id: str) -> dict:
    return Runtime.get().identity.user_dashboard(user_id)


@router.post("/auth/signin")
def signin(payload: Any = Body(default=None)) -> dict:
    """Sign in the built-in demo account. Other accounts go through the identity provider."""
    email = body_field(payload, "email")
    password = body_field(payload, "password")
    return Runtime.get().identity.demo_sign_in(
        email if isinstance(email, str) else "",
        password if isinstance(password, str) else "",
    )
