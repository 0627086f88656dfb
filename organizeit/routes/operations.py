"""Operations endpoints -- alerts, notifications, projects, service health."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from organizeit.routes import require_auth
from organizeit.runtime import Runtime

router = APIRouter(tags=["operations"], dependencies=[Depends(require_auth)])


@router.get("/alerts/current")
def alerts() -> dict:
    return Runtime.get().alerts.list()


@router.post("/alerts/create")
def create_alert(payload: Any = Body(default=None)) -> dict:
    """Create an alert. New alerts always start Active."""
    return Runtime.get().alerts.create(payload)


@router.put("/alerts/{alert_id}/status")
def update_alert_status(alert_id: str, payload: Any = Body(default=None)) -> dict:
    return Runtime.get().alerts.update_status(alert_id, payload)


@router.get("/notifications")
def notifications() -> dict:
    return Runtime.get().notifications.list()


@router.put("/notifications/{notification_id}/read")
def mark_notification_read(notification_id: str) -> dict:
    return Runtime.get().notifications.mark_read(notification_id)


@router.get("/projects")
def projects() -> dict:
    return Runtime.get().projects.list()


@router.post("/projects")
def create_project(payload: Any = Body(default=None)) -> dict:
    return Runtime.get().projects.create(payload)


@router.get("/services/health")
def services_health() -> dict:
    return Runtime.get().services.list()
