"""Metrics endpoints -- dashboard snapshot, snapshot history, performance series."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from organizeit.routes import require_auth
from organizeit.runtime import Runtime

router = APIRouter(tags=["metrics"], dependencies=[Depends(require_auth)])


@router.get("/metrics/dashboard")
def dashboard() -> dict:
    """Current dashboard snapshot (cached for the configured TTL)."""
    return Runtime.get().metrics.dashboard()


@router.get("/metrics/history")
def dashboard_history(limit: int = Query(default=50, ge=1, le=1000)) -> dict:
    snapshots = Runtime.get().metrics.history(limit=limit)
    return {"snapshots": snapshots, "count": len(snapshots)}


@router.get("/metrics/performance")
def performance(hours: int = Query(default=24)) -> dict:
    """Hourly cpu/memory/disk/network buckets, oldest first."""
    return Runtime.get().metrics.performance(hours=hours)
