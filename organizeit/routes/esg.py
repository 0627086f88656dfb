"""ESG and insight endpoints -- fixed payloads, persisted on every read."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from organizeit.routes import require_auth
from organizeit.runtime import Runtime

router = APIRouter(tags=["esg"], dependencies=[Depends(require_auth)])


@router.get("/esg/carbon")
def carbon() -> dict:
    return Runtime.get().esg.carbon()


@router.get("/esg/sustainability")
def sustainability() -> dict:
    return Runtime.get().esg.sustainability()


@router.get("/ai/insights")
def ai_insights() -> dict:
    return Runtime.get().insights.ai_insights()


@router.get("/optimization/resources")
def resource_optimization() -> dict:
    return Runtime.get().insights.resource_optimization()
