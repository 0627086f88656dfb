"""FinOps endpoints -- cost series and optimization opportunities."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from organizeit.routes import require_auth
from organizeit.runtime import Runtime

router = APIRouter(tags=["finops"], dependencies=[Depends(require_auth)])


@router.get("/finops/costs")
def costs(period: str = Query(default="6m", max_length=8)) -> dict:
    return Runtime.get().finops.costs(period)


@router.get("/finops/optimization")
def optimization() -> dict:
    return Runtime.get().finops.optimization()
