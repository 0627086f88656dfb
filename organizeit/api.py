"""OrganizeIT REST API.

FastAPI application exposing dashboard metrics, operations (alerts,
notifications, projects, service health), FinOps, ESG, identity and the
chat assistant. Every route except health, chat and demo sign-in requires
an Authorization header.
"""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from organizeit import __version__
from organizeit.config.loader import get_api_config
from organizeit.errors import MalformedInput, OrganizeITError
from organizeit.log import logger
from organizeit.routes import error_response
from organizeit.runtime import Runtime

_start_time: float = 0.0


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    global _start_time
    _start_time = time.time()
    try:
        Runtime.get().warm()
    except Exception:
        # Store could not even be opened; requests will surface the error.
        logger.warning("Startup warming failed", exc_info=True)
    logger.info("OrganizeIT API started")
    yield
    logger.info("OrganizeIT API stopped")


# ---------------------------------------------------------------------------
# App creation + router mounting
# ---------------------------------------------------------------------------

app = FastAPI(
    title="OrganizeIT",
    description="IT operations backend -- metrics, alerts, projects, FinOps, ESG, identity, chat",
    version=__version__,
    lifespan=_lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_api_config().get("cors_origins", []),
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
)

from organizeit.routes.metrics import router as metrics_router  # noqa: E402
from organizeit.routes.operations import router as operations_router  # noqa: E402
from organizeit.routes.finops import router as finops_router  # noqa: E402
from organizeit.routes.esg import router as esg_router  # noqa: E402
from organizeit.routes.identity import router as identity_router  # noqa: E402
from organizeit.routes.chat import router as chat_router  # noqa: E402

app.include_router(metrics_router)
app.include_router(operations_router)
app.include_router(finops_router)
app.include_router(esg_router)
app.include_router(identity_router)
app.include_router(chat_router)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

@app.exception_handler(OrganizeITError)
async def _organizeit_error_handler(request: Request, exc: OrganizeITError) -> JSONResponse:
    """Map the error taxonomy onto status codes. 5xx detail stays in the log."""
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message,
            exc_info=exc,
        )
        return error_response(exc.status_code, "Internal server error", code=exc.error_code)
    logger.debug("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message, exc.detail, code=exc.error_code)


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = ", ".join(".".join(str(p) for p in err.get("loc", ())) for err in exc.errors())
    return error_response(400, f"Invalid fields: {fields}", code=MalformedInput.error_code)


@app.exception_handler(Exception)
async def _global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return structured JSON instead of HTML 500."""
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return error_response(500, "Internal server error", code=OrganizeITError.error_code)


@app.exception_handler(404)
async def _not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(404, "Not found", f"{request.url.path} does not exist", code="not_found")


# ---------------------------------------------------------------------------
# Core endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    return {
        "status": "ok",
        "version": __version__,
        "uptime_seconds": round(time.time() - _start_time, 1) if _start_time else 0.0,
    }
