"""
Health Check Routes

FastAPI endpoints for service health and readiness checks.
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from sqlbot import __version__
from sqlbot.models.api import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health() -> HealthResponse:
    """
    Basic liveness check.

    Returns 200 OK if the service is running.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness() -> JSONResponse:
    """
    Readiness check for service dependencies.

    Checks:
    - Database connection answers ``SELECT 1``
    - Catalog store is initialized
    - Question pipeline is initialized
    - Telegram gateway is configured

    Returns:
        200 OK if all checks pass
        503 Service Unavailable if any check fails
    """
    from sqlbot.api.main import app_state

    checks: dict[str, bool] = {}

    try:
        if app_state["connector"] is not None:
            await app_state["connector"].execute("SELECT 1")
            checks["database"] = True
        else:
            checks["database"] = False
            logger.warning("Database check: FAILED (connector not initialized)")
    except Exception as e:
        checks["database"] = False
        logger.warning(f"Database check: FAILED ({e})")

    catalog = app_state["catalog"]
    checks["catalog"] = catalog is not None and catalog.is_initialized
    checks["pipeline"] = app_state["pipeline"] is not None
    checks["telegram"] = app_state["messenger"] is not None

    for name, ok in checks.items():
        if not ok:
            logger.warning(f"Readiness check failed: {name}")

    all_ready = all(checks.values())
    response_data = ReadinessResponse(
        status="ready" if all_ready else "not_ready",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
        checks=checks,
    )
    status_code = status.HTTP_200_OK if all_ready else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=status_code, content=response_data.model_dump())
