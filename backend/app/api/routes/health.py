"""Service Banner & Health Probes — root info, liveness, and readiness endpoints.

Invariants:
    - GET / describes the service and its endpoint groups
    - GET /health always returns 200 if the process is up (liveness, outside the init gate)
    - GET /health/ready returns 503 if start-up failed or the database is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - Readiness drives the init gate itself and reports its state alongside the DB ping
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from app.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

SERVICE_NAME = "Digital ID Card API"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def service_info():
    """Service banner with a map of endpoint groups."""
    return {
        "message": SERVICE_NAME,
        "status": "running",
        "version": SERVICE_VERSION,
        "environment": get_settings().environment,
        "endpoints": {
            "health": "/health (GET)",
            "ready": "/health/ready (GET)",
            "api": {
                "users": "/api/v1/users/*",
            },
        },
    }


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "ok",
        "message": f"{SERVICE_NAME} is healthy",
        "version": SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness probe — runs the init gate, then pings the database."""
    gate = request.app.state.init_gate
    try:
        await gate.ensure_initialized()
    except Exception as exc:
        logger.warning(
            f"Readiness: initialization failed: {exc}",
            extra={"path": request.url.path, "error_code": getattr(exc, "code", None)},
        )
        return _not_ready("initialization_failed", gate)
    if not await gate.provider.health_check():
        return _not_ready("database_unavailable", gate)
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "initialization": gate.state.to_dict(),
    }


def _not_ready(reason: str, gate) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "not_ready",
            "reason": reason,
            "initialization": gate.state.to_dict(),
        },
    )
