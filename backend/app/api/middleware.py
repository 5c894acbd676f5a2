"""HTTP Middleware — per-request init gate and CORS origin enforcement.

Invariants:
    - Every request except the health probes awaits the init gate before any route runs
    - Init failure → 500 generic envelope, process stays alive, next request retries
    - Requests without an Origin header are always allowed
    - Outside development, a non-whitelisted Origin → 403 before routing

Design Decisions:
    - Gate looked up on request.app.state: one gate per app, swappable in tests
    - Settings read per request (get_settings is cached, so this is a dict lookup)
    - Health probes bypass the gate: liveness never touches the database and
      readiness runs the gate itself so a failed start-up reads as 503, not 500
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from app.api.error_handlers import build_initialization_error_response
from app.config import get_settings
from app.core.errors import OriginNotAllowedError

logger = logging.getLogger(__name__)

UNGATED_PATHS = frozenset({"/health", "/health/ready"})


async def ensure_database_initialized(request: Request, call_next):
    """Run the lazy init gate, then hand the request to the app."""
    if request.url.path in UNGATED_PATHS:
        return await call_next(request)
    gate = request.app.state.init_gate
    try:
        await gate.ensure_initialized()
    except Exception as exc:
        logger.error(
            f"Handler error: {exc}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "error_code": getattr(exc, "code", None),
            },
        )
        return JSONResponse(
            status_code=500,
            content=build_initialization_error_response(
                exc, debug=get_settings().is_development,
            ),
        )
    return await call_next(request)


def is_origin_allowed(origin: str | None) -> bool:
    settings = get_settings()
    return (
        settings.is_development
        or not origin
        or origin in settings.cors_origins
    )


async def reject_disallowed_origins(request: Request, call_next):
    """Refuse cross-origin requests from origins outside the whitelist."""
    origin = request.headers.get("origin")
    if not is_origin_allowed(origin):
        exc = OriginNotAllowedError(origin)
        logger.warning(exc.message, extra={"origin": origin})
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )
    return await call_next(request)
