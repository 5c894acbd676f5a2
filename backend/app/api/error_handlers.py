"""Error Handlers — global exception handlers and error envelopes for the Digital ID API.

Invariants:
    - DigitalIdError → structured JSON with error code, message, severity
    - RequestValidationError → field-level error details
    - Exception (catch-all) → never leaks internal details
    - Initialization failures → generic 500; details only in development

Design Decisions:
    - Three-layer handler: domain (DigitalIdError), validation (Pydantic), catch-all (Exception)
    - Envelope builders are plain functions so middleware can reuse them
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.errors import (
    DigitalIdError, ErrorCategory, ErrorSeverity, UnknownError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register Digital ID domain/infrastructure error handler."""

    @app.exception_handler(DigitalIdError)
    async def digital_id_error_handler(request: Request, exc: DigitalIdError):
        """Handle all Digital ID domain/infrastructure errors."""
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"DigitalIdError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": UnknownError.wrap(exc).code},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def build_initialization_error_response(
    exc: BaseException, debug: bool = False,
) -> dict:
    """Generic 500 body for a failed start-up; adds the cause only when debug."""
    body = {
        "error": {
            "code": "INITIALIZATION_FAILED",
            "message": "Failed to initialize server",
            "category": ErrorCategory.INITIALIZATION.value,
            "severity": ErrorSeverity.CRITICAL.value,
        },
    }
    if debug:
        typed = UnknownError.wrap(exc)
        body["error"]["details"] = {"code": typed.code, "message": typed.message}
    return body


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
