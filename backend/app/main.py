"""Digital ID Card API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DigitalIdError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Every request except the health probes passes the lazy init gate (serverless: lifespan is off)
    - Long-running server initializes eagerly in lifespan and closes the pool on shutdown

Design Decisions:
    - Gate built at import but opened on first use: no import-time I/O
    - Middleware order (outermost first): CORS headers → origin rejection → init gate,
      so a 500 from a failed start-up still carries CORS headers
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.middleware import ensure_database_initialized, reject_disallowed_origins
from app.api.routes import health, users
from app.config import get_settings
from app.infrastructure.bootstrap import build_init_gate
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle for the long-running server."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    await app.state.init_gate.ensure_initialized()
    logger.info("Digital ID Card API started")
    yield
    logger.info("Digital ID Card API shutting down")
    await app.state.init_gate.shutdown()


app = FastAPI(
    title="Digital ID Card API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.state.init_gate = build_init_gate(settings)

register_error_handlers(app)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(users.router)

# Middleware — added innermost first
app.middleware("http")(ensure_database_initialized)
app.middleware("http")(reject_disallowed_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
