"""Serverless Entry — AWS Lambda handler wrapping the ASGI app with Mangum.

Invariants:
    - ASGI lifespan is off: start-up happens lazily in the init-gate middleware
    - Logging configured at import (once per cold start)

Design Decisions:
    - Same FastAPI app runs under uvicorn and on Lambda; only the entry differs
"""

from mangum import Mangum

from app.config import get_settings
from app.infrastructure.observability import setup_logging
from app.main import app

settings = get_settings()
setup_logging(settings.log_level, settings.log_format)

handler: Mangum = Mangum(app, lifespan="off")
