"""
Vercel Serverless Entry Point

Vercel's Python runtime calls this file for every request routed to the
backend and detects the ASGI application exported as `app`. Importing
app.serverless configures logging for the cold start; the database is
opened lazily by the init-gate middleware on the first request.
"""

from app.serverless import app  # noqa: F401
