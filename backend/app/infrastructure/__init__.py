"""Infrastructure Layer — database lifecycle, start-up gate, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/
    - All driver failures mapped to typed errors (core/errors.py)

Design Decisions:
    - Start-up is lazy and gated (ADR: serverless cold starts, no import-time I/O)
"""
