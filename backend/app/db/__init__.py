"""Database Package — SQLAlchemy declarative Base shared by models and migrations.

Invariants:
    - Single async engine per process (owned by infrastructure/database.py)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
