"""Gate Wiring — builds the process-scoped initialization gate from settings.

Invariants:
    - Building the gate performs no I/O (cold-start cost paid on first request)
    - The gate's provider is the same manager get_db() serves sessions from
    - Seed runs in its own session, separate from any request session

Design Decisions:
    - Plain factory function over a DI container (ADR: one wiring site, called from main.py)
"""

from app.config import Settings
from app.infrastructure.database import DatabaseSessionManager, init_db
from app.infrastructure.init_gate import InitializationGate, SeedRoutine
from app.services.seed_admin import AdminSeed, ensure_admin_exists


def build_init_gate(settings: Settings) -> InitializationGate:
    """Register the database manager and wrap it in an InitializationGate."""
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        connect_timeout=settings.database_connect_timeout_seconds,
        query_timeout=settings.database_query_timeout_seconds,
    )
    seed = None
    if settings.seed_admin_enabled:
        seed = admin_seed_routine(manager, AdminSeed.from_settings(settings))
    return InitializationGate(
        manager, seed=seed, probe=settings.database_probe_on_init,
    )


def admin_seed_routine(
    manager: DatabaseSessionManager, admin: AdminSeed,
) -> SeedRoutine:
    """Bind ensure_admin_exists to a fresh session from manager."""

    async def seed() -> bool:
        async with manager.session() as db:
            return await ensure_admin_exists(db, admin)

    return seed
