"""Gate Wiring — build_init_gate against a real SQLite file database.

Invariants:
    - Building the gate registers db_manager without opening it
    - First ensure_initialized() opens, probes, and seeds exactly one admin
    - Seeding disabled → gate has no seed routine
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine

import app.infrastructure.database as db_module
from app.config import Settings
from app.db.base import Base
from app.infrastructure.bootstrap import build_init_gate
from app.models.user import User, ROLE_ADMIN


def _settings(url: str, **overrides) -> Settings:
    return Settings(
        database_url=url,
        admin_email="root@cards.test",
        admin_username="root",
        admin_password="s3cret-pass",
        **overrides,
    )


async def _create_schema(url: str):
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


async def test_build_registers_manager_without_io(monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    gate = build_init_gate(_settings("sqlite+aiosqlite:///:memory:"))

    assert db_module.db_manager is gate.provider
    assert gate.provider.is_open is False
    assert gate.state.initialized is False


async def test_first_request_seeds_admin_once(tmp_path, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    url = f"sqlite+aiosqlite:///{tmp_path / 'cards.db'}"
    await _create_schema(url)
    gate = build_init_gate(_settings(url))

    await gate.ensure_initialized()
    await gate.ensure_initialized()

    async with gate.provider.session() as db:
        count = await db.scalar(select(func.count()).select_from(User))
        admin = await db.scalar(select(User).where(User.email == "root@cards.test"))
    assert count == 1
    assert admin.role == ROLE_ADMIN
    assert gate.state.initialized is True
    await gate.shutdown()


async def test_two_cold_starts_leave_one_admin(tmp_path, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    url = f"sqlite+aiosqlite:///{tmp_path / 'cards.db'}"
    await _create_schema(url)
    first = build_init_gate(_settings(url))
    second = build_init_gate(_settings(url))

    await first.ensure_initialized()
    await second.ensure_initialized()

    async with second.provider.session() as db:
        count = await db.scalar(select(func.count()).select_from(User))
    assert count == 1
    await first.shutdown()
    await second.shutdown()


async def test_seed_disabled_skips_seed_routine(monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    gate = build_init_gate(
        _settings("sqlite+aiosqlite:///:memory:", seed_admin_enabled=False),
    )
    assert gate._seed is None
