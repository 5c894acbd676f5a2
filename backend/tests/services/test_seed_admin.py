"""Admin Seed — idempotent insert, race reconciliation, and SeedError mapping.

Invariants:
    - First call inserts a hashed-password admin; later calls are no-ops
    - A concurrent insert by another instance (IntegrityError) is reconciled to a no-op
    - A unique clash with a different account raises SeedError
"""

import pytest
from sqlalchemy import func, select

import app.services.seed_admin as seed_module
from app.core.errors import SeedError
from app.core.security import verify_password
from app.models.user import User, ROLE_ADMIN
from app.services.seed_admin import AdminSeed, ensure_admin_exists

ADMIN = AdminSeed(email="admin@cards.test", username="admin", password="admin-pass-123")


async def _user_count(db) -> int:
    return await db.scalar(select(func.count()).select_from(User))


async def test_creates_admin_when_missing(test_db):
    created = await ensure_admin_exists(test_db, ADMIN)

    assert created is True
    admin = await test_db.scalar(select(User).where(User.email == ADMIN.email))
    assert admin.username == "admin"
    assert admin.role == ROLE_ADMIN
    assert admin.password != ADMIN.password
    assert verify_password(ADMIN.password, admin.password)


async def test_second_call_is_noop(test_db):
    await ensure_admin_exists(test_db, ADMIN)
    created = await ensure_admin_exists(test_db, ADMIN)

    assert created is False
    assert await _user_count(test_db) == 1


async def test_two_sessions_seed_one_admin(test_session_factory):
    async with test_session_factory() as first:
        await ensure_admin_exists(first, ADMIN)
    async with test_session_factory() as second:
        await ensure_admin_exists(second, ADMIN)

    async with test_session_factory() as db:
        assert await _user_count(db) == 1


async def test_lost_race_reconciles_to_noop(test_db, monkeypatch):
    """Another instance inserts between our lookup and our commit."""
    test_db.add(User(
        username=ADMIN.username, email=ADMIN.email,
        password="hash", role=ROLE_ADMIN,
    ))
    await test_db.commit()

    real_find = seed_module._find_admin
    lookups = []

    async def stale_then_real(db, email):
        lookups.append(email)
        if len(lookups) == 1:
            return None
        return await real_find(db, email)

    monkeypatch.setattr(seed_module, "_find_admin", stale_then_real)

    created = await ensure_admin_exists(test_db, ADMIN)

    assert created is False
    assert len(lookups) == 2
    assert await _user_count(test_db) == 1


async def test_username_clash_with_other_account_raises_seed_error(test_db):
    test_db.add(User(
        username=ADMIN.username, email="someone-else@cards.test",
        password="hash",
    ))
    await test_db.commit()

    with pytest.raises(SeedError) as exc_info:
        await ensure_admin_exists(test_db, ADMIN)

    assert exc_info.value.code == "SEED_ERROR"
    assert await _user_count(test_db) == 1


def test_admin_seed_from_settings():
    from app.config import Settings

    settings = Settings(
        admin_email="boss@cards.test", admin_username="boss", admin_password="pw",
    )
    seed = AdminSeed.from_settings(settings)
    assert seed == AdminSeed(email="boss@cards.test", username="boss", password="pw")
