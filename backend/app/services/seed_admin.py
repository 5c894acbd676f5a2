"""Admin Seed — idempotent, race-safe creation of the baseline administrator account.

Invariants:
    - Keyed on the admin email: an existing row means no-op
    - At most one admin row even when several cold-started instances seed at once
    - IntegrityError on insert is reconciled by re-reading, never swallowed blindly
    - Any other failure surfaces as SeedError

Design Decisions:
    - Check-then-insert plus unique constraint over dialect-specific upsert
      (ADR: same code path on PostgreSQL and the SQLite test database)
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.errors import SeedError
from app.core.security import hash_password
from app.models.user import User, ROLE_ADMIN

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSeed:
    """Identity of the administrator account to guarantee."""
    email: str
    username: str
    password: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminSeed":
        return cls(
            email=settings.admin_email,
            username=settings.admin_username,
            password=settings.admin_password,
        )


async def _find_admin(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def ensure_admin_exists(db: AsyncSession, admin: AdminSeed) -> bool:
    """Create the admin account unless it already exists.

    Returns True when this call inserted the row, False when it was already
    present (including when another instance inserted it concurrently).
    """
    try:
        if await _find_admin(db, admin.email) is not None:
            logger.info("Admin user already exists")
            return False

        db.add(User(
            username=admin.username,
            email=admin.email,
            password=hash_password(admin.password),
            role=ROLE_ADMIN,
        ))
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if await _find_admin(db, admin.email) is not None:
                logger.info("Admin user created concurrently by another instance")
                return False
            raise SeedError("unique constraint violated by a different account") from e
    except SQLAlchemyError as e:
        await db.rollback()
        raise SeedError(type(e).__name__) from e

    logger.info("Admin user created")
    return True
