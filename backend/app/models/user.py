"""User ORM — account records, including the seeded administrator.

Invariants:
    - id is UUID primary key
    - email and username are unique (the admin seed relies on this across processes)
    - password holds a passlib hash, never plaintext
    - role is "admin" or "user"

Design Decisions:
    - Uniqueness enforced by the database, not by in-process flags
      (ADR: concurrent cold starts in separate instances race on seeding)
    - cascade delete for cards, favorites, devices
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class User(Base):
    """Account owning ID cards, favorites and devices."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(10), nullable=False, default=ROLE_USER,
    )
    first_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    cards: Mapped[list["IdCard"]] = relationship(
        "IdCard", back_populates="user",
        cascade="all, delete-orphan", lazy="selectin",
    )
    favorites: Mapped[list["Favorite"]] = relationship(
        "Favorite", back_populates="user",
        cascade="all, delete-orphan", lazy="selectin",
    )
    devices: Mapped[list["Device"]] = relationship(
        "Device", back_populates="user",
        cascade="all, delete-orphan", lazy="selectin",
    )
