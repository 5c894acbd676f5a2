"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root; cards, favorites and devices are scoped by user_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from app.models.user import User  # noqa: F401
from app.models.id_card import IdCard  # noqa: F401
from app.models.social_link import SocialLink  # noqa: F401
from app.models.favorite import Favorite  # noqa: F401
from app.models.device import Device  # noqa: F401
