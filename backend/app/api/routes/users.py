"""User Routes — profile of the cookie-authenticated caller.

Invariants:
    - Every route here requires a valid access-token cookie
    - A token whose subject no longer exists → 404
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user
from app.core.errors import AuthenticationError, ResourceNotFoundError
from app.infrastructure.database import get_db
from app.models.user import User
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(
    claims: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Return the account the access token belongs to."""
    try:
        user_id = UUID(str(claims.get("sub")))
    except ValueError:
        raise AuthenticationError("Invalid or expired token")
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundError("User", str(user_id))
    return UserResponse.model_validate(user)
