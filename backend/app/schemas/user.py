"""User Schemas — public-facing account data (password hash never exposed)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """Account profile returned to its owner."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    role: str
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime
