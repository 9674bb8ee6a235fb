"""Schemas for user-related requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserCreateRequest(BaseModel):
    """Request payload for creating a caregiver account."""

    name: str = Field(..., min_length=1, examples=["Sam Rivera"], description="Display name")
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$", examples=["sam@example.com"])


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None
