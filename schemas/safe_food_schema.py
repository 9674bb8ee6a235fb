"""Schemas for safe foods and the acceptance timeline."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AcceptanceStatus(str, Enum):
    """Acceptance state of a safe food. `established` is terminal."""

    candidate = "candidate"
    established = "established"


class SafeFood(BaseModel):
    """Immutable safe-food snapshot handled by the acceptance lifecycle."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[int] = None
    user_id: int
    food_name: str
    category: Optional[str] = None
    preparation_notes: Optional[str] = None
    texture_notes: Optional[str] = None
    brand_preference: Optional[str] = None
    notes: Optional[str] = None
    personal_rating: Optional[int] = None
    status: AcceptanceStatus = AcceptanceStatus.candidate
    times_consumed: int = Field(0, ge=0)
    date_first_accepted: Optional[datetime] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


def _clean_food_name(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("food_name must not be blank")
    return value.strip()


class _SafeFoodDetails(BaseModel):
    category: Optional[str] = Field(None, examples=["Crunchy"])
    preparation_notes: Optional[str] = Field(None, examples=["Cut into strips, no sauce"])
    texture_notes: Optional[str] = None
    brand_preference: Optional[str] = None
    notes: Optional[str] = None
    personal_rating: Optional[int] = Field(None, ge=1, le=5)


class SafeFoodCreateRequest(_SafeFoodDetails):
    """Payload for adding a food; `established` skips the candidate stage."""

    food_name: str = Field(..., min_length=1, examples=["Plain crackers"])
    established: bool = Field(False, description="Caregiver asserts the food is already a reliable safe food")

    @field_validator("food_name")
    @classmethod
    def _clean_name(cls, value):
        return _clean_food_name(value)


class SafeFoodUpdateRequest(_SafeFoodDetails):
    """Edit of descriptive fields; `status: established` promotes the food.

    `food_name` may be left out but not cleared.
    """

    food_name: Optional[str] = Field(None, min_length=1)
    status: Optional[AcceptanceStatus] = None

    @field_validator("food_name")
    @classmethod
    def _clean_name(cls, value):
        return _clean_food_name(value)


class SafeFoodResponse(SafeFood):
    """Safe food as returned by the API, with its promotion eligibility."""

    promotion_eligible: bool = False


Timeline = Dict[str, List[SafeFood]]
