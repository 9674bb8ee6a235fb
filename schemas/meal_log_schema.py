"""Schemas for meal attempt logs."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class PortionEaten(str, Enum):
    all = "all"
    most = "most"
    some = "some"
    little = "little"
    none = "none"


class MealLogCreateRequest(BaseModel):
    """Payload for recording one attempt at a safe food."""

    safe_food_id: int = Field(..., examples=[1])
    meal_date: datetime = Field(..., examples=["2024-01-15T12:30:00Z"])
    meal_type: MealType
    portion_eaten: PortionEaten
    energy_before: Optional[int] = Field(None, ge=1, le=10)
    energy_after: Optional[int] = Field(None, ge=1, le=10)
    location: Optional[str] = Field(None, examples=["home"])
    success_factors: Optional[str] = Field(None, examples=["favourite plate"])
    notes: Optional[str] = None


class MealLogResponse(BaseModel):
    """Stored meal log, with the food's updated attempt counter."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    safe_food_id: int
    meal_date: datetime
    meal_type: MealType
    portion_eaten: PortionEaten
    energy_before: Optional[int] = None
    energy_after: Optional[int] = None
    location: Optional[str] = None
    success_factors: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    times_consumed: Optional[int] = None


class MealLogUpdateRequest(BaseModel):
    """Edit of a recorded attempt. The food it counts towards cannot change."""

    meal_date: Optional[datetime] = None
    meal_type: Optional[MealType] = None
    portion_eaten: Optional[PortionEaten] = None
    energy_before: Optional[int] = Field(None, ge=1, le=10)
    energy_after: Optional[int] = Field(None, ge=1, le=10)
    location: Optional[str] = None
    success_factors: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("meal_date", "meal_type", "portion_eaten")
    @classmethod
    def _not_cleared(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be cleared")
        return value
