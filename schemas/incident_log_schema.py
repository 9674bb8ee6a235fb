"""Schemas for mealtime incident ("lockdown") logs."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class _IncidentDetails(BaseModel):
    duration_minutes: Optional[int] = Field(None, ge=0, examples=[25])
    energy_level_before: Optional[int] = Field(None, ge=1, le=10)
    triggers: Optional[str] = Field(None, examples=["New plate, loud kitchen"])
    behaviors_observed: Optional[str] = None
    resolution_strategy: Optional[str] = Field(None, examples=["Quiet corner and a safe snack"])
    resolution_time_minutes: Optional[int] = Field(None, ge=0, examples=[10])
    family_impact_level: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None
    lessons_learned: Optional[str] = None


class IncidentLogCreateRequest(_IncidentDetails):
    """Payload for recording an incident; date and time are required."""

    incident_date: datetime = Field(..., examples=["2024-01-15T18:00:00Z"])
    incident_time: str = Field(..., pattern=TIME_OF_DAY_PATTERN, examples=["18:05"])


class IncidentLogUpdateRequest(_IncidentDetails):
    """Edit of an incident: only the supplied fields change."""

    incident_date: Optional[datetime] = None
    incident_time: Optional[str] = Field(None, pattern=TIME_OF_DAY_PATTERN)

    @field_validator("incident_date", "incident_time")
    @classmethod
    def _not_cleared(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be cleared")
        return value


class IncidentLogResponse(_IncidentDetails):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    incident_date: datetime
    incident_time: str
    created_at: Optional[datetime] = None


class StrategySummary(BaseModel):
    """How a resolution strategy has worked out across incidents."""

    strategy: str
    uses: int
    average_resolution_minutes: float
    most_recent_use: datetime


class StrategiesResponse(BaseModel):
    recent_strategies: List[IncidentLogResponse]
    strategy_effectiveness: List[StrategySummary]
