"""Incident ("lockdown") log endpoints.

Caregivers record mealtime shutdowns, what set them off and what helped.
The strategies view ranks recent resolution strategies by how quickly they
worked.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_current_user_id, utc_naive
from core.exceptions import NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import OwnedRepository, save
from database import models
from database.deps import get_db_read, get_db_write
from schemas.incident_log_schema import (
    IncidentLogCreateRequest,
    IncidentLogResponse,
    IncidentLogUpdateRequest,
    StrategiesResponse,
)
from services.incident_strategies import rank_strategies

logger = get_logger("api.incident_logs")
router = APIRouter(prefix="/api/incident-logs", tags=["incident-logs"])

# Number of recent resolved incidents the strategies view looks at.
RECENT_STRATEGY_WINDOW = 20


def _get_owned(repo: OwnedRepository, log_id: int):
    row = repo.get_by_id(log_id)
    if row is None:
        raise NotFoundError("IncidentLog", log_id)
    return row


@router.get("", response_model=List[IncidentLogResponse])
def list_incident_logs(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = Query(50, ge=1, le=500),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_read),
):
    """Return the caller's incidents, most recent first."""
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must not be after end_date", field="start_date")

    query = OwnedRepository(models.IncidentLog, db, user_id).query()
    if start_date:
        query = query.filter(models.IncidentLog.incident_date >= utc_naive(start_date))
    if end_date:
        query = query.filter(models.IncidentLog.incident_date <= utc_naive(end_date))
    rows = query.order_by(models.IncidentLog.incident_date.desc(), models.IncidentLog.id.desc()).limit(limit).all()
    return [IncidentLogResponse.model_validate(r) for r in rows]


@router.get("/strategies", response_model=StrategiesResponse)
def get_strategies(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db_read)):
    """Return recent resolved incidents and their strategies ranked by resolution time."""
    rows = (
        OwnedRepository(models.IncidentLog, db, user_id)
        .query()
        .filter(
            models.IncidentLog.resolution_strategy.isnot(None),
            models.IncidentLog.resolution_time_minutes.isnot(None),
        )
        .order_by(models.IncidentLog.incident_date.desc(), models.IncidentLog.id.desc())
        .limit(RECENT_STRATEGY_WINDOW)
        .all()
    )
    recent = [IncidentLogResponse.model_validate(r) for r in rows]
    return StrategiesResponse(recent_strategies=recent, strategy_effectiveness=rank_strategies(recent))


@router.get("/{log_id}", response_model=IncidentLogResponse)
def get_incident_log(log_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db_read)):
    """Return one of the caller's incidents.

    Raises:
        NotFoundError: If missing or owned by another user.
    """
    return IncidentLogResponse.model_validate(_get_owned(OwnedRepository(models.IncidentLog, db, user_id), log_id))


@router.post("", response_model=IncidentLogResponse, status_code=201)
def create_incident_log(
    payload: IncidentLogCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Record an incident for the caller."""
    data = payload.model_dump()
    data["incident_date"] = utc_naive(data["incident_date"])
    row = save(db, models.IncidentLog(user_id=user_id, **data))
    logger.info("Incident logged: id=%s user=%s duration=%s", row.id, user_id, row.duration_minutes)
    return IncidentLogResponse.model_validate(row)


@router.put("/{log_id}", response_model=IncidentLogResponse)
def update_incident_log(
    log_id: int,
    payload: IncidentLogUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Edit an incident; only fields present in the payload change.

    Raises:
        NotFoundError: If missing or owned by another user.
    """
    repo = OwnedRepository(models.IncidentLog, db, user_id)
    row = _get_owned(repo, log_id)
    changes = payload.model_dump(exclude_unset=True)
    if "incident_date" in changes:
        changes["incident_date"] = utc_naive(changes["incident_date"])
    for field, value in changes.items():
        setattr(row, field, value)
    row = repo.update(row)
    logger.info("Incident updated: id=%s user=%s fields=%s", log_id, user_id, sorted(changes))
    return IncidentLogResponse.model_validate(row)


@router.delete("/{log_id}", status_code=204)
def delete_incident_log(log_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db_write)):
    """Delete one of the caller's incidents.

    Raises:
        NotFoundError: If missing or owned by another user.
    """
    repo = OwnedRepository(models.IncidentLog, db, user_id)
    repo.delete(_get_owned(repo, log_id))
    logger.info("Incident deleted: id=%s user=%s", log_id, user_id)
