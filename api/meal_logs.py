"""Meal attempt log endpoints.

Recording an attempt increments the referenced safe food's
`times_consumed`. The food row is locked for the duration of the insert so
concurrent attempts on the same food cannot lose an increment.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_current_user_id, utc_naive
from core.exceptions import NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import OwnedRepository, write_back
from database import models
from database.deps import get_db_read, get_db_write
from schemas.meal_log_schema import MealLogCreateRequest, MealLogResponse, MealLogUpdateRequest, MealType
from schemas.safe_food_schema import SafeFood
from services.acceptance import is_promotion_eligible, record_consumption

logger = get_logger("api.meal_logs")
router = APIRouter(prefix="/api/meal-logs", tags=["meal-logs"])


@router.get("", response_model=List[MealLogResponse])
def list_meal_logs(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    meal_type: Optional[MealType] = None,
    safe_food_id: Optional[int] = None,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_read),
):
    """Return the caller's meal logs, most recent meal first."""
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must not be after end_date", field="start_date")

    query = OwnedRepository(models.MealLog, db, user_id).query()
    if start_date:
        query = query.filter(models.MealLog.meal_date >= utc_naive(start_date))
    if end_date:
        query = query.filter(models.MealLog.meal_date <= utc_naive(end_date))
    if meal_type:
        query = query.filter(models.MealLog.meal_type == meal_type.value)
    if safe_food_id:
        query = query.filter(models.MealLog.safe_food_id == safe_food_id)
    rows = query.order_by(models.MealLog.meal_date.desc(), models.MealLog.id.desc()).all()
    return [MealLogResponse.model_validate(r) for r in rows]


@router.post("", response_model=MealLogResponse, status_code=201)
def create_meal_log(
    payload: MealLogCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Record one attempt at a safe food and count it on the food.

    Raises:
        NotFoundError: If the food is missing, inactive or not the caller's.
    """
    foods = OwnedRepository(models.SafeFood, db, user_id)
    food_row = foods.get_for_update(payload.safe_food_id)
    if not food_row.is_active:
        db.rollback()
        raise NotFoundError("SafeFood", payload.safe_food_id, message="Safe food not found or inactive")

    food = record_consumption(SafeFood.model_validate(food_row))
    write_back(food_row, food, ("times_consumed",))

    log = models.MealLog(
        user_id=user_id,
        safe_food_id=payload.safe_food_id,
        meal_date=utc_naive(payload.meal_date),
        meal_type=payload.meal_type.value,
        portion_eaten=payload.portion_eaten.value,
        energy_before=payload.energy_before,
        energy_after=payload.energy_after,
        location=payload.location,
        success_factors=payload.success_factors,
        notes=payload.notes,
    )
    db.add(log)
    db.commit()
    db.refresh(log)

    logger.info(
        "Meal logged: id=%s food=%s user=%s attempts=%s",
        log.id, food.id, user_id, food.times_consumed
    )
    if is_promotion_eligible(food):
        logger.info("Safe food %s has %s attempts and is suggested for promotion", food.id, food.times_consumed)

    response = MealLogResponse.model_validate(log)
    return response.model_copy(update={"times_consumed": food.times_consumed})


@router.get("/{log_id}", response_model=MealLogResponse)
def get_meal_log(log_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db_read)):
    """Return one of the caller's meal logs.

    Raises:
        NotFoundError: If missing or owned by another user.
    """
    row = OwnedRepository(models.MealLog, db, user_id).get_by_id(log_id)
    if row is None:
        raise NotFoundError("MealLog", log_id)
    return MealLogResponse.model_validate(row)


@router.put("/{log_id}", response_model=MealLogResponse)
def update_meal_log(
    log_id: int,
    payload: MealLogUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Correct the details of a recorded attempt.

    Only fields present in the payload change. The attempt still counts
    once towards the same food.

    Raises:
        NotFoundError: If missing or owned by another user.
    """
    repo = OwnedRepository(models.MealLog, db, user_id)
    row = repo.get_by_id(log_id)
    if row is None:
        raise NotFoundError("MealLog", log_id)

    changes = payload.model_dump(exclude_unset=True)
    if "meal_date" in changes:
        changes["meal_date"] = utc_naive(changes["meal_date"])
    for field, value in changes.items():
        setattr(row, field, value.value if isinstance(value, Enum) else value)
    row = repo.update(row)
    logger.info("Meal log updated: id=%s user=%s fields=%s", log_id, user_id, sorted(changes))
    return MealLogResponse.model_validate(row)


@router.delete("/{log_id}", status_code=204)
def delete_meal_log(log_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db_write)):
    """Delete one of the caller's meal logs.

    The food's attempt counter is left as is: it counts attempts recorded,
    not logs currently stored.

    Raises:
        NotFoundError: If missing or owned by another user.
    """
    repo = OwnedRepository(models.MealLog, db, user_id)
    row = repo.get_by_id(log_id)
    if row is None:
        raise NotFoundError("MealLog", log_id)
    repo.delete(row)
    logger.info("Meal log deleted: id=%s user=%s", log_id, user_id)
