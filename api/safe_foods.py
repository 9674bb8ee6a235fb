"""Safe-food endpoints.

Rows are loaded into `SafeFood` snapshots, passed through the acceptance
lifecycle in `services.acceptance`, and the returned snapshot is written
back. Promotion always goes through the lifecycle so `date_first_accepted`
is stamped exactly once.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import case, func
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from core.exceptions import ConflictError, NotFoundError
from core.logger import get_logger
from core.repository import OwnedRepository, save, write_back
from database import models
from database.deps import get_db_read, get_db_write
from schemas.safe_food_schema import (
    AcceptanceStatus,
    SafeFood,
    SafeFoodCreateRequest,
    SafeFoodResponse,
    SafeFoodUpdateRequest,
    Timeline,
)
from services.acceptance import (
    build_timeline,
    is_promotion_eligible,
    list_promotion_suggestions,
    new_safe_food,
    promote,
    transition,
)

logger = get_logger("api.safe_foods")
router = APIRouter(prefix="/api/safe-foods", tags=["safe-foods"])

LIFECYCLE_FIELDS = ("status", "times_consumed", "date_first_accepted")
DETAIL_FIELDS = (
    "food_name",
    "category",
    "preparation_notes",
    "texture_notes",
    "brand_preference",
    "notes",
    "personal_rating",
)


def to_response(food: SafeFood) -> SafeFoodResponse:
    return SafeFoodResponse(**food.model_dump(), promotion_eligible=is_promotion_eligible(food))


def _check_unique_name(repo: OwnedRepository, food_name: str, exclude_id: int = None) -> None:
    query = repo.query().filter(func.lower(models.SafeFood.food_name) == food_name.strip().lower())
    if exclude_id is not None:
        query = query.filter(models.SafeFood.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("This food already exists in your safe foods list", resource="SafeFood")


@router.get("", response_model=List[SafeFoodResponse])
def list_safe_foods(
    include_inactive: bool = False,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_read),
):
    """Return the caller's safe foods: established first, then most attempted."""
    query = OwnedRepository(models.SafeFood, db, user_id).query()
    if not include_inactive:
        query = query.filter(models.SafeFood.is_active.is_(True))
    rows = query.order_by(
        case((models.SafeFood.status == AcceptanceStatus.established.value, 0), else_=1),
        models.SafeFood.times_consumed.desc(),
        models.SafeFood.id.desc(),
    ).all()
    return [to_response(SafeFood.model_validate(r)) for r in rows]


@router.get("/suggestions/pending", response_model=List[SafeFoodResponse])
def list_suggestions(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db_read)):
    """Return active candidates that have reached the promotion threshold."""
    rows = (
        OwnedRepository(models.SafeFood, db, user_id)
        .query()
        .filter(models.SafeFood.is_active.is_(True))
        .order_by(models.SafeFood.id)
        .all()
    )
    return [to_response(f) for f in list_promotion_suggestions(SafeFood.model_validate(r) for r in rows)]


@router.get("/timeline", response_model=Timeline)
def get_timeline(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db_read)):
    """Return the caller's active established foods grouped by acceptance month."""
    rows = (
        OwnedRepository(models.SafeFood, db, user_id)
        .query()
        .filter(
            models.SafeFood.is_active.is_(True),
            models.SafeFood.status == AcceptanceStatus.established.value,
        )
        .all()
    )
    return build_timeline(SafeFood.model_validate(r) for r in rows)


@router.get("/category/{category}", response_model=List[SafeFoodResponse])
def list_safe_foods_by_category(
    category: str,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_read),
):
    """Return the caller's active foods in `category` (case-insensitive), latest accepted first."""
    rows = (
        OwnedRepository(models.SafeFood, db, user_id)
        .query()
        .filter(
            models.SafeFood.is_active.is_(True),
            func.lower(models.SafeFood.category) == category.strip().lower(),
        )
        .order_by(
            case((models.SafeFood.date_first_accepted.is_(None), 1), else_=0),
            models.SafeFood.date_first_accepted.desc(),
            models.SafeFood.id.desc(),
        )
        .all()
    )
    return [to_response(SafeFood.model_validate(r)) for r in rows]


@router.get("/{food_id}", response_model=SafeFoodResponse)
def get_safe_food(food_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db_read)):
    """Return one of the caller's safe foods.

    Raises:
        NotFoundError: If missing or owned by another user.
    """
    row = OwnedRepository(models.SafeFood, db, user_id).get_by_id(food_id)
    if row is None:
        raise NotFoundError("SafeFood", food_id)
    return to_response(SafeFood.model_validate(row))


@router.post("", response_model=SafeFoodResponse, status_code=201)
def create_safe_food(
    payload: SafeFoodCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Add a safe food as a candidate, or directly as established.

    Raises:
        ConflictError: If the caller already has a food with this name.
    """
    repo = OwnedRepository(models.SafeFood, db, user_id)
    _check_unique_name(repo, payload.food_name)

    details = payload.model_dump(exclude={"food_name", "established"})
    food = new_safe_food(user_id, payload.food_name, established=payload.established, **details)

    row = models.SafeFood(user_id=user_id, is_active=True)
    write_back(row, food, DETAIL_FIELDS + LIFECYCLE_FIELDS)
    row = save(db, row)
    logger.info("Safe food created: id=%s user=%s status=%s", row.id, user_id, row.status)
    return to_response(SafeFood.model_validate(row))


@router.put("/{food_id}", response_model=SafeFoodResponse)
def update_safe_food(
    food_id: int,
    payload: SafeFoodUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Edit a safe food; `status: established` promotes it.

    Raises:
        NotFoundError: If missing or owned by another user.
        ConflictError: If renamed to a name the caller already uses.
        InvalidArgumentError: On an attempt to demote an established food.
    """
    repo = OwnedRepository(models.SafeFood, db, user_id)
    row = repo.get_for_update(food_id)
    changes = payload.model_dump(exclude_unset=True, exclude={"status"})
    if "food_name" in changes:
        _check_unique_name(repo, changes["food_name"], exclude_id=food_id)

    food = SafeFood.model_validate(row).model_copy(update=changes)
    if payload.status is not None:
        food = transition(food, payload.status)

    write_back(row, food, tuple(changes) + LIFECYCLE_FIELDS)
    row = repo.update(row)
    logger.info("Safe food updated: id=%s user=%s fields=%s", food_id, user_id, sorted(changes))
    return to_response(SafeFood.model_validate(row))


@router.delete("/{food_id}", response_model=SafeFoodResponse)
def deactivate_safe_food(
    food_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Soft-deactivate a safe food; its history and status are kept.

    Raises:
        NotFoundError: If missing or owned by another user.
    """
    repo = OwnedRepository(models.SafeFood, db, user_id)
    row = repo.get_for_update(food_id)
    row.is_active = False
    row = repo.update(row)
    logger.info("Safe food deactivated: id=%s user=%s", food_id, user_id)
    return to_response(SafeFood.model_validate(row))


@router.post("/{food_id}/promote", response_model=SafeFoodResponse)
def promote_safe_food(
    food_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Confirm a food as established. Repeating the call changes nothing.

    Raises:
        NotFoundError: If missing or owned by another user.
    """
    repo = OwnedRepository(models.SafeFood, db, user_id)
    row = repo.get_for_update(food_id)
    before = SafeFood.model_validate(row)
    food = promote(before)
    if food is not before:
        write_back(row, food, LIFECYCLE_FIELDS)
        row = repo.update(row)
        logger.info("Safe food promoted: id=%s user=%s attempts=%s", food_id, user_id, food.times_consumed)
    else:
        db.commit()
    return to_response(SafeFood.model_validate(row))
