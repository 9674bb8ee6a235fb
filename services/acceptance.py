"""Safe-food acceptance lifecycle.

A safe food is either a `candidate` or `established`. Every recorded meal
attempt bumps `times_consumed`; once a candidate reaches the promotion
threshold it is surfaced as a suggestion, and the caregiver promotes it
explicitly. A food created as established skips the candidate stage.
Promotion stamps `date_first_accepted` once and is never undone.

All functions take a `SafeFood` snapshot and return a new one.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from core.config import PROMOTION_THRESHOLD
from core.exceptions import InvalidArgumentError
from core.logger import get_logger
from schemas.safe_food_schema import AcceptanceStatus, SafeFood, Timeline

logger = get_logger("services.acceptance")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps come back from SQLite and are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_safe_food(
    user_id: int,
    food_name: str,
    established: bool = False,
    now: Optional[datetime] = None,
    **details,
) -> SafeFood:
    """Build a new safe food on one of the two entry paths.

    A candidate starts with no recorded attempts. A food the caregiver
    declares established on creation counts as accepted once, now.
    """
    if established:
        return SafeFood(
            user_id=user_id,
            food_name=food_name,
            status=AcceptanceStatus.established,
            times_consumed=1,
            date_first_accepted=now or _utcnow(),
            **details,
        )
    return SafeFood(user_id=user_id, food_name=food_name, **details)


def record_consumption(food: SafeFood) -> SafeFood:
    """Count one more attempt, whatever was eaten."""
    return food.model_copy(update={"times_consumed": food.times_consumed + 1})


def is_promotion_eligible(food: SafeFood, threshold: Optional[int] = None) -> bool:
    threshold = PROMOTION_THRESHOLD if threshold is None else threshold
    return food.status == AcceptanceStatus.candidate and food.times_consumed >= threshold


def promote(food: SafeFood, now: Optional[datetime] = None) -> SafeFood:
    """Mark `food` established.

    Promoting an established food returns it unchanged, keeping its
    original `date_first_accepted`.
    """
    if food.status == AcceptanceStatus.established:
        return food
    promoted = food.model_copy(update={
        "status": AcceptanceStatus.established,
        "date_first_accepted": now or _utcnow(),
    })
    logger.debug("Promoted safe food %s after %s attempts", food.id, food.times_consumed)
    return promoted


def transition(food: SafeFood, target: AcceptanceStatus, now: Optional[datetime] = None) -> SafeFood:
    """Move `food` to `target`; established foods never return to candidate.

    Raises:
        InvalidArgumentError: On an attempt to demote an established food.
    """
    if target == AcceptanceStatus.established:
        return promote(food, now=now)
    if food.status == AcceptanceStatus.established:
        raise InvalidArgumentError("an established safe food cannot return to candidate", field="status")
    return food


def list_promotion_suggestions(foods: Iterable[SafeFood], threshold: Optional[int] = None) -> List[SafeFood]:
    """Return eligible candidates, most attempted first."""
    eligible = [f for f in foods if is_promotion_eligible(f, threshold)]
    return sorted(eligible, key=lambda f: f.times_consumed, reverse=True)


def month_key(value: datetime) -> str:
    """Return the UTC calendar month of `value` as `YYYY-MM`."""
    return _as_utc(value).strftime("%Y-%m")


def build_timeline(foods: Iterable[SafeFood]) -> Timeline:
    """Group established foods by the month they were first accepted.

    Buckets are keyed `YYYY-MM` (UTC) in ascending order; foods inside a
    bucket are in ascending `date_first_accepted` order. Candidates are
    left out.
    """
    established = []
    for food in foods:
        if food.status != AcceptanceStatus.established:
            continue
        if food.date_first_accepted is None:
            logger.warning("Established safe food %s has no date_first_accepted; left out of timeline", food.id)
            continue
        established.append(food)

    established.sort(key=lambda f: _as_utc(f.date_first_accepted))

    timeline: Timeline = {}
    for food in established:
        timeline.setdefault(month_key(food.date_first_accepted), []).append(food)
    return timeline
