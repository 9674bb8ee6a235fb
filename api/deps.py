"""Request-scoped dependencies and helpers shared by the routers.

Authentication is handled upstream; the gateway forwards the caller's id
in the `X-User-Id` header and this module only checks that it names an
existing user.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from database import models
from database.deps import get_db_read


def get_current_user_id(
    x_user_id: int = Header(..., alias="X-User-Id", description="Caller's user id"),
    db: Session = Depends(get_db_read),
) -> int:
    """Resolve the caller's user id.

    Raises:
        NotFoundError: If no such user exists.
    """
    if db.get(models.User, x_user_id) is None:
        raise NotFoundError("User", x_user_id)
    return x_user_id


def get_optional_user_id(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id", description="Caller's user id, if signed in"),
    db: Session = Depends(get_db_read),
) -> Optional[int]:
    """Like `get_current_user_id`, but anonymous callers get None."""
    if x_user_id is None:
        return None
    return get_current_user_id(x_user_id, db)


def utc_naive(value: datetime) -> datetime:
    # Timestamps are stored as naive UTC.
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
