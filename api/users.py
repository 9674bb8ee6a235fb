"""User API router.

Caregiver accounts own every per-user record. Token issuance lives outside
this service; these endpoints only manage the account rows.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.exceptions import ConflictError
from core.logger import get_logger
from core.repository import BaseRepository, save
from database import models
from database.deps import get_db_read, get_db_write
from schemas import UserCreateRequest, UserResponse

logger = get_logger("api.users")
router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=201)
def create_user(payload: UserCreateRequest, db: Session = Depends(get_db_write)):
    """Create a caregiver account.

    Raises:
        ConflictError: If the email is already registered.
    """
    email = payload.email.strip().lower()
    if db.query(models.User).filter(models.User.email == email).first():
        raise ConflictError("A user with this email already exists", resource="User")

    user = save(db, models.User(name=payload.name.strip(), email=email))
    logger.info("User created: id=%s", user.id)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db_read)):
    """Return one user.

    Raises:
        NotFoundError: If user not found in database.
    """
    return UserResponse.model_validate(BaseRepository(models.User, db).get_or_404(user_id))
