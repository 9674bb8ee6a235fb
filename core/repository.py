"""Repository helpers for database operations.

`BaseRepository` wraps the CRUD boilerplate shared by the routers, and
`OwnedRepository` adds the per-user scoping that every caregiver-owned
record (safe foods, meal logs, incident logs, recipes) needs: a row
belonging to another user is indistinguishable from a missing one.
"""

from enum import Enum
from typing import TypeVar, Generic, Type, Optional, Any

from sqlalchemy.orm import Session, Query

from core.exceptions import NotFoundError
from database.models import Base

T = TypeVar('T', bound=Base)


class BaseRepository(Generic[T]):
    """Generic repository for common database operations.

    Attributes:
        model: SQLAlchemy model class to operate on.
        session: Database session for executing queries.
    """

    def __init__(self, model: Type[T], session: Session):
        self.model = model
        self.session = session

    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an object by its primary key, or None."""
        return self.session.get(self.model, id)

    def get_or_404(self, id: Any) -> T:
        """Retrieve an object by its primary key.

        Raises:
            NotFoundError: If no row has this key.
        """
        obj = self.get_by_id(id)
        if obj is None:
            raise NotFoundError(self.model.__name__, id)
        return obj

    def update(self, obj: T) -> T:
        """Commit changes to an existing object and refresh."""
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj: T) -> None:
        """Delete an object and commit."""
        self.session.delete(obj)
        self.session.commit()


class OwnedRepository(BaseRepository[T]):
    """Repository restricted to the rows of a single user.

    The model must expose a `user_id` column.
    """

    def __init__(self, model: Type[T], session: Session, user_id: int):
        super().__init__(model, session)
        self.user_id = user_id

    def query(self) -> Query:
        """Return a query pre-filtered to the owner's rows."""
        return self.session.query(self.model).filter(self.model.user_id == self.user_id)

    def get_by_id(self, id: Any) -> Optional[T]:
        return self.query().filter(self.model.id == id).first()

    def get_for_update(self, id: Any) -> T:
        """Load an owned row with a row lock held until the transaction ends.

        Raises:
            NotFoundError: If the row is missing or owned by someone else.
        """
        obj = self.query().filter(self.model.id == id).with_for_update().first()
        if obj is None:
            raise NotFoundError(self.model.__name__, id)
        return obj


def save(session: Session, obj: Base) -> Base:
    """Convenience function to add, commit and refresh an object."""
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj


def write_back(row: Base, snapshot: Any, fields) -> Base:
    """Copy `fields` from a Pydantic snapshot onto an ORM row.

    Enum members are stored by value. Nothing is committed.
    """
    for field in fields:
        value = getattr(snapshot, field)
        setattr(row, field, value.value if isinstance(value, Enum) else value)
    return row
