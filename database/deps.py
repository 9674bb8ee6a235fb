"""Dependency helpers that expose read/write DB session generators.

`get_db_write` is for endpoints that persist anything (including the
counter increment on meal-log creation); `get_db_read` routes plain reads
to the replica when one is configured.
"""

from .database import get_read_session, get_write_session


def get_db_write():
    """Yield a write-capable DB session for FastAPI dependency injection."""
    yield from get_write_session()


def get_db_read():
    """Yield a read-only DB session for FastAPI dependency injection."""
    yield from get_read_session()
