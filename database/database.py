"""Database helpers: engines, session factories and DB initialization.

Provides read/write session factories and an `init_db` helper that
creates tables and seeds the sample ingredient list when the table is empty.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.config import READ_DATABASE_URL, SEED_INGREDIENTS, WRITE_DATABASE_URL
from core.logger import get_logger
from data.ingredients_dataset import INGREDIENTS_DATA
from .models import Base, Ingredient

logger = get_logger("database")


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across FastAPI's worker threads.
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


# Engines
write_engine = create_engine(WRITE_DATABASE_URL, connect_args=_connect_args(WRITE_DATABASE_URL))
read_engine = create_engine(READ_DATABASE_URL, connect_args=_connect_args(READ_DATABASE_URL))

# Session factories
WriteSessionLocal = sessionmaker(bind=write_engine)
ReadSessionLocal = sessionmaker(bind=read_engine)


def init_db():
    """Initialize database schema and seed ingredients.

    Creates all tables and, unless disabled with `SEED_INGREDIENTS`,
    populates the ingredients table with sample data if it is empty.
    """
    Base.metadata.create_all(bind=write_engine)
    if not SEED_INGREDIENTS:
        return
    session = WriteSessionLocal()
    try:
        if session.query(Ingredient).count() == 0:
            for item in INGREDIENTS_DATA:
                session.add(Ingredient(**{**item, "name": item["name"].strip().lower()}))
            session.commit()
            logger.info("Seeded %s sample ingredients", len(INGREDIENTS_DATA))
    finally:
        session.close()


def get_write_session():
    """Yield a write-enabled SQLAlchemy session for the request scope."""
    db = WriteSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_read_session():
    """Yield a read-only SQLAlchemy session for the request scope.

    Used for read endpoints where routing reads to a replica may be desired.
    """
    db = ReadSessionLocal()
    try:
        yield db
    finally:
        db.close()
