"""Database package: ORM models, session factories and `init_db`.

Routers import `models` from here; session dependencies live in
`database.deps`.
"""

from .database import WriteSessionLocal, ReadSessionLocal, init_db
from . import models

__all__ = ["WriteSessionLocal", "ReadSessionLocal", "init_db", "models"]
