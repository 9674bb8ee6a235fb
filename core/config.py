"""Application configuration read from environment variables.

Every setting has a sensible default so the service and the test-suite can
run without any environment prepared.
"""

import os

APP_NAME = os.getenv("APP_NAME", "Safe Plate API")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

# Read/Write partitioning pattern.
# In production, set WRITE_DATABASE_URL and READ_DATABASE_URL to different DB instances.
WRITE_DATABASE_URL = os.getenv("WRITE_DATABASE_URL", "sqlite:///arfid.db")
READ_DATABASE_URL = os.getenv("READ_DATABASE_URL", WRITE_DATABASE_URL)

LOG_DIR = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Number of recorded attempts after which a candidate food is suggested for promotion.
PROMOTION_THRESHOLD = int(os.getenv("SAFE_FOOD_PROMOTION_THRESHOLD", "5"))

SEED_INGREDIENTS = os.getenv("SEED_INGREDIENTS", "true").lower() in ("1", "true", "yes")

# Scaled amounts and nutrition totals are persisted with this precision.
SCALE_DECIMAL_PLACES = 3
