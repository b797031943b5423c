import os

from .config import Config, db_config

SECRET_KEY = Config.SECRET_KEY

DB_CONFIG = db_config()
STORAGE_BACKEND = Config.STORAGE_BACKEND

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

TIMEZONE = Config.TIMEZONE
DEFAULT_SITE_RADIUS_M = Config.DEFAULT_SITE_RADIUS_M
MAX_LOCATION_ACCURACY_M = Config.MAX_LOCATION_ACCURACY_M
GEOFENCE_ON_CLOCK_OUT = Config.GEOFENCE_ON_CLOCK_OUT
RECENT_SESSIONS_LIMIT = Config.RECENT_SESSIONS_LIMIT
OT_VISIBLE_LIMIT = Config.OT_VISIBLE_LIMIT
STORE_RETRY_ATTEMPTS = Config.STORE_RETRY_ATTEMPTS

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo sites/employees on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
