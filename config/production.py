import os

from .config import Config, db_config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config()
STORAGE_BACKEND = "mysql"

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

TIMEZONE = Config.TIMEZONE
DEFAULT_SITE_RADIUS_M = Config.DEFAULT_SITE_RADIUS_M
MAX_LOCATION_ACCURACY_M = Config.MAX_LOCATION_ACCURACY_M
GEOFENCE_ON_CLOCK_OUT = Config.GEOFENCE_ON_CLOCK_OUT
RECENT_SESSIONS_LIMIT = Config.RECENT_SESSIONS_LIMIT
OT_VISIBLE_LIMIT = Config.OT_VISIBLE_LIMIT
STORE_RETRY_ATTEMPTS = Config.STORE_RETRY_ATTEMPTS

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
