SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"
DB_CONFIG = None

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE = "Asia/Bangkok"
DEFAULT_SITE_RADIUS_M = 200.0
MAX_LOCATION_ACCURACY_M = 200.0
GEOFENCE_ON_CLOCK_OUT = True
RECENT_SESSIONS_LIMIT = 20
OT_VISIBLE_LIMIT = 200
STORE_RETRY_ATTEMPTS = 2

AUTO_INIT_DB = False
AUTO_SEED_DB = True
