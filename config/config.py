import os


class Config:
    """Shared defaults; environment variables override every value."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "geoclock-dev-secret"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "geoclock_db")
    DB_CONNECT_TIMEOUT = int(os.environ.get("DB_CONNECT_TIMEOUT", "5"))
    DB_LOCK_WAIT_TIMEOUT = int(os.environ.get("DB_LOCK_WAIT_TIMEOUT", "5"))

    # "mysql" or "memory" (the latter is not durable; demos and tests only)
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "mysql")

    TIMEZONE = os.environ.get("TIMEZONE", "Asia/Bangkok")
    DEFAULT_SITE_RADIUS_M = float(os.environ.get("DEFAULT_SITE_RADIUS_M", "200"))
    MAX_LOCATION_ACCURACY_M = float(os.environ.get("MAX_LOCATION_ACCURACY_M", "200"))
    GEOFENCE_ON_CLOCK_OUT = bool(int(os.environ.get("GEOFENCE_ON_CLOCK_OUT", "1")))

    RECENT_SESSIONS_LIMIT = int(os.environ.get("RECENT_SESSIONS_LIMIT", "20"))
    OT_VISIBLE_LIMIT = int(os.environ.get("OT_VISIBLE_LIMIT", "200"))
    STORE_RETRY_ATTEMPTS = int(os.environ.get("STORE_RETRY_ATTEMPTS", "2"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def db_config() -> dict:
    return {
        "host": Config.DB_HOST,
        "port": Config.DB_PORT,
        "user": Config.DB_USER,
        "password": Config.DB_PASSWORD,
        "database": Config.DB_NAME,
        "connect_timeout": Config.DB_CONNECT_TIMEOUT,
        "lock_wait_timeout": Config.DB_LOCK_WAIT_TIMEOUT,
    }
