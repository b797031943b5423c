"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_M = 6_371_000.0

DEFAULT_SITE_RADIUS_M = 200.0
DEFAULT_MAX_ACCURACY_M = 200.0
DEFAULT_TIMEZONE = "Asia/Bangkok"

DEFAULT_RECENT_SESSIONS = 20
DEFAULT_VISIBLE_REQUESTS = 200
DEFAULT_STORE_RETRY_ATTEMPTS = 2
