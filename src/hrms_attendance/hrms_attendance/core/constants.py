"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000

# Used only when no attendance settings row exists at all.
DEFAULT_CHECK_IN_START = "08:00"
DEFAULT_CHECK_IN_END = "10:00"
DEFAULT_CHECK_OUT_START = "17:00"
DEFAULT_CHECK_OUT_END = "19:00"
DEFAULT_WORK_HOURS = 8.0
DEFAULT_OVERTIME_RATE = 1.5

DEFAULT_HISTORY_LIMIT = 15
DEFAULT_ADMIN_LIST_LIMIT = 100
MAX_ADMIN_LIST_LIMIT = 500

# Order matters: first header that yields a valid IPv4 wins.
CLIENT_IP_HEADERS = (
    "X-Forwarded-For",
    "X-Real-IP",
    "CF-Connecting-IP",
    "Fastly-Client-IP",
    "True-Client-IP",
)
