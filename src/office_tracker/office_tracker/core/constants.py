"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"

WORKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
WORKDAY_SHORT_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri")

DEFAULT_ANALYTICS_DAYS = 30
STREAK_LOOKBACK_DAYS = 30
DEFAULT_HISTORY_LIMIT = 20
DEFAULT_OFFICE_CAPACITY = 0
MIN_PASSWORD_LENGTH = 6
DEFAULT_SESSION_DAYS = 7
