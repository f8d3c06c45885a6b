"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

REGULAR_HOURS_PER_DAY = 8
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_REPORT_DAYS = 30
DEFAULT_TREND_DAYS = 7
RECENT_ACTIVITY_LIMIT = 5

DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_GEOFENCE_RADIUS_METERS = 100
DEFAULT_LATITUDE = 40.7128
DEFAULT_LONGITUDE = -74.0060

MAX_HOURLY_RATE = 10000

MIN_PASSWORD_LENGTH = 6
DAILY_CODE_TOKEN_LENGTH = 10
