"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_M = 6_371_000

SETTING_DISTANCE_THRESHOLD = "distanceThreshold"
SETTING_REMINDER_MINUTES = "checkoutReminderMinutes"
LEGACY_SETTING_REMINDER_HOURS = "checkoutReminderHours"

DEFAULT_DISTANCE_THRESHOLD_M = 500
MAX_DISTANCE_THRESHOLD_M = 100_000
DEFAULT_REMINDER_MINUTES = 480
MIN_REMINDER_MINUTES = 1
MAX_REMINDER_MINUTES = 720
# Stored reminder values at or below this were written by clients that counted hours.
LEGACY_HOURS_CUTOFF = 24

ALL_USERS = "all"
MIN_PASSWORD_LENGTH = 6
MAP_LINK_TEMPLATE = "https://www.google.com/maps?q={lat},{lng}"
