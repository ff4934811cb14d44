"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_RADIUS_METERS = 100.0
GEOFENCE_SLACK_METERS = 75.0

SESSION_KEY_LENGTH = 6
SESSION_KEY_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
LINK_EXPIRY_MINUTES = 30

ELIGIBILITY_THRESHOLD_PERCENT = 75.0

# Two-tier geolocation: precise fix first, then relaxed with cached fixes allowed.
HIGH_ACCURACY_TIMEOUT_SECONDS = 10.0
RELAXED_TIMEOUT_SECONDS = 15.0
RELAXED_MAXIMUM_AGE_SECONDS = 60.0

POLL_INTERVAL_SECONDS = 1.5

PORTAL_FRAGMENT = "#/portal/"
DEVICE_COOKIE_NAME = "attendx_device"
DEVICE_HEADER_NAME = "X-Device-Id"
