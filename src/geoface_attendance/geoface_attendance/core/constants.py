"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000
DEFAULT_GEOFENCE_RADIUS_METERS = 100
DEFAULT_FACE_MATCH_THRESHOLD = 0.7
# UTC+5:30
DEFAULT_CIVIL_UTC_OFFSET_MINUTES = 330
DEFAULT_HISTORY_LIMIT = 30
CIVIL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
