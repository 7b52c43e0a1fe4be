"""Settings shared by every environment, read from the process environment."""

import os


def env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def db_config(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "geoface_attendance"),
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
    }


# Fixed civil offset for all attendance timestamps (330 = UTC+5:30).
# This is not a time zone: multi-region tenants all share this one offset.
CIVIL_UTC_OFFSET_MINUTES = int(os.getenv("CIVIL_UTC_OFFSET_MINUTES", "330"))

FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.7"))

DEFAULT_GEOFENCE_RADIUS_METERS = int(os.getenv("DEFAULT_GEOFENCE_RADIUS_METERS", "100"))

# Tenants without a geofence may check in anywhere unless this is turned off.
ALLOW_CHECKIN_WITHOUT_GEOFENCE = env_bool("ALLOW_CHECKIN_WITHOUT_GEOFENCE", True)
