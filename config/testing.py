import os

from config.config import (  # noqa: F401
    ALLOW_CHECKIN_WITHOUT_GEOFENCE,
    CIVIL_UTC_OFFSET_MINUTES,
    DEFAULT_GEOFENCE_RADIUS_METERS,
    FACE_MATCH_THRESHOLD,
    db_config,
    env_bool,
)

SECRET_KEY = "test-secret"

DB_CONFIG = db_config(default_password="12345")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", False)
