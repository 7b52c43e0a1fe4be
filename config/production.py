import os

from config.config import (  # noqa: F401
    ALLOW_CHECKIN_WITHOUT_GEOFENCE,
    CIVIL_UTC_OFFSET_MINUTES,
    DEFAULT_GEOFENCE_RADIUS_METERS,
    FACE_MATCH_THRESHOLD,
    db_config,
    env_bool,
)

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", False)
