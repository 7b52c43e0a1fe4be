import os

from config.config import (  # noqa: F401
    ALLOW_CHECKIN_WITHOUT_GEOFENCE,
    CIVIL_UTC_OFFSET_MINUTES,
    DEFAULT_GEOFENCE_RADIUS_METERS,
    FACE_MATCH_THRESHOLD,
    db_config,
    env_bool,
)

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config(default_password="root")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", True)
# Optional: also seed a demo company, geofence and users on startup
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", False)
