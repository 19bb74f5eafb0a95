from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

CHECKIN_EARLY_OPEN_MINUTES = 0
CHECKIN_LATE_CLOSE_MINUTES = 0
GEOFENCE_ACCURACY_POLICY = "ignore"
CHECKIN_LATE_AFTER_MINUTES = None
