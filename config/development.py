import os

from .config import *  # noqa: F401,F403
from .config import env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", True)
# Optional: also seed demo data on startup
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", False)
