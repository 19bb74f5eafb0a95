"""Settings shared by every environment module.

Values come from environment variables (a `.env` file is loaded by
`create_app()` through python-dotenv).
"""

import os


def env_bool(name: str, default: bool) -> bool:
    return bool(int(os.getenv(name, "1" if default else "0")))


def env_optional_int(name: str):
    value = os.getenv(name, "").strip()
    return int(value) if value else None


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attend_db"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Check-in window grace, in minutes around the session's scheduled bounds.
CHECKIN_EARLY_OPEN_MINUTES = int(os.getenv("CHECKIN_EARLY_OPEN_MINUTES", "0"))
CHECKIN_LATE_CLOSE_MINUTES = int(os.getenv("CHECKIN_LATE_CLOSE_MINUTES", "0"))

# ignore | widen | shrink
GEOFENCE_ACCURACY_POLICY = os.getenv("GEOFENCE_ACCURACY_POLICY", "ignore").lower()

# Unset: every check-in is stored as "present".
CHECKIN_LATE_AFTER_MINUTES = env_optional_int("CHECKIN_LATE_AFTER_MINUTES")

CHECKIN_DEADLINE_SECONDS = float(os.getenv("CHECKIN_DEADLINE_SECONDS", "10"))
CHECKIN_ENFORCE_ASSIGNMENTS = env_bool("CHECKIN_ENFORCE_ASSIGNMENTS", True)
CHECKIN_ENFORCE_OVERRIDES = env_bool("CHECKIN_ENFORCE_OVERRIDES", True)
