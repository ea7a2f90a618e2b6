import os

from config import shift_bands_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "sewa_duty_db"),
}

DEBUG = True

# Day/Evening boundary. "17:00" reproduces the older reports.
SHIFT_CUTOVER = os.getenv("SHIFT_CUTOVER", "19:00")
SHIFT_BANDS = shift_bands_from_env()

# Live feed filter: only mirror changes for this home group (empty = all groups)
GROUP_SCOPE = os.getenv("GROUP_SCOPE") or None

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the sample roster on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
