import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Optional shared secret for the JSON API (X-API-Token header); unset = open.
API_TOKEN = os.getenv("API_TOKEN") or None

# Simulated device link
LINK_DELAY_SECONDS = float(os.getenv("LINK_DELAY_SECONDS", "1.0"))
CONNECT_TIMEOUT_SECONDS = float(os.getenv("CONNECT_TIMEOUT_SECONDS", "10"))
FAILING_DEVICE_IDS = tuple(filter(None, os.getenv("FAILING_DEVICE_IDS", "device-003").split(",")))

SYNC_HISTORY_LIMIT = int(os.getenv("SYNC_HISTORY_LIMIT", "100"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
