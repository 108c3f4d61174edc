import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

API_TOKEN = os.getenv("API_TOKEN") or None

LINK_DELAY_SECONDS = float(os.getenv("LINK_DELAY_SECONDS", "1.0"))
CONNECT_TIMEOUT_SECONDS = float(os.getenv("CONNECT_TIMEOUT_SECONDS", "10"))
FAILING_DEVICE_IDS = tuple(filter(None, os.getenv("FAILING_DEVICE_IDS", "device-003").split(",")))

SYNC_HISTORY_LIMIT = int(os.getenv("SYNC_HISTORY_LIMIT", "500"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
