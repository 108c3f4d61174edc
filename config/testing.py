import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

API_TOKEN = None

LINK_DELAY_SECONDS = 0.0
CONNECT_TIMEOUT_SECONDS = 1.0
FAILING_DEVICE_IDS = ("device-003",)

SYNC_HISTORY_LIMIT = 20

AUTO_INIT_DB = False
