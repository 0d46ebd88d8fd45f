import os

SECRET_KEY = "test-secret"

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker_test"),
}

TIMEZONE_OFFSET_MINUTES = int(os.getenv("TIMEZONE_OFFSET_MINUTES", "330"))

PANEL_INDEX_PATH = "panel/index"
PANEL_CONFIG_TTL_SECONDS = 300.0
SESSION_LIST_LIMIT = 5

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
DEBUG = False
TESTING = True

AUTO_INIT_DB = False
