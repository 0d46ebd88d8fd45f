import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# mysql | memory
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

# Local calendar offset from UTC; "today" and future checks use it.
TIMEZONE_OFFSET_MINUTES = int(os.getenv("TIMEZONE_OFFSET_MINUTES", "330"))

PANEL_INDEX_PATH = os.getenv("PANEL_INDEX_PATH", "panel/index")
PANEL_CONFIG_TTL_SECONDS = float(os.getenv("PANEL_CONFIG_TTL_SECONDS", "300"))
SESSION_LIST_LIMIT = int(os.getenv("SESSION_LIST_LIMIT", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = bool(int(os.getenv("DEBUG", "1")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
