import os

# json | mysql | memory
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "json")
DATA_DIR = os.getenv("DATA_DIR", "data")
STORAGE_PREFIX = os.getenv("STORAGE_PREFIX", "sms_")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_records"),
}
MYSQL_TABLE = os.getenv("MYSQL_TABLE", "entity_collections")
# Seconds to wait for another process holding a collection lock (GET_LOCK)
MYSQL_LOCK_TIMEOUT = int(os.getenv("MYSQL_LOCK_TIMEOUT", "10"))

# sequence ("1", "2", ...) | token ("<millis>_<random>")
ID_STRATEGY = os.getenv("ID_STRATEGY", "sequence")
RECORD_TIMESTAMPS = bool(int(os.getenv("RECORD_TIMESTAMPS", "1")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE") or None

DEBUG = True

# If enabled, the mysql table is created on startup (CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: seed demo data into empty collections on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
