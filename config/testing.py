import os

STORAGE_BACKEND = "memory"
DATA_DIR = os.getenv("DATA_DIR", "data-test")
STORAGE_PREFIX = "sms_"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_records_test"),
}
MYSQL_TABLE = "entity_collections"
MYSQL_LOCK_TIMEOUT = 1

ID_STRATEGY = "sequence"
RECORD_TIMESTAMPS = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_FILE = None

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
