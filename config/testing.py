SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "attendx_test",
}

DEFAULT_RADIUS_METERS = 100.0
ENFORCE_KEY_EXPIRY = True

GEMINI_API_KEY = None
GEMINI_MODEL = "gemini-2.5-flash"

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = False
