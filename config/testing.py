from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

ALLOW_DEFAULT_QR_SECRET = True
ENABLE_DEBUG_ENDPOINTS = True
AUTO_INIT_DB = False

STORAGE_BACKEND = "local"
FACE_MATCH_THRESHOLD = 90.0
