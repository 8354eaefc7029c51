import os

from config.config import *  # noqa: F401,F403
from config.config import env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Falls back to the historical shared secret when QR_SECRET is unset.
ALLOW_DEFAULT_QR_SECRET = True
ENABLE_DEBUG_ENDPOINTS = env_bool("ENABLE_DEBUG_ENDPOINTS", "1")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")
