import os

from config.config import *  # noqa: F401,F403
from config.config import env_bool

# No fallbacks here: startup fails if these are missing.
SECRET_KEY = os.getenv("SECRET_KEY")
QR_SECRET = os.getenv("QR_SECRET")

DEBUG = False
ALLOW_DEFAULT_QR_SECRET = False
ENABLE_DEBUG_ENDPOINTS = False

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "0")
