"""Settings shared by every environment module (read from the process env)."""

import os


def env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "skyhr_attendance"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Base64-encoded shared secret used to obfuscate location QR payloads.
QR_SECRET = os.getenv("QR_SECRET")

FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "90"))
FACE_MAX_MATCHES = int(os.getenv("FACE_MAX_MATCHES", "1"))
FACE_COLLECTION_PREFIX = os.getenv("FACE_COLLECTION_PREFIX", "skyhr_org_")

AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", "uploads")
LOCAL_STORAGE_BASE_URL = os.getenv("LOCAL_STORAGE_BASE_URL", "/uploads")
S3_BUCKET = os.getenv("S3_BUCKET")
S3_PUBLIC_BASE_URL = os.getenv("S3_PUBLIC_BASE_URL")

DEFAULT_GRACE_MINUTES = int(os.getenv("DEFAULT_GRACE_MINUTES", "5"))
DEFAULT_EARLY_TOLERANCE_MINUTES = int(os.getenv("DEFAULT_EARLY_TOLERANCE_MINUTES", "60"))
