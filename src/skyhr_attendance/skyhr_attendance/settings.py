"""Typed, validated view over a ``config.*`` settings module.

The settings modules stay plain constants (one per environment); this module
turns the selected one into a frozen ``Settings`` object once at startup and
fails fast on anything missing or out of range.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import ModuleType
from typing import Optional

from .core.constants import (
    DEFAULT_COLLECTION_PREFIX,
    DEFAULT_EARLY_TOLERANCE_MINUTES,
    DEFAULT_FACE_MATCH_THRESHOLD,
    DEFAULT_FACE_MAX_MATCHES,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_QR_SECRET,
    MAX_LATE_GRACE_MINUTES,
)
from .core.exceptions import ConfigurationError
from .qr.obfuscation import decode_secret

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("local", "s3")


@dataclass(frozen=True)
class Settings:
    secret_key: str
    db_config: dict
    qr_secret: str
    debug: bool = False
    testing: bool = False
    auto_init_db: bool = False
    log_level: str = "INFO"
    enable_debug_endpoints: bool = False

    face_match_threshold: float = DEFAULT_FACE_MATCH_THRESHOLD
    face_max_matches: int = DEFAULT_FACE_MAX_MATCHES
    face_collection_prefix: str = DEFAULT_COLLECTION_PREFIX

    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = field(default=None, repr=False)
    aws_secret_access_key: Optional[str] = field(default=None, repr=False)

    storage_backend: str = "local"
    local_storage_dir: str = "uploads"
    local_storage_base_url: str = "/uploads"
    s3_bucket: Optional[str] = None
    s3_public_base_url: Optional[str] = None

    default_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    default_early_tolerance_minutes: int = DEFAULT_EARLY_TOLERANCE_MINUTES

    def aws_client_kwargs(self) -> dict:
        kwargs = {"region_name": self.aws_region}
        if self.aws_access_key_id and self.aws_secret_access_key:
            kwargs["aws_access_key_id"] = self.aws_access_key_id
            kwargs["aws_secret_access_key"] = self.aws_secret_access_key
        return kwargs


def _resolve_qr_secret(module: ModuleType) -> str:
    raw = getattr(module, "QR_SECRET", None)
    if raw and str(raw).strip():
        return decode_secret(str(raw).strip())
    if getattr(module, "ALLOW_DEFAULT_QR_SECRET", False):
        logger.warning("QR_SECRET is not set; using the built-in development secret")
        return DEFAULT_QR_SECRET
    raise ConfigurationError("QR_SECRET must be set (base64-encoded shared secret)")


def load_settings(module: ModuleType) -> Settings:
    secret_key = getattr(module, "SECRET_KEY", None)
    if not secret_key:
        raise ConfigurationError("SECRET_KEY must be set")

    db_config = getattr(module, "DB_CONFIG", None)
    if not isinstance(db_config, dict) or not db_config.get("database"):
        raise ConfigurationError("DB_CONFIG must define at least a database name")

    threshold = float(getattr(module, "FACE_MATCH_THRESHOLD", DEFAULT_FACE_MATCH_THRESHOLD))
    if not 0 <= threshold <= 100:
        raise ConfigurationError("FACE_MATCH_THRESHOLD must be between 0 and 100")

    grace = int(getattr(module, "DEFAULT_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES))
    if not 0 <= grace <= MAX_LATE_GRACE_MINUTES:
        raise ConfigurationError(f"DEFAULT_GRACE_MINUTES must be between 0 and {MAX_LATE_GRACE_MINUTES}")

    storage_backend = str(getattr(module, "STORAGE_BACKEND", "local")).lower()
    if storage_backend not in STORAGE_BACKENDS:
        raise ConfigurationError(f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}")
    s3_bucket = getattr(module, "S3_BUCKET", None)
    if storage_backend == "s3" and not s3_bucket:
        raise ConfigurationError("S3_BUCKET must be set when STORAGE_BACKEND=s3")

    return Settings(
        secret_key=str(secret_key),
        db_config=dict(db_config),
        qr_secret=_resolve_qr_secret(module),
        debug=bool(getattr(module, "DEBUG", False)),
        testing=bool(getattr(module, "TESTING", False)),
        auto_init_db=bool(getattr(module, "AUTO_INIT_DB", False)),
        log_level=str(getattr(module, "LOG_LEVEL", "INFO")).upper(),
        enable_debug_endpoints=bool(getattr(module, "ENABLE_DEBUG_ENDPOINTS", False)),
        face_match_threshold=threshold,
        face_max_matches=max(1, int(getattr(module, "FACE_MAX_MATCHES", DEFAULT_FACE_MAX_MATCHES))),
        face_collection_prefix=str(getattr(module, "FACE_COLLECTION_PREFIX", DEFAULT_COLLECTION_PREFIX)),
        aws_region=str(getattr(module, "AWS_REGION", "us-east-1")),
        aws_access_key_id=getattr(module, "AWS_ACCESS_KEY_ID", None),
        aws_secret_access_key=getattr(module, "AWS_SECRET_ACCESS_KEY", None),
        storage_backend=storage_backend,
        local_storage_dir=str(getattr(module, "LOCAL_STORAGE_DIR", "uploads")),
        local_storage_base_url=str(getattr(module, "LOCAL_STORAGE_BASE_URL", "/uploads")),
        s3_bucket=s3_bucket,
        s3_public_base_url=getattr(module, "S3_PUBLIC_BASE_URL", None),
        default_grace_minutes=grace,
        default_early_tolerance_minutes=max(
            0, int(getattr(module, "DEFAULT_EARLY_TOLERANCE_MINUTES", DEFAULT_EARLY_TOLERANCE_MINUTES))
        ),
    )
