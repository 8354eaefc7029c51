from __future__ import annotations

import boto3

from ..settings import Settings
from .base import StorageBackend
from .local import LocalStorage
from .s3 import S3Storage


def build_storage(settings: Settings) -> StorageBackend:
    """Pick the storage backend once, at process start."""
    if settings.storage_backend == "s3":
        client = boto3.client("s3", **settings.aws_client_kwargs())
        return S3Storage(
            client,
            settings.s3_bucket,
            region=settings.aws_region,
            public_base_url=settings.s3_public_base_url,
        )
    return LocalStorage(settings.local_storage_dir, settings.local_storage_base_url)
