from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..core.exceptions import DependencyError
from .base import StorageBackend, StoredObject

logger = logging.getLogger(__name__)


class S3Storage(StorageBackend):
    def __init__(self, client, bucket: str, *, region: str, public_base_url: Optional[str] = None):
        self._client = client
        self._bucket = bucket
        self._region = region
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def _url_for(self, key: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    def upload(self, fileobj: BinaryIO, name: str, content_type: str) -> StoredObject:
        key = name.lstrip("/")
        try:
            self._client.upload_fileobj(fileobj, self._bucket, key, ExtraArgs={"ContentType": content_type})
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload of %s to bucket %s failed: %s", key, self._bucket, exc)
            raise DependencyError("File storage failed") from exc
        return StoredObject(url=self._url_for(key), key=key)
