from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import BinaryIO

from ..core.exceptions import DependencyError, ValidationError
from .base import StorageBackend, StoredObject

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """Store uploads under a directory served at ``base_url``."""

    def __init__(self, root_dir: str | Path, base_url: str):
        self._root = Path(root_dir).resolve()
        self._base_url = base_url.rstrip("/")

    def _target(self, name: str) -> Path:
        target = (self._root / name).resolve()
        if self._root not in target.parents:
            raise ValidationError(f"Invalid storage key: {name!r}")
        return target

    def upload(self, fileobj: BinaryIO, name: str, content_type: str) -> StoredObject:
        target = self._target(name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as out_file:
                shutil.copyfileobj(fileobj, out_file)
        except OSError as exc:
            logger.error("Local upload of %s failed: %s", name, exc)
            raise DependencyError("File storage failed") from exc

        key = target.relative_to(self._root).as_posix()
        return StoredObject(url=f"{self._base_url}/{key}", key=key)
