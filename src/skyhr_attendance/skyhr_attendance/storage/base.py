from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Protocol


@dataclass(frozen=True)
class StoredObject:
    url: str
    key: str


class StorageBackend(Protocol):
    """Uniform upload contract shared by the local and S3 backends."""

    def upload(self, fileobj: BinaryIO, name: str, content_type: str) -> StoredObject:
        raise NotImplementedError


def file_extension(content_type: str) -> str:
    if "jpeg" in content_type:
        return "jpg"
    return content_type.split("/")[-1] or "bin"
