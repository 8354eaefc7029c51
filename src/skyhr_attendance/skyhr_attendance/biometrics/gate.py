from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class FaceMatch:
    """Best candidate returned by the face oracle for a probe image."""

    external_id: Optional[str]
    similarity: float

    @property
    def similarity_text(self) -> str:
        # 98.0 -> "98", 97.25 -> "97.25"
        if float(self.similarity).is_integer():
            return str(int(self.similarity))
        return str(self.similarity)


class FaceMatchGate(Protocol):
    """Similarity-search oracle scoped to one organization's face collection.

    No image processing happens locally; the oracle owns all vision logic.
    """

    def search_best_match(self, image_bytes: bytes, organization_id: str) -> Optional[FaceMatch]:
        raise NotImplementedError

    def index_face(self, image_bytes: bytes, external_id: str, organization_id: str) -> str:
        """Enroll a face under ``external_id``; returns the oracle's face id."""

        raise NotImplementedError
