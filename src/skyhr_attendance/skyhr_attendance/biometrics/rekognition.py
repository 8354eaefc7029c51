from __future__ import annotations

import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..core.exceptions import DependencyError, ValidationError
from .collections import FaceCollectionRegistry, error_code
from .gate import FaceMatch, FaceMatchGate

logger = logging.getLogger(__name__)


class RekognitionFaceGate(FaceMatchGate):
    """Face match gate backed by AWS Rekognition collections (one per organization)."""

    def __init__(self, client, registry: FaceCollectionRegistry, *, threshold: float, max_faces: int = 1):
        self._client = client
        self._registry = registry
        self._threshold = float(threshold)
        self._max_faces = int(max_faces)

    def search_best_match(self, image_bytes: bytes, organization_id: str) -> Optional[FaceMatch]:
        collection_id = self._registry.collection_id_for(organization_id)
        try:
            response = self._client.search_faces_by_image(
                CollectionId=collection_id,
                Image={"Bytes": image_bytes},
                MaxFaces=self._max_faces,
                FaceMatchThreshold=self._threshold,
            )
        except ClientError as exc:
            if error_code(exc) == "InvalidParameterException":
                # Raised when the probe image contains no detectable face.
                logger.info("No face detected in probe image (organization %s)", organization_id)
                return None
            logger.error("Face search failed for organization %s: %s", organization_id, exc)
            raise DependencyError("Face search failed") from exc
        except BotoCoreError as exc:
            logger.error("Face search failed for organization %s: %s", organization_id, exc)
            raise DependencyError("Face search failed") from exc

        matches = response.get("FaceMatches") or []
        if not matches:
            return None

        best = matches[0]
        return FaceMatch(
            external_id=(best.get("Face") or {}).get("ExternalImageId"),
            similarity=float(best.get("Similarity") or 0),
        )

    def index_face(self, image_bytes: bytes, external_id: str, organization_id: str) -> str:
        collection_id = self._registry.collection_id_for(organization_id)
        try:
            response = self._client.index_faces(
                CollectionId=collection_id,
                Image={"Bytes": image_bytes},
                ExternalImageId=external_id,
                MaxFaces=1,
                QualityFilter="AUTO",
                DetectionAttributes=["DEFAULT"],
            )
        except ClientError as exc:
            if error_code(exc) == "InvalidParameterException":
                raise ValidationError("No face detected in image") from exc
            logger.error("Face indexing failed for organization %s: %s", organization_id, exc)
            raise DependencyError("Face indexing failed") from exc
        except BotoCoreError as exc:
            logger.error("Face indexing failed for organization %s: %s", organization_id, exc)
            raise DependencyError("Face indexing failed") from exc

        records = response.get("FaceRecords") or []
        if not records:
            raise ValidationError("No face detected in image")
        return records[0].get("Face", {}).get("FaceId", "")
