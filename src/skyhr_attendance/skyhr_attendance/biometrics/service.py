from __future__ import annotations

import io
import logging

from ..members.model import Identity
from ..storage.base import StorageBackend, StoredObject, file_extension
from .collections import FaceCollectionRegistry
from .gate import FaceMatchGate

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png")


class BiometricsService:
    """Face enrollment and per-organization collection lifecycle."""

    def __init__(self, gate: FaceMatchGate, registry: FaceCollectionRegistry, storage: StorageBackend):
        self._gate = gate
        self._registry = registry
        self._storage = storage

    def enroll_face(self, identity: Identity, image_bytes: bytes, content_type: str) -> tuple[str, StoredObject]:
        face_id = self._gate.index_face(image_bytes, identity.user_id, identity.organization_id)
        stored = self._storage.upload(
            io.BytesIO(image_bytes),
            f"faces/{identity.organization_id}/{identity.user_id}-{face_id}-user-face.{file_extension(content_type)}",
            content_type,
        )
        logger.info("Enrolled face %s for user %s in organization %s", face_id, identity.user_id, identity.organization_id)
        return face_id, stored

    def create_collection(self, organization_id: str) -> str:
        return self._registry.create_for(organization_id)

    def delete_collection(self, organization_id: str):
        return self._registry.delete_for(organization_id)
