from __future__ import annotations

import logging
import re
import threading
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..core.exceptions import DependencyError, NotFoundError
from ..organizations.repository import OrganizationRepository

logger = logging.getLogger(__name__)


def error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


class FaceCollectionRegistry:
    """Organization id -> Rekognition collection id.

    Ids are resolved lazily from the organization row and cached for the life
    of the process. ``create_for``/``delete_for`` follow the organization's
    own lifecycle.
    """

    def __init__(self, client, organizations: OrganizationRepository, *, prefix: str):
        self._client = client
        self._organizations = organizations
        self._prefix = prefix
        self._cache: dict[str, str] = {}
        self._lock = threading.Lock()

    def collection_name(self, organization_id: str) -> str:
        # Collection names allow only alphanumerics and underscores.
        return f"{self._prefix}{re.sub(r'[^a-zA-Z0-9]', '_', organization_id)}"

    def cached(self, organization_id: str) -> Optional[str]:
        with self._lock:
            return self._cache.get(organization_id)

    def collection_id_for(self, organization_id: str) -> str:
        cached = self.cached(organization_id)
        if cached:
            return cached

        org = self._organizations.get_by_id(organization_id)
        if not org or not org.rekognition_collection_id:
            logger.error("No face collection registered for organization %s", organization_id)
            raise DependencyError(f"No face collection found for organization: {organization_id}")

        with self._lock:
            self._cache[organization_id] = org.rekognition_collection_id
        return org.rekognition_collection_id

    def create_for(self, organization_id: str) -> str:
        if not self._organizations.get_by_id(organization_id):
            raise NotFoundError("Organization not found")

        collection_id = self.collection_name(organization_id)
        try:
            self._client.create_collection(CollectionId=collection_id)
        except ClientError as exc:
            if error_code(exc) != "ResourceAlreadyExistsException":
                logger.error("Creating collection %s failed: %s", collection_id, exc)
                raise DependencyError("Face collection creation failed") from exc
            logger.info("Collection %s already exists; reusing it", collection_id)
        except BotoCoreError as exc:
            logger.error("Creating collection %s failed: %s", collection_id, exc)
            raise DependencyError("Face collection creation failed") from exc

        self._organizations.set_collection_id(organization_id, collection_id)
        with self._lock:
            self._cache[organization_id] = collection_id
        logger.info("Created face collection %s for organization %s", collection_id, organization_id)
        return collection_id

    def delete_for(self, organization_id: str) -> Optional[str]:
        org = self._organizations.get_by_id(organization_id)
        if not org:
            raise NotFoundError("Organization not found")

        collection_id = org.rekognition_collection_id or self.cached(organization_id)
        if collection_id:
            try:
                self._client.delete_collection(CollectionId=collection_id)
            except ClientError as exc:
                if error_code(exc) != "ResourceNotFoundException":
                    logger.error("Deleting collection %s failed: %s", collection_id, exc)
                    raise DependencyError("Face collection deletion failed") from exc
            except BotoCoreError as exc:
                logger.error("Deleting collection %s failed: %s", collection_id, exc)
                raise DependencyError("Face collection deletion failed") from exc

        self._organizations.set_collection_id(organization_id, None)
        with self._lock:
            self._cache.pop(organization_id, None)
        logger.info("Deleted face collection %s for organization %s", collection_id, organization_id)
        return collection_id
