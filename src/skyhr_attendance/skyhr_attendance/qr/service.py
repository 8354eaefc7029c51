from __future__ import annotations

import io
import logging

import qrcode

from ..common.validators import require_non_empty
from ..core.constants import QR_IMAGE_BORDER, QR_IMAGE_BOX_SIZE
from ..core.exceptions import AuthorizationError
from ..geofence.model import Geofence
from ..geofence.service import GeofenceService
from ..storage.base import StorageBackend, StoredObject
from .model import QrPayload
from .obfuscation import deobfuscate_json_payload, obfuscate_json_payload

logger = logging.getLogger(__name__)


class QrService:
    def __init__(self, secret: str, geofences: GeofenceService, storage: StorageBackend):
        if not secret:
            raise ValueError("QR secret is required")
        self._secret = secret
        self._geofences = geofences
        self._storage = storage

    def build_token(self, payload: QrPayload) -> str:
        return obfuscate_json_payload(payload.to_dict(), self._secret)

    def parse(self, qr_data: str) -> QrPayload:
        qr_data = require_non_empty(qr_data, "qr_data")
        return QrPayload.from_dict(deobfuscate_json_payload(qr_data, self._secret))

    def resolve_location(self, qr_data: str, organization_id: str) -> Geofence:
        """Decode ``qr_data`` and return the active geofence it points at.

        The payload must name the caller's organization and the geofence must
        still be active and owned by it.
        """
        payload = self.parse(qr_data)
        if payload.organization_id != organization_id:
            logger.warning(
                "QR organization mismatch: qr_org=%s active_org=%s", payload.organization_id, organization_id
            )
            raise AuthorizationError("QR does not belong to active organization")

        geofence = self._geofences.find_active(geofence_id=payload.location_id, organization_id=organization_id)
        if not geofence:
            raise AuthorizationError("Location not allowed or inactive")
        return geofence

    def render_png(self, token: str) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=QR_IMAGE_BOX_SIZE,
            border=QR_IMAGE_BORDER,
        )
        qr.add_data(token)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def register_location(self, *, organization_id: str, location_id: str) -> tuple[str, StoredObject]:
        """Render the QR code for an active geofence and upload it. Returns (token, stored object)."""
        location_id = require_non_empty(location_id, "location_id")
        geofence = self._geofences.find_active(geofence_id=location_id, organization_id=organization_id)
        if not geofence:
            raise AuthorizationError("Location not allowed or inactive")

        token = self.build_token(QrPayload(organization_id=organization_id, location_id=geofence.geofence_id))
        stored = self._storage.upload(
            io.BytesIO(self.render_png(token)),
            f"qr/location/{geofence.geofence_id}.png",
            "image/png",
        )
        logger.info("QR registered for location %s (organization %s): %s", location_id, organization_id, stored.key)
        return token, stored
