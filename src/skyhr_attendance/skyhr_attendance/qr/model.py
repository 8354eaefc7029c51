from __future__ import annotations

from dataclasses import asdict, dataclass

from ..core.exceptions import DecodeError


@dataclass(frozen=True)
class QrPayload:
    """What a location QR code carries. No expiry: validity is re-checked on every use."""

    organization_id: str
    location_id: str

    @classmethod
    def from_dict(cls, data) -> "QrPayload":
        if not isinstance(data, dict):
            raise DecodeError("Invalid or malformed QR: payload must be an object")
        org_id = data.get("organization_id")
        location_id = data.get("location_id")
        if not isinstance(org_id, str) or not org_id.strip():
            raise DecodeError("Invalid or malformed QR: organization_id missing")
        if not isinstance(location_id, str) or not location_id.strip():
            raise DecodeError("Invalid or malformed QR: location_id missing")
        return cls(organization_id=org_id, location_id=location_id)

    def to_dict(self) -> dict:
        return asdict(self)
