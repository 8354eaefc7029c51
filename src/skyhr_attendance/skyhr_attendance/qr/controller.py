from __future__ import annotations

from flask import Flask

from ..common.web import form_or_json, login_required
from ..container import Container
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.http import success_response
from ..members.model import Identity
from .obfuscation import deobfuscate_json_payload


def register(app: Flask, container: Container) -> None:
    qr = container.qr_service
    membership = container.membership_service
    settings = container.settings

    @app.route("/qr/register-location", methods=["POST"], endpoint="qr_register_location")
    @login_required
    def register_location(identity: Identity):
        membership.require_admin(identity)
        organization_id = form_or_json("organization_id") or identity.organization_id
        if str(organization_id) != identity.organization_id:
            raise AuthorizationError("Cannot register locations for another organization")
        location_id = form_or_json("location_id")
        if not location_id:
            raise ValidationError("Organization ID and location ID are required")

        _, stored = qr.register_location(organization_id=identity.organization_id, location_id=str(location_id))
        return success_response(
            "Location registered successfully",
            {"url": stored.url, "file_name": stored.key},
            status=201,
        )

    @app.route("/qr/deobfuscate", methods=["POST"], endpoint="qr_deobfuscate")
    @login_required
    def deobfuscate(identity: Identity):
        if not settings.enable_debug_endpoints:
            raise NotFoundError("Not found")
        membership.require_admin(identity)
        obfuscated = form_or_json("obfuscated_data")
        if not obfuscated or not str(obfuscated).strip():
            raise ValidationError("obfuscated_data is required")
        payload = deobfuscate_json_payload(str(obfuscated), settings.qr_secret)
        return success_response("Data deobfuscated successfully", payload)
