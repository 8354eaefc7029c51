from __future__ import annotations

from flask import Flask

from ..common.web import json_body, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from ..core.http import success_response
from ..members.model import Identity


def register(app: Flask, container: Container) -> None:
    geofences = container.geofence_service
    membership = container.membership_service

    @app.route("/geofence/create", methods=["POST"], endpoint="geofence_create")
    @login_required
    def create_geofence(identity: Identity):
        membership.require_admin(identity)
        body = json_body()
        missing = [k for k in ("name", "center_latitude", "center_longitude", "radius") if body.get(k) in (None, "")]
        if missing:
            raise ValidationError("name, center_latitude, center_longitude and radius are required")

        geofence = geofences.create(
            organization_id=identity.organization_id,
            name=body.get("name"),
            center_latitude=body.get("center_latitude"),
            center_longitude=body.get("center_longitude"),
            radius=body.get("radius"),
            geofence_type=body.get("type") or "circular",
        )
        return success_response("Geofence created successfully", geofence.to_dict(), status=201)

    @app.route("/geofence/get", methods=["POST"], endpoint="geofence_get")
    @login_required
    def get_geofence(identity: Identity):
        membership.require_member(identity)
        geofence_id = json_body().get("id")
        if not geofence_id:
            raise ValidationError("Geofence ID is required")
        geofence = geofences.get(geofence_id=str(geofence_id), organization_id=identity.organization_id)
        return success_response("Geofence found", geofence.to_dict())

    @app.route("/geofence/is-in", methods=["POST"], endpoint="geofence_is_in")
    @login_required
    def is_in_geofence(identity: Identity):
        membership.require_member(identity)
        body = json_body()
        if body.get("latitude") in (None, "") or body.get("longitude") in (None, "") or not body.get("geofence_id"):
            raise ValidationError("Latitude, longitude and geofence_id are required")

        check = geofences.check_point(
            geofence_id=str(body["geofence_id"]),
            organization_id=identity.organization_id,
            latitude=body["latitude"],
            longitude=body["longitude"],
        )
        return success_response(
            "User is in geofence" if check.is_within else "User is outside geofence",
            {"is_in_geofence": check.is_within, "distance_m": check.rounded_distance_m},
        )

    @app.route("/geofence/<geofence_id>/deactivate", methods=["POST"], endpoint="geofence_deactivate")
    @login_required
    def deactivate_geofence(geofence_id: str, identity: Identity):
        membership.require_admin(identity)
        geofence = geofences.deactivate(geofence_id=geofence_id, organization_id=identity.organization_id)
        return success_response("Geofence deactivated", geofence.to_dict())
