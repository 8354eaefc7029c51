from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import isoformat_or_none
from ..common.web import form_or_json, json_body, login_required
from ..container import Container
from ..core.http import success_response
from ..members.model import Identity


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/attendance/qr/validate", methods=["POST"], endpoint="attendance_validate_qr")
    @login_required
    def validate_qr(identity: Identity):
        data = service.validate_qr(json_body().get("qr_data"), identity)
        return success_response("QR valid", data)

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in(identity: Identity):
        image = request.files.get("image")
        result = service.check_in(
            identity,
            qr_data=request.form.get("qr_data"),
            image_bytes=image.read() if image else None,
            latitude=request.form.get("latitude"),
            longitude=request.form.get("longitude"),
        )
        event = result.event
        return success_response(
            result.message,
            {
                "id": event.event_id,
                "check_in": isoformat_or_none(event.check_in),
                "user_id": event.user_id,
                "organization_id": event.organization_id,
                "shift_id": event.shift_id,
                "status": event.status.value,
                "is_within_geofence": event.is_within_geofence,
                "distance_to_geofence_m": event.distance_to_geofence_m,
                "face_confidence": event.face_confidence,
                "is_verified": event.is_verified,
                "notes": event.notes,
            },
        )

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out(identity: Identity):
        result = service.check_out(
            identity,
            latitude=form_or_json("latitude"),
            longitude=form_or_json("longitude"),
        )
        event = result.event
        return success_response(
            "Check-out recorded successfully",
            {
                "id": event.event_id,
                "check_in": isoformat_or_none(event.check_in),
                "check_out": isoformat_or_none(event.check_out),
                "work_duration_minutes": result.work_duration_minutes,
                "status": event.status.value,
                "is_within_geofence": event.is_within_geofence,
                "is_verified": event.is_verified,
            },
        )

    @app.route("/attendance/admin/mark-absences", methods=["POST"], endpoint="attendance_mark_absences")
    @login_required
    def mark_absences(identity: Identity):
        absences = service.mark_absences(identity)
        return success_response(
            f"Marked {len(absences)} user(s) as absent",
            {
                "count": len(absences),
                "absences": [
                    {"id": a.event_id, "user_id": a.user_id, "shift_id": a.shift_id, "notes": a.notes}
                    for a in absences
                ],
            },
        )

    @app.route(
        "/attendance/admin/update-status/<event_id>", methods=["PUT"], endpoint="attendance_update_status"
    )
    @login_required
    def update_status(event_id: str, identity: Identity):
        body = json_body()
        event = service.update_status(identity, event_id, body.get("status"), body.get("notes"))
        return success_response(
            "Attendance status updated successfully",
            {
                "id": event.event_id,
                "status": event.status.value,
                "notes": event.notes,
                "updated_at": isoformat_or_none(event.updated_at),
            },
        )

    @app.route("/attendance/report", methods=["GET"], endpoint="attendance_report")
    @login_required
    def report(identity: Identity):
        events = service.report(identity)
        return success_response(
            "Attendance report retrieved successfully",
            {
                "flagged_count": len(events),
                "flagged_events": [e.to_dict() for e in events],
            },
        )
