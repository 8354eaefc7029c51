from datetime import date, datetime

import pytest

from src.skyhr_attendance.skyhr_attendance.biometrics.gate import FaceMatch
from src.skyhr_attendance.skyhr_attendance.core.enums import AttendanceStatus
from src.skyhr_attendance.skyhr_attendance.core.exceptions import (
    AuthorizationError,
    ConflictError,
    DecodeError,
    ValidationError,
)
from src.skyhr_attendance.skyhr_attendance.members.model import Identity

IMAGE = b"\xff\xd8face"


def _check_in(world, identity, *, token=None, lat="10.0", lon="20.0", now=None):
    return world.attendance_service.check_in(
        identity,
        qr_data=token or world.token(),
        image_bytes=IMAGE,
        latitude=lat,
        longitude=lon,
        now=now,
    )


def test_end_to_end_check_in_inside_geofence(world, member_identity):
    result = _check_in(world, member_identity)
    event = result.event

    assert result.message == "Attendance recorded successfully"
    assert event.is_within_geofence is True
    assert event.distance_to_geofence_m == 0
    assert event.status == AttendanceStatus.ON_TIME
    assert event.shift_id == 1
    assert event.face_confidence == "98"
    assert event.is_verified is True
    assert event.geofence_id == "geo1"
    assert event.latitude == "10.0"
    assert world.face_gate.calls == ["org1"]


def test_fractional_similarity_is_kept(world, member_identity):
    world.face_gate.match = FaceMatch(external_id="u1", similarity=97.25)

    assert _check_in(world, member_identity).event.face_confidence == "97.25"


def test_out_of_bounds_overrides_on_time(world, member_identity):
    # ~111 m north of the 50 m geofence, at an on-time moment.
    result = _check_in(world, member_identity, lat="10.001", lon="20.0")
    event = result.event

    assert result.message == "Attendance recorded but flagged as out of bounds"
    assert event.status == AttendanceStatus.OUT_OF_BOUNDS
    assert event.is_within_geofence is False
    assert event.notes == f"Check-in {event.distance_to_geofence_m}m from geofence (radius: 50m)."


def test_out_of_bounds_keeps_timing_note(world, member_identity):
    event = _check_in(world, member_identity, lat="10.001", now=datetime(2025, 1, 6, 8, 40)).event

    assert event.status == AttendanceStatus.OUT_OF_BOUNDS
    assert event.notes.endswith("(radius: 50m). Late by 40 minutes")


def test_duplicate_check_in_is_rejected_even_with_valid_qr(world, member_identity):
    _check_in(world, member_identity)
    world.face_gate.calls.clear()

    with pytest.raises(ConflictError, match="already have an active check-in"):
        _check_in(world, member_identity, now=datetime(2025, 1, 6, 9, 0))
    assert world.face_gate.calls == []


def test_check_in_again_after_check_out_is_allowed(world, member_identity):
    _check_in(world, member_identity)
    world.attendance_service.check_out(member_identity, latitude="10.0", longitude="20.0", now=datetime(2025, 1, 6, 12, 0))

    second = _check_in(world, member_identity, now=datetime(2025, 1, 6, 13, 0))

    assert second.event.check_out is None


def test_face_of_another_user_is_rejected(world, member_identity):
    world.face_gate.match = FaceMatch(external_id="u2", similarity=99.9)

    with pytest.raises(AuthorizationError, match="Face does not match"):
        _check_in(world, member_identity)
    assert world.attendance.events == {}


def test_no_face_match_is_rejected(world, member_identity):
    world.face_gate.match = None

    with pytest.raises(AuthorizationError):
        _check_in(world, member_identity)


def test_similarity_below_threshold_is_rejected(world, member_identity):
    world.face_gate.match = FaceMatch(external_id="u1", similarity=80.0)

    with pytest.raises(AuthorizationError):
        _check_in(world, member_identity)


def test_qr_of_another_organization_is_rejected(world, member_identity):
    with pytest.raises(AuthorizationError, match="does not belong"):
        _check_in(world, member_identity, token=world.token(organization_id="org2", location_id="geo2"))


def test_inactive_geofence_is_rejected(world, member_identity):
    with pytest.raises(AuthorizationError, match="inactive"):
        _check_in(world, member_identity, token=world.token(location_id="geo-off"))


def test_garbage_qr_is_rejected(world, member_identity):
    with pytest.raises(DecodeError):
        _check_in(world, member_identity, token="deadbeef")


@pytest.mark.parametrize("lat,lon", [("", "20.0"), ("10.0", None), ("abc", "20.0")])
def test_coordinates_are_required(world, member_identity, lat, lon):
    with pytest.raises(ValidationError):
        _check_in(world, member_identity, lat=lat, lon=lon)


def test_image_is_required(world, member_identity):
    with pytest.raises(ValidationError, match="qr_data and image are required"):
        world.attendance_service.check_in(
            member_identity, qr_data=world.token(), image_bytes=b"", latitude="10", longitude="20"
        )


def test_non_member_cannot_check_in(world):
    with pytest.raises(AuthorizationError):
        _check_in(world, Identity(user_id="stranger", organization_id="org1"))


def test_check_out_reports_whole_minutes(world, member_identity):
    _check_in(world, member_identity)

    result = world.attendance_service.check_out(
        member_identity, latitude="10.0", longitude="20.0", now=datetime(2025, 1, 6, 17, 5, 59)
    )

    # 08:03:00 -> 17:05:59
    assert result.work_duration_minutes == 542
    assert result.event.check_out == datetime(2025, 1, 6, 17, 5, 59)
    assert result.event.is_within_geofence is True


def test_check_out_outside_geofence_keeps_check_in_containment(world, member_identity):
    _check_in(world, member_identity)

    result = world.attendance_service.check_out(member_identity, latitude="10.01", longitude="20.0")

    assert result.event.is_within_geofence is True
    assert result.event.distance_to_geofence_m == 0
    assert result.event.status == AttendanceStatus.ON_TIME


def test_check_out_inside_geofence_keeps_out_of_bounds_evidence(world, member_identity):
    flagged = _check_in(world, member_identity, lat="10.002").event

    result = world.attendance_service.check_out(member_identity, latitude="10.0", longitude="20.0")

    assert result.event.status == AttendanceStatus.OUT_OF_BOUNDS
    assert result.event.is_within_geofence is False
    assert result.event.distance_to_geofence_m == flagged.distance_to_geofence_m
    assert world.attendance_service.report(Identity("admin1", "org1"))[0].is_within_geofence is False


def test_check_out_without_session_fails(world, member_identity):
    with pytest.raises(ValidationError, match="No active check-in"):
        world.attendance_service.check_out(member_identity, latitude="10.0", longitude="20.0")


def test_admin_operations_require_admin_role(world, member_identity):
    with pytest.raises(AuthorizationError, match="Admin or owner"):
        world.attendance_service.mark_absences(member_identity)
    with pytest.raises(AuthorizationError):
        world.attendance_service.report(member_identity)
    with pytest.raises(AuthorizationError):
        world.attendance_service.update_status(member_identity, "x", "late")


def test_admin_can_correct_status(world, member_identity, admin_identity):
    event = _check_in(world, member_identity, lat="10.001").event

    corrected = world.attendance_service.update_status(admin_identity, event.event_id, "on_time", "GPS drift")

    assert corrected.status == AttendanceStatus.ON_TIME
    assert corrected.notes == "GPS drift"
    assert world.attendance_service.report(admin_identity) == []


def test_overnight_shift_check_in_and_check_out(world, member_identity):
    for day in (date(2025, 1, 6), date(2025, 1, 7)):
        world.schedules.assign("u1", "org1", day, 4)

    event = _check_in(world, member_identity, now=datetime(2025, 1, 7, 0, 30)).event
    assert event.status == AttendanceStatus.LATE
    assert event.notes == "Late by 150 minutes"
    assert event.work_date == date(2025, 1, 6)

    with pytest.raises(ConflictError):
        _check_in(world, member_identity, now=datetime(2025, 1, 7, 1, 0))

    result = world.attendance_service.check_out(
        member_identity, latitude="10.0", longitude="20.0", now=datetime(2025, 1, 7, 6, 30)
    )
    assert result.event.event_id == event.event_id
    assert result.work_duration_minutes == 360
