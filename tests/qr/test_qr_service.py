import pytest

from src.skyhr_attendance.skyhr_attendance.core.exceptions import AuthorizationError, DecodeError, ValidationError
from src.skyhr_attendance.skyhr_attendance.qr.obfuscation import obfuscate_json_payload


def test_resolve_location_returns_active_geofence(world):
    geofence = world.qr_service.resolve_location(world.token(), "org1")

    assert geofence.geofence_id == "geo1"


def test_resolve_location_rejects_foreign_organization(world):
    with pytest.raises(AuthorizationError, match="does not belong"):
        world.qr_service.resolve_location(world.token(organization_id="org2", location_id="geo2"), "org1")


def test_resolve_location_rejects_inactive_geofence(world):
    with pytest.raises(AuthorizationError, match="inactive"):
        world.qr_service.resolve_location(world.token(location_id="geo-off"), "org1")


def test_deactivating_a_geofence_invalidates_existing_qr(world):
    token = world.token()
    world.geofence_service.deactivate(geofence_id="geo1", organization_id="org1")

    with pytest.raises(AuthorizationError):
        world.qr_service.resolve_location(token, "org1")


def test_parse_rejects_payload_without_location(world):
    token = obfuscate_json_payload({"organization_id": "org1"}, "test-qr-secret")

    with pytest.raises(DecodeError):
        world.qr_service.parse(token)


def test_parse_requires_qr_data(world):
    with pytest.raises(ValidationError):
        world.qr_service.parse("  ")


def test_register_location_uploads_png(world):
    token, stored = world.qr_service.register_location(organization_id="org1", location_id="geo1")

    assert stored.key == "qr/location/geo1.png"
    assert world.storage.objects[stored.key].startswith(b"\x89PNG")
    assert world.qr_service.parse(token).location_id == "geo1"


def test_register_location_requires_owned_active_geofence(world):
    with pytest.raises(AuthorizationError):
        world.qr_service.register_location(organization_id="org1", location_id="geo2")
