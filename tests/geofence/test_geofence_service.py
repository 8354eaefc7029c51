import pytest

from src.skyhr_attendance.skyhr_attendance.core.exceptions import NotFoundError, ValidationError


def test_create_stores_active_circular_geofence(world):
    gf = world.geofence_service.create(
        organization_id="org1", name="Branch", center_latitude="10.5", center_longitude="20.5", radius=120
    )

    assert gf.active is True
    assert gf.radius_m == 120
    assert world.geofences.get(geofence_id=gf.geofence_id, organization_id="org1") == gf


@pytest.mark.parametrize(
    "kwargs",
    [
        {"center_latitude": "x"},
        {"center_longitude": "200"},
        {"radius": 0},
        {"radius": 10.5},
        {"geofence_type": "polygon"},
        {"name": " "},
    ],
)
def test_create_rejects_invalid_definitions(world, kwargs):
    args = dict(organization_id="org1", name="Branch", center_latitude="10", center_longitude="20", radius=50)
    args.update(kwargs)

    with pytest.raises(ValidationError):
        world.geofence_service.create(**args)


def test_get_is_scoped_to_organization(world):
    with pytest.raises(NotFoundError):
        world.geofence_service.get(geofence_id="geo2", organization_id="org1")


def test_deactivate_marks_inactive(world):
    gf = world.geofence_service.deactivate(geofence_id="geo1", organization_id="org1")

    assert gf.active is False
    assert world.geofence_service.find_active(geofence_id="geo1", organization_id="org1") is None


def test_check_point(world):
    check = world.geofence_service.check_point(
        geofence_id="geo1", organization_id="org1", latitude="10.0", longitude="20.0"
    )

    assert check.is_within is True
