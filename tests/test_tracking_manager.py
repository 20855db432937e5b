import pytest

from errors import NotFound, PermissionDenied, ValidationError
from order_manager import OrderManager
from tracking_manager import TrackingManager


@pytest.fixture
def tracking(db):
    return TrackingManager(db)


@pytest.fixture
def tracking_id(db, alice, catalog):
    return OrderManager(db).place_order(alice, "G1", 1)['tracking']['trackingID']


def test_owner_sees_tracking(tracking, alice, tracking_id):
    record = tracking.get_tracking(alice, str(tracking_id))

    assert record['trackingID'] == tracking_id
    assert record['status'] == "ordered"
    assert record['courierName'] == "Name"


def test_other_customer_cannot_see_tracking(tracking, bob, tracking_id):
    with pytest.raises(NotFound):
        tracking.get_tracking(bob, tracking_id)


def test_employee_sees_any_tracking(tracking, employee, tracking_id):
    assert tracking.get_tracking(employee, tracking_id)['trackingID'] == tracking_id


def test_employee_updates_single_field(db, tracking, employee, tracking_id):
    db.execute_update("UPDATE TrackingInfo SET lastUpdateDate = '2000-01-01 00:00:00'")

    tracking.update_field(employee, tracking_id, "status", "shipped")

    record = db.execute_query_rows("SELECT * FROM TrackingInfo WHERE trackingID = ?", (tracking_id,))[0]
    assert record['status'] == "shipped"
    assert record['currentLocation'] == "shop"
    assert record['lastUpdateDate'] > '2000-01-01 00:00:00'


def test_manager_updates_courier(db, tracking, manager_session, tracking_id):
    tracking.update_field(manager_session, tracking_id, "courierName", "FastShip")

    assert tracking.get_tracking(manager_session, tracking_id)['courierName'] == "FastShip"


def test_customer_cannot_update_tracking(db, tracking, alice, tracking_id):
    with pytest.raises(PermissionDenied):
        tracking.update_field(alice, tracking_id, "status", "delivered")

    assert tracking.get_tracking(alice, tracking_id)['status'] == "ordered"


def test_update_rejects_unknown_field(tracking, employee, tracking_id):
    with pytest.raises(ValidationError):
        tracking.update_field(employee, tracking_id, "rentalOrderID", "1")


def test_update_unknown_tracking_id(tracking, employee):
    with pytest.raises(NotFound):
        tracking.update_field(employee, 4242, "status", "lost")


def test_out_of_range_tracking_id(tracking, employee):
    with pytest.raises(ValidationError):
        tracking.get_tracking(employee, "9" * 25)
    with pytest.raises(ValidationError):
        tracking.update_field(employee, "-" + "9" * 25, "status", "lost")
