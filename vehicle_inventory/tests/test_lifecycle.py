import pytest

from conftest import make_item
from vehicle_inventory.core.exceptions import (
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from vehicle_inventory.models.database import InventoryItem, LocationTransfer, VehicleStatus
from vehicle_inventory.services.inventory_service import InventoryService
from vehicle_inventory.services.lifecycle_service import LifecycleService
from vehicle_inventory.services.stats_service import InventoryStatsService


@pytest.fixture
def inventory(test_db):
    return InventoryService(test_db)


@pytest.fixture
def lifecycle(test_db):
    return LifecycleService(test_db)


def assert_sold_flag_consistent(items):
    for item in items:
        assert item.is_sold == (item.status == VehicleStatus.SOLD and item.sold_date is not None)


class TestSell:
    """Selling and restocking"""

    def test_sell_scenario(self, inventory, lifecycle, test_db):
        """A sold Mercedes leaves the active total and shows up in the sold counter"""
        item = inventory.create(make_item(chassis_number="CH1", manufacturer="Mercedes"))
        lifecycle.sell(item.id)

        sold = inventory.get(item.id)
        assert sold.status == VehicleStatus.SOLD
        assert sold.is_sold is True
        assert sold.sold_date is not None

        stats = InventoryStatsService(test_db).inventory_stats()
        assert stats["total"] == 0
        assert stats["sold"] == 1

    def test_sell_is_terminal(self, inventory, lifecycle):
        """Selling twice is refused and the original sale date is kept"""
        item = inventory.create(make_item())
        sold_date = lifecycle.sell(item.id).sold_date

        with pytest.raises(InvalidStatusTransitionError):
            lifecycle.sell(item.id)
        assert inventory.get(item.id).sold_date == sold_date

    def test_sell_clears_reservation(self, inventory, lifecycle):
        item = inventory.create(make_item())
        lifecycle.reserve(item.id, "Omar", "deposit paid")

        sold = lifecycle.sell(item.id)
        assert sold.reserved_by is None
        assert sold.reservation_note is None

    def test_sell_missing_item(self, lifecycle):
        with pytest.raises(NotFoundError):
            lifecycle.sell(99999)

    def test_restock(self, inventory, lifecycle):
        item = inventory.create(make_item())
        lifecycle.sell(item.id)

        restocked = lifecycle.restock(item.id)
        assert restocked.status == VehicleStatus.AVAILABLE
        assert restocked.is_sold is False
        assert restocked.sold_date is None

    def test_restock_requires_sold_item(self, inventory, lifecycle):
        item = inventory.create(make_item())
        with pytest.raises(InvalidStatusTransitionError):
            lifecycle.restock(item.id)

    def test_sold_flag_matches_status(self, inventory, lifecycle, test_db):
        for index, status in enumerate(VehicleStatus):
            kwargs = {"reserved_by": "Omar"} if status == VehicleStatus.RESERVED else {}
            inventory.create(make_item(chassis_number=f"CH{index}", status=status, **kwargs))
        lifecycle.sell(1)
        lifecycle.restock(1)

        assert_sold_flag_consistent(test_db.query(InventoryItem).all())


class TestReservation:
    """Reserving and cancelling reservations"""

    def test_reserve(self, inventory, lifecycle):
        item = inventory.create(make_item())
        reserved = lifecycle.reserve(item.id, "Omar", "until Friday")

        assert reserved.status == VehicleStatus.RESERVED
        assert reserved.reserved_by == "Omar"
        assert reserved.reservation_note == "until Friday"
        assert reserved.reservation_date is not None

    def test_reserve_requires_reserved_by(self, inventory, lifecycle):
        item = inventory.create(make_item())
        with pytest.raises(ValidationError):
            lifecycle.reserve(item.id, "   ")

    def test_reserve_sold_item_refused(self, inventory, lifecycle):
        item = inventory.create(make_item())
        lifecycle.sell(item.id)

        with pytest.raises(InvalidStatusTransitionError):
            lifecycle.reserve(item.id, "Omar")
        assert inventory.get(item.id).reserved_by is None

    def test_reserve_missing_item(self, lifecycle):
        with pytest.raises(NotFoundError):
            lifecycle.reserve(99999, "Omar")

    def test_cancel_reservation_is_idempotent(self, inventory, lifecycle):
        """Cancelling restores availability; a second cancel changes nothing"""
        item = inventory.create(make_item())
        lifecycle.reserve(item.id, "Omar", "note")

        for _ in range(2):
            cancelled = lifecycle.cancel_reservation(item.id)
            assert cancelled.status == VehicleStatus.AVAILABLE
            assert cancelled.reserved_by is None
            assert cancelled.reservation_date is None
            assert cancelled.reservation_note is None

    def test_cancel_on_unreserved_item_keeps_status(self, inventory, lifecycle):
        item = inventory.create(make_item(status=VehicleStatus.MAINTENANCE))
        assert lifecycle.cancel_reservation(item.id).status == VehicleStatus.MAINTENANCE

    def test_cancel_missing_item(self, lifecycle):
        with pytest.raises(NotFoundError):
            lifecycle.cancel_reservation(99999)


class TestTransfer:
    """Moving items between locations"""

    def test_transfer_to_same_location_is_not_logged(self, inventory, lifecycle, test_db):
        item = inventory.create(make_item(location="Showroom"))
        lifecycle.transfer(item.id, "Showroom")

        assert test_db.query(LocationTransfer).count() == 0

    def test_transfer_appends_one_record(self, inventory, lifecycle, test_db):
        item = inventory.create(make_item(location="Showroom"))
        moved = lifecycle.transfer(item.id, "Port", reason="shipping", transferred_by="Sara")

        assert moved.location == "Port"
        transfers = test_db.query(LocationTransfer).all()
        assert len(transfers) == 1
        assert transfers[0].inventory_item_id == item.id
        assert transfers[0].from_location == "Showroom"
        assert transfers[0].to_location == "Port"
        assert transfers[0].reason == "shipping"
        assert transfers[0].transferred_by == "Sara"
        assert transfers[0].transfer_date is not None

    def test_transfer_missing_item(self, lifecycle):
        with pytest.raises(NotFoundError):
            lifecycle.transfer(99999, "Port")

    def test_deleting_item_removes_its_transfers(self, inventory, lifecycle, test_db):
        item = inventory.create(make_item(location="Showroom"))
        lifecycle.transfer(item.id, "Port")
        inventory.delete(item.id)

        assert test_db.query(LocationTransfer).count() == 0
