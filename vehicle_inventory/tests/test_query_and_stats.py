import pytest

from conftest import make_item
from vehicle_inventory.core.exceptions import ValidationError
from vehicle_inventory.models.database import ImportType, Manufacturer, VehicleStatus
from vehicle_inventory.models.schemas import InventoryFilter
from vehicle_inventory.services.inventory_service import InventoryService
from vehicle_inventory.services.lifecycle_service import LifecycleService
from vehicle_inventory.services.query_service import InventoryQueryService
from vehicle_inventory.services.stats_service import InventoryStatsService


@pytest.fixture
def fleet(test_db):
    """A small mixed fleet across manufacturers, statuses and locations"""
    inventory = InventoryService(test_db)
    items = [
        inventory.create(make_item(chassis_number="M1", manufacturer="Mercedes", status=VehicleStatus.AVAILABLE,
                                   location="Showroom", notes="Panoramic roof")),
        inventory.create(make_item(chassis_number="M2", manufacturer="Mercedes", status=VehicleStatus.IN_TRANSIT,
                                   import_type=ImportType.COMPANY, location="Port", year=2023)),
        inventory.create(make_item(chassis_number="B1", manufacturer="BMW", category="X5",
                                   status=VehicleStatus.MAINTENANCE, location="Workshop",
                                   import_type=ImportType.USED_PERSONAL)),
        inventory.create(make_item(chassis_number="B2", manufacturer="BMW", category="X5",
                                   status=VehicleStatus.RESERVED, reserved_by="Omar", location="Showroom")),
        inventory.create(make_item(chassis_number="S1", manufacturer="Mercedes", location="Showroom",
                                   exterior_color="Red")),
    ]
    LifecycleService(test_db).sell(items[-1].id)
    return items


class TestSearch:
    """Free-text search"""

    def test_search_is_case_insensitive(self, test_db, fleet):
        results = InventoryQueryService(test_db).search("mercedes")
        assert {item.chassis_number for item in results} == {"M1", "M2", "S1"}

    def test_search_includes_sold_items(self, test_db, fleet):
        results = InventoryQueryService(test_db).search("RED")
        assert [item.chassis_number for item in results] == ["S1"]

    def test_search_matches_notes_location_and_year(self, test_db, fleet):
        service = InventoryQueryService(test_db)
        assert [item.chassis_number for item in service.search("panoramic")] == ["M1"]
        assert [item.chassis_number for item in service.search("workshop")] == ["B1"]
        assert [item.chassis_number for item in service.search("2023")] == ["M2"]

    def test_search_matches_status_and_import_type(self, test_db, fleet):
        service = InventoryQueryService(test_db)
        assert [item.chassis_number for item in service.search("in_transit")] == ["M2"]
        assert [item.chassis_number for item in service.search("used_personal")] == ["B1"]

    def test_blank_search_rejected(self, test_db, fleet):
        with pytest.raises(ValidationError):
            InventoryQueryService(test_db).search("  ")


class TestFilter:
    """Predicate filtering"""

    def test_filter_combines_predicates(self, test_db, fleet):
        criteria = InventoryFilter(manufacturer="Mercedes", status=VehicleStatus.AVAILABLE)
        results = InventoryQueryService(test_db).filter(criteria)
        assert [item.chassis_number for item in results] == ["M1"]

    def test_absent_predicates_do_not_narrow(self, test_db, fleet):
        results = InventoryQueryService(test_db).filter(InventoryFilter())
        assert len(results) == len(fleet)

        results = InventoryQueryService(test_db).filter(InventoryFilter(manufacturer="BMW"))
        assert {item.chassis_number for item in results} == {"B1", "B2"}

    def test_filter_by_location_year_and_import_type(self, test_db, fleet):
        service = InventoryQueryService(test_db)
        assert len(service.filter(InventoryFilter(location="Showroom"))) == 3
        assert [i.chassis_number for i in service.filter(InventoryFilter(year=2023))] == ["M2"]
        assert [i.chassis_number for i in service.filter(InventoryFilter(import_type=ImportType.COMPANY))] == ["M2"]


class TestStats:
    """Aggregate counts"""

    def test_inventory_stats(self, test_db, fleet):
        stats = InventoryStatsService(test_db).inventory_stats()

        assert stats == {
            "total": 4,
            "available": 1,
            "in_transit": 1,
            "maintenance": 1,
            "reserved": 1,
            "sold": 1,
            "personal": 2,
            "company": 1,
            "used_personal": 1,
        }
        assert stats["available"] + stats["in_transit"] + stats["maintenance"] + stats["reserved"] == stats["total"]

    def test_empty_inventory_stats(self, test_db):
        stats = InventoryStatsService(test_db).inventory_stats()
        assert all(value == 0 for value in stats.values())

    def test_manufacturer_stats_scenario(self, test_db):
        """Two BMWs and one Audi grouped with their import types"""
        inventory = InventoryService(test_db)
        inventory.create(make_item(chassis_number="1", manufacturer="BMW", import_type=ImportType.PERSONAL))
        inventory.create(make_item(chassis_number="2", manufacturer="BMW", import_type=ImportType.COMPANY))
        inventory.create(make_item(chassis_number="3", manufacturer="Audi", import_type=ImportType.PERSONAL))

        stats = {row["manufacturer"]: row for row in InventoryStatsService(test_db).manufacturer_stats()}

        assert stats["BMW"]["total"] == 2
        assert stats["BMW"]["personal"] == 1
        assert stats["BMW"]["company"] == 1
        assert stats["Audi"]["total"] == 1
        assert stats["Audi"]["personal"] == 1

    def test_manufacturer_stats_excludes_sold_and_attaches_logo(self, test_db, fleet):
        test_db.add(Manufacturer(name="BMW", logo="https://example.com/bmw.png"))
        test_db.commit()
        # Link the existing BMW items the same way the directory does
        for item in fleet:
            if item.manufacturer == "BMW":
                item.manufacturer_id = test_db.query(Manufacturer).filter_by(name="BMW").one().id
        test_db.commit()

        stats = {row["manufacturer"]: row for row in InventoryStatsService(test_db).manufacturer_stats()}

        assert stats["Mercedes"]["total"] == 2
        assert stats["Mercedes"]["logo"] is None
        assert stats["Mercedes"]["manufacturer_id"] is None
        assert stats["BMW"]["logo"] == "https://example.com/bmw.png"

    def test_location_stats_include_sold(self, test_db, fleet):
        stats = {row["location"]: row for row in InventoryStatsService(test_db).location_stats()}

        assert stats["Showroom"] == {
            "location": "Showroom",
            "total": 3,
            "available": 1,
            "in_transit": 0,
            "maintenance": 0,
            "reserved": 1,
            "sold": 1,
        }
        assert stats["Port"]["in_transit"] == 1
        assert stats["Workshop"]["maintenance"] == 1
