import logging

from sqlalchemy.orm import Session

from vehicle_inventory.models.database import ImportType, InventoryItem, Location, Manufacturer, VehicleStatus
from vehicle_inventory.models.schemas import InventoryItemCreate
from vehicle_inventory.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

SAMPLE_MANUFACTURERS = ["Mercedes", "Land Rover", "BMW"]

SAMPLE_LOCATIONS = ["Main Warehouse", "Showroom", "Port", "Workshop", "Branch Warehouse"]

SAMPLE_ITEMS = [
    {
        "manufacturer": "Mercedes",
        "category": "G63",
        "engine_capacity": "V8",
        "year": 2025,
        "exterior_color": "Black",
        "interior_color": "White",
        "status": VehicleStatus.IN_TRANSIT,
        "import_type": ImportType.PERSONAL,
        "location": "Port",
        "chassis_number": "WASSBER0056464",
    },
    {
        "manufacturer": "Land Rover",
        "category": "Range Rover",
        "engine_capacity": "V6",
        "year": 2024,
        "exterior_color": "Black",
        "interior_color": "White",
        "status": VehicleStatus.IN_TRANSIT,
        "import_type": ImportType.COMPANY,
        "location": "Showroom",
        "chassis_number": "WASSBER0056465",
    },
    {
        "manufacturer": "Mercedes",
        "category": "S500",
        "engine_capacity": "V8",
        "year": 2025,
        "exterior_color": "Black",
        "interior_color": "White",
        "status": VehicleStatus.AVAILABLE,
        "import_type": ImportType.USED_PERSONAL,
        "location": "Workshop",
        "chassis_number": "WASSBER0056466",
    },
    {
        "manufacturer": "Land Rover",
        "category": "Defender",
        "engine_capacity": "V6",
        "year": 2024,
        "exterior_color": "Black",
        "interior_color": "Grey",
        "status": VehicleStatus.MAINTENANCE,
        "import_type": ImportType.PERSONAL,
        "location": "Branch Warehouse",
        "chassis_number": "WASSBER0087523",
    },
    {
        "manufacturer": "Mercedes",
        "category": "E200",
        "engine_capacity": "2.0L",
        "year": 2023,
        "exterior_color": "Red",
        "interior_color": "Beige",
        "status": VehicleStatus.SOLD,
        "import_type": ImportType.PERSONAL,
        "location": "Showroom",
        "chassis_number": "WDB4566001234",
    },
    {
        "manufacturer": "BMW",
        "category": "320i",
        "engine_capacity": "2.0L",
        "year": 2022,
        "exterior_color": "Blue",
        "interior_color": "Black",
        "status": VehicleStatus.SOLD,
        "import_type": ImportType.COMPANY,
        "location": "Showroom",
        "chassis_number": "WBA5566005678",
    },
]


def seed_database(db: Session) -> int:
    """Insert the demonstration fleet into an empty inventory, returning the number of items added"""
    if db.query(InventoryItem.id).first():
        logger.info("Inventory already populated, skipping sample data")
        return 0

    for name in SAMPLE_MANUFACTURERS:
        if not db.query(Manufacturer).filter(Manufacturer.name == name).first():
            db.add(Manufacturer(name=name))
    for name in SAMPLE_LOCATIONS:
        if not db.query(Location).filter(Location.name == name).first():
            db.add(Location(name=name))
    db.commit()

    service = InventoryService(db)
    for data in SAMPLE_ITEMS:
        service.create(InventoryItemCreate(**data))

    logger.info(f"Seeded {len(SAMPLE_ITEMS)} sample inventory items")
    return len(SAMPLE_ITEMS)
