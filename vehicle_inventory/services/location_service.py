import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vehicle_inventory.core.exceptions import DuplicateNameError, LocationInUseError, NotFoundError
from vehicle_inventory.models.database import InventoryItem, Location, LocationTransfer
from vehicle_inventory.models.schemas import LocationCreate, LocationTransferCreate, LocationUpdate

logger = logging.getLogger(__name__)


class LocationService:
    """Location directory plus the read side of the transfer log"""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self, include_inactive: bool = False) -> List[Location]:
        query = self.db.query(Location)
        if not include_inactive:
            query = query.filter(Location.is_active.is_(True))
        return query.order_by(Location.name).all()

    def get(self, location_id: int) -> Location:
        location = self.db.query(Location).filter(Location.id == location_id).first()
        if not location:
            raise NotFoundError(f"Location {location_id} not found")
        return location

    def create(self, data: LocationCreate) -> Location:
        if self.db.query(Location).filter(Location.name == data.name).first():
            raise DuplicateNameError(f"Location {data.name} already exists")

        location = Location(**data.model_dump())
        self.db.add(location)
        self._commit(data.name)
        self.db.refresh(location)
        logger.info(f"Created location {location.name}")
        return location

    def update(self, location_id: int, data: LocationUpdate) -> Location:
        location = self.get(location_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)
        if changes.get("is_active") is None:
            changes.pop("is_active", None)

        if "name" in changes and changes["name"] != location.name:
            clash = (
                self.db.query(Location)
                .filter(Location.name == changes["name"], Location.id != location.id)
                .first()
            )
            if clash:
                raise DuplicateNameError(f"Location {changes['name']} already exists")
            # Items refer to locations by name, so they follow the rename
            moved = (
                self.db.query(InventoryItem)
                .filter(InventoryItem.location == location.name)
                .update({InventoryItem.location: changes["name"]}, synchronize_session=False)
            )
            logger.info(f"Renamed location {location.name} to {changes['name']}, {moved} inventory items moved with it")

        for field, value in changes.items():
            setattr(location, field, value)
        self._commit(location.name)
        self.db.refresh(location)
        return location

    def delete(self, location_id: int) -> bool:
        """Deactivate a location; refused while inventory items are still stored there"""
        location = self.get(location_id)
        in_use = self.db.query(InventoryItem).filter(InventoryItem.location == location.name).count()
        if in_use:
            logger.warning(f"Refused to delete location {location.name}: {in_use} items still stored there")
            raise LocationInUseError(f"Location {location.name} still holds {in_use} inventory items")

        location.is_active = False
        self.db.commit()
        logger.info(f"Deactivated location {location.name}")
        return True

    def list_transfers(self, inventory_item_id: Optional[int] = None) -> List[LocationTransfer]:
        query = self.db.query(LocationTransfer)
        if inventory_item_id is not None:
            query = query.filter(LocationTransfer.inventory_item_id == inventory_item_id)
        return query.order_by(LocationTransfer.transfer_date.desc(), LocationTransfer.id.desc()).all()

    def record_transfer(self, data: LocationTransferCreate) -> LocationTransfer:
        """Append a manual entry to the transfer log without moving the item"""
        exists = self.db.query(InventoryItem.id).filter(InventoryItem.id == data.inventory_item_id).first()
        if not exists:
            raise NotFoundError(f"Inventory item {data.inventory_item_id} not found")

        transfer = LocationTransfer(**data.model_dump())
        self.db.add(transfer)
        self.db.commit()
        self.db.refresh(transfer)
        return transfer

    def _commit(self, name: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateNameError(f"Location {name} already exists") from e
