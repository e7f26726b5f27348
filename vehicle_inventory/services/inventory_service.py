import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vehicle_inventory.core.exceptions import (
    DuplicateChassisNumberError,
    InventoryError,
    NotFoundError,
    ValidationError,
)
from vehicle_inventory.models.database import InventoryItem, Manufacturer, VehicleStatus
from vehicle_inventory.models.schemas import InventoryItemCreate, InventoryItemUpdate
from vehicle_inventory.services.lifecycle_service import LifecycleService

logger = logging.getLogger(__name__)

# Columns that may never be cleared by a partial update
_REQUIRED_FIELDS = {
    "manufacturer",
    "category",
    "engine_capacity",
    "year",
    "exterior_color",
    "interior_color",
    "chassis_number",
    "import_type",
    "location",
    "images",
}
_STATUS_FIELDS = {"status", "reserved_by", "reservation_note"}


class InventoryService:
    """
    CRUD over inventory items.

    Chassis-number uniqueness is left to the database constraint; a violation
    surfaces as DuplicateChassisNumberError after the session is rolled back.
    """

    def __init__(self, db: Session):
        self.db = db
        self.lifecycle = LifecycleService(db)

    def list_all(self) -> List[InventoryItem]:
        """Every item, sold ones included"""
        return self.db.query(InventoryItem).order_by(InventoryItem.id).all()

    def get(self, item_id: int) -> InventoryItem:
        item = self.db.query(InventoryItem).filter(InventoryItem.id == item_id).first()
        if not item:
            raise NotFoundError(f"Inventory item {item_id} not found")
        return item

    def create(self, draft: InventoryItemCreate) -> InventoryItem:
        data = draft.model_dump(exclude={"status", "reserved_by", "reservation_note"})
        item = InventoryItem(**data)
        item.is_sold = False
        item.notes = data.get("notes") or None
        item.manufacturer_id = self._resolve_manufacturer_id(item.manufacturer)
        self.lifecycle.change_status(
            item,
            draft.status,
            reserved_by=draft.reserved_by,
            reservation_note=draft.reservation_note,
        )

        self.db.add(item)
        self._commit(item.chassis_number)
        self.db.refresh(item)
        logger.info(f"Created inventory item {item.id} (chassis {item.chassis_number})")
        return item

    def update(self, item_id: int, partial: InventoryItemUpdate) -> InventoryItem:
        item = self.get(item_id)
        changes = partial.model_dump(exclude_unset=True)

        cleared = sorted(
            field for field in _REQUIRED_FIELDS | {"status"} if field in changes and changes[field] is None
        )
        if cleared:
            raise ValidationError(
                "Invalid data",
                errors=[{"field": field, "message": "must not be null"} for field in cleared],
            )

        status_changes = {field: changes.pop(field) for field in _STATUS_FIELDS if field in changes}
        if status_changes.get("status", item.status) != VehicleStatus.RESERVED:
            stray = sorted(field for field in ("reserved_by", "reservation_note") if status_changes.get(field))
            if stray:
                raise ValidationError(
                    "Invalid data",
                    errors=[{"field": field, "message": "only allowed when status is reserved"} for field in stray],
                )

        new_location = changes.pop("location", None)
        try:
            for field, value in changes.items():
                setattr(item, field, value)

            if new_location is not None and new_location != item.location:
                self.lifecycle.move(item, new_location)
                changes["location"] = new_location

            if "manufacturer" in changes:
                item.manufacturer_id = self._resolve_manufacturer_id(item.manufacturer)

            new_status = status_changes.get("status", item.status)
            if status_changes and (new_status != item.status or new_status == VehicleStatus.RESERVED):
                self.lifecycle.change_status(
                    item,
                    new_status,
                    reserved_by=status_changes.get("reserved_by", item.reserved_by),
                    reservation_note=status_changes.get("reservation_note", item.reservation_note),
                )
        except InventoryError:
            self.db.rollback()
            raise

        self._commit(item.chassis_number)
        self.db.refresh(item)
        logger.info(f"Updated inventory item {item.id}: {sorted(changes) + sorted(status_changes)}")
        return item

    def delete(self, item_id: int) -> bool:
        item = self.get(item_id)
        self.db.delete(item)
        self.db.commit()
        logger.info(f"Deleted inventory item {item_id}")
        return True

    def _resolve_manufacturer_id(self, name: str) -> Optional[int]:
        """Id of the directory entry with exactly this name, or None for an unknown manufacturer"""
        row = self.db.query(Manufacturer.id).filter(Manufacturer.name == name).first()
        return row.id if row else None

    def _commit(self, chassis_number: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if "chassis_number" in str(e.orig):
                logger.warning(f"Rejected duplicate chassis number {chassis_number}")
                raise DuplicateChassisNumberError(chassis_number) from e
            raise
