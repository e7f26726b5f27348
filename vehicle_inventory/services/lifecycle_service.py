import logging
from typing import Optional

from sqlalchemy.orm import Session

from vehicle_inventory.core.exceptions import (
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from vehicle_inventory.models.database import (
    InventoryItem,
    LocationTransfer,
    VehicleStatus,
    utcnow,
)

logger = logging.getLogger(__name__)


class LifecycleService:
    """
    Status transitions of inventory items.

    `sold` is terminal: selling, reserving or otherwise re-statusing a sold
    item is refused until it is explicitly restocked. Every operation is a
    single commit, so a refused transition leaves the row untouched.
    """

    def __init__(self, db: Session):
        self.db = db

    def change_status(
        self,
        item: InventoryItem,
        status: VehicleStatus,
        reserved_by: Optional[str] = None,
        reservation_note: Optional[str] = None,
    ) -> InventoryItem:
        """Apply `status` to `item` in the session without committing"""
        if item.status == VehicleStatus.SOLD and status != VehicleStatus.SOLD:
            raise InvalidStatusTransitionError(
                f"Inventory item {item.id} is sold; restock it before changing its status"
            )

        if status == VehicleStatus.SOLD:
            item.is_sold = True
            item.sold_date = item.sold_date or utcnow()
            self._clear_reservation(item)
        elif status == VehicleStatus.RESERVED:
            reserved_by = (reserved_by or "").strip()
            if not reserved_by:
                raise ValidationError(
                    "Reserved by is required",
                    errors=[{"field": "reserved_by", "message": "required when status is reserved"}],
                )
            if item.status != VehicleStatus.RESERVED or item.reservation_date is None:
                item.reservation_date = utcnow()
            item.reserved_by = reserved_by
            item.reservation_note = reservation_note or None
        else:
            self._clear_reservation(item)

        item.status = status
        return item

    def sell(self, item_id: int) -> InventoryItem:
        item = self._get(item_id)
        if item.status == VehicleStatus.SOLD:
            logger.warning(f"Refused to sell inventory item {item_id}: already sold")
            raise InvalidStatusTransitionError(f"Inventory item {item_id} is already sold")

        self.change_status(item, VehicleStatus.SOLD)
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Inventory item {item_id} marked as sold")
        return item

    def restock(self, item_id: int) -> InventoryItem:
        """Undo a sale, returning the item to available stock"""
        item = self._get(item_id)
        if item.status != VehicleStatus.SOLD:
            raise InvalidStatusTransitionError(f"Inventory item {item_id} is not sold")

        item.status = VehicleStatus.AVAILABLE
        item.is_sold = False
        item.sold_date = None
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Inventory item {item_id} restocked")
        return item

    def reserve(self, item_id: int, reserved_by: str, reservation_note: Optional[str] = None) -> InventoryItem:
        item = self._get(item_id)
        if item.status == VehicleStatus.SOLD:
            logger.warning(f"Refused to reserve inventory item {item_id}: already sold")
            raise InvalidStatusTransitionError(f"Inventory item {item_id} is sold and cannot be reserved")

        self.change_status(
            item, VehicleStatus.RESERVED, reserved_by=reserved_by, reservation_note=reservation_note
        )
        # A new reservation always restarts the reservation clock
        item.reservation_date = utcnow()
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Inventory item {item_id} reserved by {item.reserved_by}")
        return item

    def cancel_reservation(self, item_id: int) -> InventoryItem:
        """Return a reserved item to available; a no-op for any other status"""
        item = self._get(item_id)
        if item.status != VehicleStatus.RESERVED:
            return item

        self.change_status(item, VehicleStatus.AVAILABLE)
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Reservation on inventory item {item_id} cancelled")
        return item

    def transfer(
        self,
        item_id: int,
        new_location: str,
        reason: Optional[str] = None,
        transferred_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> InventoryItem:
        item = self._get(item_id)
        new_location = new_location.strip()
        if not new_location:
            raise ValidationError("Location is required")
        if item.location == new_location:
            return item

        old_location = item.location
        self.move(item, new_location, reason=reason, transferred_by=transferred_by, notes=notes)
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Inventory item {item_id} transferred from {old_location} to {new_location}")
        return item

    def move(
        self,
        item: InventoryItem,
        new_location: str,
        reason: Optional[str] = None,
        transferred_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> InventoryItem:
        """Relocate `item` in the session, logging the move, without committing"""
        if item.location == new_location:
            return item

        self.db.add(
            LocationTransfer(
                inventory_item_id=item.id,
                from_location=item.location,
                to_location=new_location,
                reason=reason,
                transferred_by=transferred_by,
                notes=notes,
            )
        )
        item.location = new_location
        return item

    def _get(self, item_id: int) -> InventoryItem:
        item = self.db.query(InventoryItem).filter(InventoryItem.id == item_id).first()
        if not item:
            raise NotFoundError(f"Inventory item {item_id} not found")
        return item

    @staticmethod
    def _clear_reservation(item: InventoryItem) -> None:
        item.reservation_date = None
        item.reserved_by = None
        item.reservation_note = None
