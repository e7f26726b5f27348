import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vehicle_inventory.core.exceptions import DuplicateNameError, NotFoundError, ValidationError
from vehicle_inventory.models.database import InventoryItem, Manufacturer
from vehicle_inventory.models.schemas import ManufacturerCreate, ManufacturerUpdate

logger = logging.getLogger(__name__)


class ManufacturerService:
    """
    Manufacturer directory.

    Inventory items reference a manufacturer by name and by an optional
    foreign key; the key is kept in step with the name here, so creating,
    renaming or deleting an entry relinks the affected items.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Manufacturer]:
        return self.db.query(Manufacturer).order_by(Manufacturer.name).all()

    def get(self, manufacturer_id: int) -> Manufacturer:
        manufacturer = self.db.query(Manufacturer).filter(Manufacturer.id == manufacturer_id).first()
        if not manufacturer:
            raise NotFoundError(f"Manufacturer {manufacturer_id} not found")
        return manufacturer

    def create(self, data: ManufacturerCreate) -> Manufacturer:
        self._ensure_unique_name(data.name)

        manufacturer = Manufacturer(name=data.name, logo=data.logo or None)
        self.db.add(manufacturer)
        self.db.flush()
        linked = (
            self.db.query(InventoryItem)
            .filter(InventoryItem.manufacturer == manufacturer.name)
            .update({InventoryItem.manufacturer_id: manufacturer.id}, synchronize_session=False)
        )
        self._commit()
        self.db.refresh(manufacturer)
        logger.info(f"Created manufacturer {manufacturer.name} ({linked} inventory items linked)")
        return manufacturer

    def update(self, manufacturer_id: int, data: ManufacturerUpdate) -> Manufacturer:
        manufacturer = self.get(manufacturer_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("name") is not None and changes["name"] != manufacturer.name:
            self._ensure_unique_name(changes["name"], exclude_id=manufacturer.id)
            self.db.query(InventoryItem).filter(InventoryItem.manufacturer_id == manufacturer.id).update(
                {InventoryItem.manufacturer: changes["name"]}, synchronize_session=False
            )
            manufacturer.name = changes["name"]
        if "logo" in changes:
            manufacturer.logo = changes["logo"] or None

        self._commit()
        self.db.expire_all()
        return self.get(manufacturer_id)

    def update_logo(self, manufacturer_id: int, logo: str) -> Manufacturer:
        if not logo or not logo.strip():
            raise ValidationError("Logo data is required")

        manufacturer = self.get(manufacturer_id)
        manufacturer.logo = logo
        self.db.commit()
        self.db.refresh(manufacturer)
        logger.info(f"Updated logo of manufacturer {manufacturer.name}")
        return manufacturer

    def delete(self, manufacturer_id: int) -> bool:
        """Remove the directory entry; items keep the manufacturer name but lose the link"""
        manufacturer = self.get(manufacturer_id)
        self.db.query(InventoryItem).filter(InventoryItem.manufacturer_id == manufacturer.id).update(
            {InventoryItem.manufacturer_id: None}, synchronize_session=False
        )
        self.db.delete(manufacturer)
        self.db.commit()
        self.db.expire_all()
        logger.info(f"Deleted manufacturer {manufacturer_id}")
        return True

    def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Manufacturer).filter(func.lower(Manufacturer.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Manufacturer.id != exclude_id)
        if query.first():
            logger.warning(f"Rejected duplicate manufacturer name {name}")
            raise DuplicateNameError("Manufacturer already exists")

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateNameError("Manufacturer already exists") from e
