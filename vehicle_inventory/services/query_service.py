from typing import List

from sqlalchemy.orm import Session

from vehicle_inventory.core.exceptions import ValidationError
from vehicle_inventory.models.database import InventoryItem
from vehicle_inventory.models.schemas import InventoryFilter

_SEARCHABLE_FIELDS = (
    "manufacturer",
    "category",
    "engine_capacity",
    "exterior_color",
    "interior_color",
    "chassis_number",
    "location",
    "notes",
)


class InventoryQueryService:
    """Read-only search and filtering over the inventory (sold items included)"""

    def __init__(self, db: Session):
        self.db = db

    def search(self, text: str) -> List[InventoryItem]:
        """Case-insensitive substring match across the descriptive fields of every item"""
        needle = (text or "").strip().lower()
        if not needle:
            raise ValidationError("Search query is required")

        items = self.db.query(InventoryItem).order_by(InventoryItem.id).all()
        return [item for item in items if any(needle in value for value in self._haystack(item))]

    def filter(self, criteria: InventoryFilter) -> List[InventoryItem]:
        query = self.db.query(InventoryItem)
        for field, value in criteria.model_dump(exclude_none=True).items():
            query = query.filter(getattr(InventoryItem, field) == value)
        return query.order_by(InventoryItem.id).all()

    @staticmethod
    def _haystack(item: InventoryItem) -> List[str]:
        values = [getattr(item, field) or "" for field in _SEARCHABLE_FIELDS]
        values.append(item.status.value)
        values.append(item.import_type.value)
        values.append(str(item.year))
        return [value.lower() for value in values]
