from typing import Dict, List

from sqlalchemy.orm import Session, joinedload

from vehicle_inventory.models.database import ImportType, InventoryItem, VehicleStatus

_STATUS_KEYS = {
    VehicleStatus.AVAILABLE: "available",
    VehicleStatus.IN_TRANSIT: "in_transit",
    VehicleStatus.MAINTENANCE: "maintenance",
    VehicleStatus.RESERVED: "reserved",
}
_IMPORT_TYPE_KEYS = {
    ImportType.PERSONAL: "personal",
    ImportType.COMPANY: "company",
    ImportType.USED_PERSONAL: "used_personal",
}


class InventoryStatsService:
    """
    Summary counts over the inventory.

    Everything is recomputed from a full scan on each call; there is no cached
    state to invalidate. Sold items only ever count towards a dedicated `sold`
    bucket: the inventory totals and the manufacturer breakdown describe
    active stock, while the location breakdown keeps sold vehicles in their
    own column so the yard history stays visible.
    """

    def __init__(self, db: Session):
        self.db = db

    def inventory_stats(self) -> Dict[str, int]:
        items = self._all_items()
        active = [item for item in items if not item.is_sold]

        stats = {"total": len(active), "sold": len(items) - len(active)}
        stats.update(self._count_statuses(active))
        stats.update(self._count_import_types(active))
        return stats

    def manufacturer_stats(self) -> List[Dict]:
        groups: Dict[str, List[InventoryItem]] = {}
        for item in self._all_items():
            if not item.is_sold:
                groups.setdefault(item.manufacturer, []).append(item)

        results = []
        for name, items in groups.items():
            # Items of one name share the same directory entry, if any
            ref = next((item.manufacturer_ref for item in items if item.manufacturer_ref is not None), None)
            entry = {
                "manufacturer": name,
                "manufacturer_id": ref.id if ref is not None else None,
                "total": len(items),
                "logo": ref.logo if ref is not None else None,
            }
            entry.update(self._count_import_types(items))
            results.append(entry)
        return results

    def location_stats(self) -> List[Dict]:
        groups: Dict[str, List[InventoryItem]] = {}
        for item in self._all_items():
            groups.setdefault(item.location, []).append(item)

        results = []
        for location, items in groups.items():
            active = [item for item in items if not item.is_sold]
            entry = {"location": location, "total": len(items), "sold": len(items) - len(active)}
            entry.update(self._count_statuses(active))
            results.append(entry)
        return results

    def _all_items(self) -> List[InventoryItem]:
        return (
            self.db.query(InventoryItem)
            .options(joinedload(InventoryItem.manufacturer_ref))
            .order_by(InventoryItem.id)
            .all()
        )

    @staticmethod
    def _count_statuses(items: List[InventoryItem]) -> Dict[str, int]:
        counts = {key: 0 for key in _STATUS_KEYS.values()}
        for item in items:
            key = _STATUS_KEYS.get(item.status)
            if key:
                counts[key] += 1
        return counts

    @staticmethod
    def _count_import_types(items: List[InventoryItem]) -> Dict[str, int]:
        counts = {key: 0 for key in _IMPORT_TYPE_KEYS.values()}
        for item in items:
            counts[_IMPORT_TYPE_KEYS[item.import_type]] += 1
        return counts
