from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vehicle_inventory.core.database import get_db
from vehicle_inventory.models.database import ImportType, VehicleStatus
from vehicle_inventory.models.schemas import (
    InventoryFilter,
    InventoryItem,
    InventoryItemCreate,
    InventoryItemUpdate,
    InventoryStats,
    LocationStats,
    LocationTransfer,
    ManufacturerStats,
    MessageResponse,
    ReservationRequest,
    TransferRequest,
)
from vehicle_inventory.services.inventory_service import InventoryService
from vehicle_inventory.services.lifecycle_service import LifecycleService
from vehicle_inventory.services.location_service import LocationService
from vehicle_inventory.services.query_service import InventoryQueryService
from vehicle_inventory.services.stats_service import InventoryStatsService

router = APIRouter()

# Fixed paths are declared before "/{item_id}" so they are not captured by it


@router.post("", response_model=InventoryItem, status_code=201)
async def create_inventory_item(item_data: InventoryItemCreate, db: Session = Depends(get_db)):
    """Create a new inventory item"""
    return InventoryService(db).create(item_data)


@router.get("", response_model=List[InventoryItem])
async def get_inventory_items(db: Session = Depends(get_db)):
    """Get all inventory items, sold ones included"""
    return InventoryService(db).list_all()


@router.get("/stats", response_model=InventoryStats)
async def get_inventory_stats(db: Session = Depends(get_db)):
    return InventoryStatsService(db).inventory_stats()


@router.get("/manufacturer-stats", response_model=List[ManufacturerStats])
async def get_manufacturer_stats(db: Session = Depends(get_db)):
    return InventoryStatsService(db).manufacturer_stats()


@router.get("/location-stats", response_model=List[LocationStats])
async def get_location_stats(db: Session = Depends(get_db)):
    return InventoryStatsService(db).location_stats()


@router.get("/search", response_model=List[InventoryItem])
async def search_inventory_items(q: Optional[str] = None, db: Session = Depends(get_db)):
    """Case-insensitive search across the descriptive fields"""
    return InventoryQueryService(db).search(q)


@router.get("/filter", response_model=List[InventoryItem])
async def filter_inventory_items(
    category: Optional[str] = None,
    status: Optional[VehicleStatus] = None,
    year: Optional[int] = None,
    manufacturer: Optional[str] = None,
    import_type: Optional[ImportType] = None,
    location: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Exact-match filter; every given parameter narrows the result"""
    criteria = InventoryFilter(
        category=category or None,
        status=status,
        year=year,
        manufacturer=manufacturer or None,
        import_type=import_type,
        location=location or None,
    )
    return InventoryQueryService(db).filter(criteria)


@router.get("/{item_id}", response_model=InventoryItem)
async def get_inventory_item(item_id: int, db: Session = Depends(get_db)):
    return InventoryService(db).get(item_id)


@router.get("/{item_id}/transfers", response_model=List[LocationTransfer])
async def get_inventory_item_transfers(item_id: int, db: Session = Depends(get_db)):
    """Location history of one item, newest first"""
    InventoryService(db).get(item_id)
    return LocationService(db).list_transfers(inventory_item_id=item_id)


@router.patch("/{item_id}", response_model=InventoryItem)
async def update_inventory_item(
    item_id: int,
    item_data: InventoryItemUpdate,
    db: Session = Depends(get_db),
):
    """Partially update an inventory item"""
    return InventoryService(db).update(item_id, item_data)


@router.api_route("/{item_id}/sell", methods=["PUT", "POST"], response_model=InventoryItem)
async def sell_inventory_item(item_id: int, db: Session = Depends(get_db)):
    return LifecycleService(db).sell(item_id)


@router.post("/{item_id}/restock", response_model=InventoryItem)
async def restock_inventory_item(item_id: int, db: Session = Depends(get_db)):
    """Undo a sale and put the item back into available stock"""
    return LifecycleService(db).restock(item_id)


@router.post("/{item_id}/reserve", response_model=InventoryItem)
async def reserve_inventory_item(
    item_id: int,
    reservation: ReservationRequest,
    db: Session = Depends(get_db),
):
    return LifecycleService(db).reserve(item_id, reservation.reserved_by, reservation.reservation_note)


@router.post("/{item_id}/cancel-reservation", response_model=InventoryItem)
async def cancel_inventory_reservation(item_id: int, db: Session = Depends(get_db)):
    return LifecycleService(db).cancel_reservation(item_id)


@router.api_route("/{item_id}/transfer", methods=["PATCH", "POST"], response_model=InventoryItem)
async def transfer_inventory_item(
    item_id: int,
    transfer: TransferRequest,
    db: Session = Depends(get_db),
):
    """Move an item to another location, logging the move when the location changes"""
    return LifecycleService(db).transfer(
        item_id,
        transfer.location,
        reason=transfer.reason,
        transferred_by=transfer.transferred_by,
        notes=transfer.notes,
    )


@router.delete("/{item_id}", response_model=MessageResponse)
async def delete_inventory_item(item_id: int, db: Session = Depends(get_db)):
    InventoryService(db).delete(item_id)
    return {"message": "Item deleted successfully"}
