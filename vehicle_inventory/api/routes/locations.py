from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vehicle_inventory.core.database import get_db
from vehicle_inventory.models.schemas import (
    Location,
    LocationCreate,
    LocationTransfer,
    LocationTransferCreate,
    LocationUpdate,
    MessageResponse,
)
from vehicle_inventory.services.location_service import LocationService

router = APIRouter()
transfers_router = APIRouter()


@router.get("", response_model=List[Location])
async def get_locations(include_inactive: bool = False, db: Session = Depends(get_db)):
    """Active locations, or every location with include_inactive=true"""
    return LocationService(db).list_all(include_inactive=include_inactive)


@router.post("", response_model=Location, status_code=201)
async def create_location(location_data: LocationCreate, db: Session = Depends(get_db)):
    return LocationService(db).create(location_data)


@router.get("/{location_id}", response_model=Location)
async def get_location(location_id: int, db: Session = Depends(get_db)):
    return LocationService(db).get(location_id)


@router.put("/{location_id}", response_model=Location)
async def update_location(
    location_id: int,
    location_data: LocationUpdate,
    db: Session = Depends(get_db),
):
    return LocationService(db).update(location_id, location_data)


@router.delete("/{location_id}", response_model=MessageResponse)
async def delete_location(location_id: int, db: Session = Depends(get_db)):
    """Deactivate a location that no longer holds any inventory"""
    LocationService(db).delete(location_id)
    return {"message": "Location deleted successfully"}


@transfers_router.get("", response_model=List[LocationTransfer])
async def get_location_transfers(inventory_item_id: Optional[int] = None, db: Session = Depends(get_db)):
    return LocationService(db).list_transfers(inventory_item_id=inventory_item_id)


@transfers_router.post("", response_model=LocationTransfer, status_code=201)
async def create_location_transfer(transfer_data: LocationTransferCreate, db: Session = Depends(get_db)):
    return LocationService(db).record_transfer(transfer_data)
