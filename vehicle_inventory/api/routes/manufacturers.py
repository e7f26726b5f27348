from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vehicle_inventory.core.database import get_db
from vehicle_inventory.models.schemas import (
    Manufacturer,
    ManufacturerCreate,
    ManufacturerLogoUpdate,
    ManufacturerUpdate,
    MessageResponse,
)
from vehicle_inventory.services.manufacturer_service import ManufacturerService

router = APIRouter()


@router.get("", response_model=List[Manufacturer])
async def get_manufacturers(db: Session = Depends(get_db)):
    return ManufacturerService(db).list_all()


@router.post("", response_model=Manufacturer, status_code=201)
async def create_manufacturer(manufacturer_data: ManufacturerCreate, db: Session = Depends(get_db)):
    """Create a manufacturer; names are unique regardless of case"""
    return ManufacturerService(db).create(manufacturer_data)


@router.get("/{manufacturer_id}", response_model=Manufacturer)
async def get_manufacturer(manufacturer_id: int, db: Session = Depends(get_db)):
    return ManufacturerService(db).get(manufacturer_id)


@router.put("/{manufacturer_id}", response_model=Manufacturer)
async def update_manufacturer(
    manufacturer_id: int,
    manufacturer_data: ManufacturerUpdate,
    db: Session = Depends(get_db),
):
    return ManufacturerService(db).update(manufacturer_id, manufacturer_data)


@router.put("/{manufacturer_id}/logo", response_model=Manufacturer)
async def update_manufacturer_logo(
    manufacturer_id: int,
    logo_data: ManufacturerLogoUpdate,
    db: Session = Depends(get_db),
):
    return ManufacturerService(db).update_logo(manufacturer_id, logo_data.logo)


@router.delete("/{manufacturer_id}", response_model=MessageResponse)
async def delete_manufacturer(manufacturer_id: int, db: Session = Depends(get_db)):
    ManufacturerService(db).delete(manufacturer_id)
    return {"message": "Manufacturer deleted successfully"}
