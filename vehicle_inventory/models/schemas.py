from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from vehicle_inventory.models.database import AlertLevel, ImportType, VehicleStatus


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class InventoryItemBase(BaseModel):
    manufacturer: str = Field(min_length=1)
    category: str = Field(min_length=1)
    engine_capacity: str = Field(min_length=1)
    year: int = Field(ge=1886, le=2100)
    exterior_color: str = Field(min_length=1)
    interior_color: str = Field(min_length=1)
    chassis_number: str = Field(min_length=1)
    status: VehicleStatus = VehicleStatus.AVAILABLE
    import_type: ImportType
    location: str = Field(min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None
    images: List[str] = []

    @field_validator("manufacturer", "category", "chassis_number", "location")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_required(value)


class InventoryItemCreate(InventoryItemBase):
    # Only used when the item is created directly in the reserved state
    reserved_by: Optional[str] = None
    reservation_note: Optional[str] = None


class InventoryItemUpdate(BaseModel):
    manufacturer: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    engine_capacity: Optional[str] = Field(default=None, min_length=1)
    year: Optional[int] = Field(default=None, ge=1886, le=2100)
    exterior_color: Optional[str] = Field(default=None, min_length=1)
    interior_color: Optional[str] = Field(default=None, min_length=1)
    chassis_number: Optional[str] = Field(default=None, min_length=1)
    status: Optional[VehicleStatus] = None
    import_type: Optional[ImportType] = None
    location: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None
    images: Optional[List[str]] = None
    reserved_by: Optional[str] = None
    reservation_note: Optional[str] = None

    class Config:
        extra = "forbid"

    @field_validator("manufacturer", "category", "chassis_number", "location")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _strip_required(value) if value is not None else None


class InventoryItem(InventoryItemBase):
    id: int
    manufacturer_id: Optional[int] = None
    manufacturer_logo: Optional[str] = None
    entry_date: datetime
    is_sold: bool
    sold_date: Optional[datetime] = None
    reservation_date: Optional[datetime] = None
    reserved_by: Optional[str] = None
    reservation_note: Optional[str] = None

    class Config:
        from_attributes = True


class InventoryFilter(BaseModel):
    category: Optional[str] = None
    status: Optional[VehicleStatus] = None
    year: Optional[int] = None
    manufacturer: Optional[str] = None
    import_type: Optional[ImportType] = None
    location: Optional[str] = None


class ReservationRequest(BaseModel):
    reserved_by: str
    reservation_note: Optional[str] = None

    @field_validator("reserved_by")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_required(value)


class TransferRequest(BaseModel):
    # Older clients send the destination as "new_location"
    location: str = Field(validation_alias=AliasChoices("location", "new_location"))
    reason: Optional[str] = None
    transferred_by: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("location")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_required(value)


class InventoryStats(BaseModel):
    total: int
    available: int
    in_transit: int
    maintenance: int
    reserved: int
    sold: int
    personal: int
    company: int
    used_personal: int


class ManufacturerStats(BaseModel):
    manufacturer: str
    manufacturer_id: Optional[int] = None
    total: int
    personal: int
    company: int
    used_personal: int
    logo: Optional[str] = None


class LocationStats(BaseModel):
    location: str
    total: int
    available: int
    in_transit: int
    maintenance: int
    reserved: int
    sold: int


class ManufacturerCreate(BaseModel):
    name: str
    logo: Optional[str] = None

    @field_validator("name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_required(value)


class ManufacturerUpdate(BaseModel):
    name: Optional[str] = None
    logo: Optional[str] = None

    @field_validator("name")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _strip_required(value) if value is not None else None


class ManufacturerLogoUpdate(BaseModel):
    logo: str


class Manufacturer(BaseModel):
    id: int
    name: str
    logo: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class LocationBase(BaseModel):
    description: Optional[str] = None
    address: Optional[str] = None
    manager: Optional[str] = None
    phone: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=0)


class LocationCreate(LocationBase):
    name: str
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_required(value)


class LocationUpdate(LocationBase):
    name: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _strip_required(value) if value is not None else None


class Location(LocationBase):
    id: int
    name: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class LocationTransferCreate(BaseModel):
    inventory_item_id: int
    from_location: str
    to_location: str
    reason: Optional[str] = None
    transferred_by: Optional[str] = None
    notes: Optional[str] = None


class LocationTransfer(BaseModel):
    id: int
    inventory_item_id: int
    from_location: str
    to_location: str
    transfer_date: datetime
    reason: Optional[str] = None
    transferred_by: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class StockSettingCreate(BaseModel):
    manufacturer: str
    category: str
    min_stock_level: int = Field(default=5, ge=0)
    low_stock_threshold: int = Field(default=3, ge=0)
    critical_stock_threshold: int = Field(default=1, ge=0)


class StockSettingUpdate(BaseModel):
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)
    critical_stock_threshold: Optional[int] = Field(default=None, ge=0)


class StockSetting(StockSettingCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LowStockAlert(BaseModel):
    id: int
    manufacturer: str
    category: str
    current_stock: int
    min_stock_level: int
    alert_level: AlertLevel
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
