import enum
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "available"
    IN_TRANSIT = "in_transit"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"
    SOLD = "sold"


class ImportType(str, enum.Enum):
    PERSONAL = "personal"
    COMPANY = "company"
    USED_PERSONAL = "used_personal"


class AlertLevel(str, enum.Enum):
    OUT_OF_STOCK = "out_of_stock"
    CRITICAL = "critical"
    LOW = "low"


def _enum_column(enum_cls, name):
    # Stored as the plain string value so rows stay readable outside the app
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        validate_strings=True,
        values_callable=lambda members: [member.value for member in members],
    )


class Manufacturer(Base):
    """Manufacturer directory entry, optionally carrying a logo"""
    __tablename__ = "manufacturers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    logo = Column(Text)  # data URI or external URL
    created_at = Column(DateTime(timezone=True), default=utcnow)

    inventory_items = relationship("InventoryItem", back_populates="manufacturer_ref")


class InventoryItem(Base):
    """A single vehicle held in stock"""
    __tablename__ = "inventory_items"
    __table_args__ = (
        UniqueConstraint("chassis_number", name="uq_inventory_items_chassis_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    manufacturer = Column(String, nullable=False, index=True)
    manufacturer_id = Column(Integer, ForeignKey("manufacturers.id", ondelete="SET NULL"), nullable=True)
    category = Column(String, nullable=False)
    engine_capacity = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    exterior_color = Column(String, nullable=False)
    interior_color = Column(String, nullable=False)
    chassis_number = Column(String, nullable=False, index=True)
    status = Column(_enum_column(VehicleStatus, "vehicle_status"), nullable=False, default=VehicleStatus.AVAILABLE)
    import_type = Column(_enum_column(ImportType, "import_type"), nullable=False)
    location = Column(String, nullable=False, index=True)
    price = Column(Numeric(12, 2))
    notes = Column(Text)
    images = Column(JSON, nullable=False, default=list)

    entry_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_sold = Column(Boolean, nullable=False, default=False)
    sold_date = Column(DateTime(timezone=True))
    reservation_date = Column(DateTime(timezone=True))
    reserved_by = Column(String)
    reservation_note = Column(Text)

    manufacturer_ref = relationship("Manufacturer", back_populates="inventory_items")
    transfers = relationship(
        "LocationTransfer",
        back_populates="inventory_item",
        cascade="all, delete-orphan",
        order_by="LocationTransfer.id",
    )

    @property
    def manufacturer_logo(self):
        return self.manufacturer_ref.logo if self.manufacturer_ref is not None else None


class Location(Base):
    """Named storage location; deactivated rather than removed"""
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text)
    address = Column(String)
    manager = Column(String)
    phone = Column(String)
    capacity = Column(Integer)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class LocationTransfer(Base):
    """Append-only record of an item moving between locations"""
    __tablename__ = "location_transfers"

    id = Column(Integer, primary_key=True, index=True)
    inventory_item_id = Column(
        Integer, ForeignKey("inventory_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    from_location = Column(String, nullable=False)
    to_location = Column(String, nullable=False)
    transfer_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    reason = Column(Text)
    transferred_by = Column(String)
    notes = Column(Text)

    inventory_item = relationship("InventoryItem", back_populates="transfers")


class StockSetting(Base):
    """Low-stock thresholds for one manufacturer/category pair"""
    __tablename__ = "stock_settings"
    __table_args__ = (
        UniqueConstraint("manufacturer", "category", name="uq_stock_settings_manufacturer_category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    manufacturer = Column(String, nullable=False)
    category = Column(String, nullable=False)
    min_stock_level = Column(Integer, nullable=False, default=5)
    low_stock_threshold = Column(Integer, nullable=False, default=3)
    critical_stock_threshold = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class LowStockAlert(Base):
    __tablename__ = "low_stock_alerts"

    id = Column(Integer, primary_key=True, index=True)
    manufacturer = Column(String, nullable=False)
    category = Column(String, nullable=False)
    current_stock = Column(Integer, nullable=False)
    min_stock_level = Column(Integer, nullable=False)
    alert_level = Column(_enum_column(AlertLevel, "alert_level"), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
