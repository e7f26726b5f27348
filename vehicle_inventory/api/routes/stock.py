from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vehicle_inventory.core.database import get_db
from vehicle_inventory.models.schemas import (
    LowStockAlert,
    MessageResponse,
    StockSetting,
    StockSettingCreate,
    StockSettingUpdate,
)
from vehicle_inventory.services.stock_alert_service import StockAlertService

settings_router = APIRouter()
alerts_router = APIRouter()


@settings_router.get("", response_model=List[StockSetting])
async def get_stock_settings(db: Session = Depends(get_db)):
    return StockAlertService(db).list_settings()


@settings_router.post("", response_model=StockSetting, status_code=201)
async def create_stock_setting(setting_data: StockSettingCreate, db: Session = Depends(get_db)):
    return StockAlertService(db).create_setting(setting_data)


@settings_router.put("/{setting_id}", response_model=StockSetting)
async def update_stock_setting(
    setting_id: int,
    setting_data: StockSettingUpdate,
    db: Session = Depends(get_db),
):
    return StockAlertService(db).update_setting(setting_id, setting_data)


@settings_router.delete("/{setting_id}", response_model=MessageResponse)
async def delete_stock_setting(setting_id: int, db: Session = Depends(get_db)):
    StockAlertService(db).delete_setting(setting_id)
    return {"message": "Stock setting deleted successfully"}


@alerts_router.get("", response_model=List[LowStockAlert])
async def get_low_stock_alerts(unread: bool = False, db: Session = Depends(get_db)):
    return StockAlertService(db).list_alerts(unread_only=unread)


@alerts_router.post("/check", response_model=List[LowStockAlert])
async def check_stock_levels(db: Session = Depends(get_db)):
    """Evaluate every stock setting and return the alerts raised by this check"""
    return StockAlertService(db).check_stock_levels()


@alerts_router.put("/{alert_id}/read", response_model=LowStockAlert)
async def mark_low_stock_alert_read(alert_id: int, db: Session = Depends(get_db)):
    return StockAlertService(db).mark_read(alert_id)


@alerts_router.delete("/{alert_id}", response_model=MessageResponse)
async def delete_low_stock_alert(alert_id: int, db: Session = Depends(get_db)):
    StockAlertService(db).delete_alert(alert_id)
    return {"message": "Alert deleted successfully"}
