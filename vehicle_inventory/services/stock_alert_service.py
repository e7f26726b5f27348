import logging
from collections import Counter
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vehicle_inventory.core.exceptions import DuplicateNameError, NotFoundError
from vehicle_inventory.models.database import (
    AlertLevel,
    InventoryItem,
    LowStockAlert,
    StockSetting,
)
from vehicle_inventory.models.schemas import StockSettingCreate, StockSettingUpdate

logger = logging.getLogger(__name__)


def classify_stock_level(current_stock: int, setting: StockSetting) -> Optional[AlertLevel]:
    """Alert level for a stock count under `setting`, or None when stock is healthy"""
    if current_stock == 0:
        return AlertLevel.OUT_OF_STOCK
    if current_stock <= setting.critical_stock_threshold:
        return AlertLevel.CRITICAL
    if current_stock <= setting.low_stock_threshold:
        return AlertLevel.LOW
    return None


class StockAlertService:
    """Per manufacturer/category stock thresholds and the alerts raised against them"""

    def __init__(self, db: Session):
        self.db = db

    def list_settings(self) -> List[StockSetting]:
        return self.db.query(StockSetting).order_by(StockSetting.manufacturer, StockSetting.category).all()

    def get_setting(self, setting_id: int) -> StockSetting:
        setting = self.db.query(StockSetting).filter(StockSetting.id == setting_id).first()
        if not setting:
            raise NotFoundError(f"Stock setting {setting_id} not found")
        return setting

    def get_setting_for(self, manufacturer: str, category: str) -> Optional[StockSetting]:
        return (
            self.db.query(StockSetting)
            .filter(StockSetting.manufacturer == manufacturer, StockSetting.category == category)
            .first()
        )

    def create_setting(self, data: StockSettingCreate) -> StockSetting:
        if self.get_setting_for(data.manufacturer, data.category):
            raise DuplicateNameError(
                f"Stock setting for {data.manufacturer} / {data.category} already exists"
            )

        setting = StockSetting(**data.model_dump())
        self.db.add(setting)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateNameError(
                f"Stock setting for {data.manufacturer} / {data.category} already exists"
            ) from e
        self.db.refresh(setting)
        return setting

    def update_setting(self, setting_id: int, data: StockSettingUpdate) -> StockSetting:
        setting = self.get_setting(setting_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(setting, field, value)
        self.db.commit()
        self.db.refresh(setting)
        return setting

    def delete_setting(self, setting_id: int) -> bool:
        setting = self.get_setting(setting_id)
        self.db.delete(setting)
        self.db.commit()
        return True

    def check_stock_levels(self) -> List[LowStockAlert]:
        """
        Compare current non-sold stock with every configured threshold.

        An alert is only raised for a manufacturer/category pair that has no
        unread alert yet, so repeated checks do not pile up duplicates.
        """
        stock = Counter(
            (manufacturer, category)
            for manufacturer, category in self.db.query(InventoryItem.manufacturer, InventoryItem.category)
            .filter(InventoryItem.is_sold.is_(False))
            .all()
        )

        created = []
        for setting in self.list_settings():
            current_stock = stock[(setting.manufacturer, setting.category)]
            level = classify_stock_level(current_stock, setting)
            if level is None:
                continue

            pending = (
                self.db.query(LowStockAlert)
                .filter(
                    LowStockAlert.manufacturer == setting.manufacturer,
                    LowStockAlert.category == setting.category,
                    LowStockAlert.is_read.is_(False),
                )
                .first()
            )
            if pending:
                continue

            alert = LowStockAlert(
                manufacturer=setting.manufacturer,
                category=setting.category,
                current_stock=current_stock,
                min_stock_level=setting.min_stock_level,
                alert_level=level,
                is_read=False,
            )
            self.db.add(alert)
            created.append(alert)
            logger.warning(
                f"Stock {level.value} for {setting.manufacturer} / {setting.category}: {current_stock} left"
            )

        self.db.commit()
        for alert in created:
            self.db.refresh(alert)
        return created

    def list_alerts(self, unread_only: bool = False) -> List[LowStockAlert]:
        query = self.db.query(LowStockAlert)
        if unread_only:
            query = query.filter(LowStockAlert.is_read.is_(False))
        return query.order_by(LowStockAlert.created_at, LowStockAlert.id).all()

    def mark_read(self, alert_id: int) -> LowStockAlert:
        alert = self._get_alert(alert_id)
        alert.is_read = True
        self.db.commit()
        self.db.refresh(alert)
        return alert

    def delete_alert(self, alert_id: int) -> bool:
        alert = self._get_alert(alert_id)
        self.db.delete(alert)
        self.db.commit()
        return True

    def _get_alert(self, alert_id: int) -> LowStockAlert:
        alert = self.db.query(LowStockAlert).filter(LowStockAlert.id == alert_id).first()
        if not alert:
            raise NotFoundError(f"Low stock alert {alert_id} not found")
        return alert
