"""Domain errors raised by the services and translated to HTTP at the routers."""

from typing import Any, Dict, List, Optional


class InventoryError(Exception):
    """Base class for every error the inventory services raise"""

    status_code = 500
    error_code: Optional[str] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Dict[str, Any]:
        detail: Dict[str, Any] = {"message": self.message}
        if self.error_code:
            detail["error"] = self.error_code
        return detail


class ValidationError(InventoryError):
    """Malformed or missing fields"""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        if self.errors:
            detail["errors"] = self.errors
        return detail


class NotFoundError(InventoryError):
    status_code = 404
    error_code = "NOT_FOUND"


class DuplicateChassisNumberError(InventoryError):
    status_code = 409
    error_code = "DUPLICATE_CHASSIS_NUMBER"

    def __init__(self, chassis_number: str):
        super().__init__(f"Chassis number {chassis_number} already exists")
        self.chassis_number = chassis_number


class DuplicateNameError(InventoryError):
    status_code = 409
    error_code = "duplicate_name"


class InvalidStatusTransitionError(InventoryError):
    """Raised when a lifecycle operation is not allowed from the item's current status"""

    status_code = 409
    error_code = "INVALID_STATUS_TRANSITION"


class LocationInUseError(InventoryError):
    status_code = 409
    error_code = "LOCATION_IN_USE"

