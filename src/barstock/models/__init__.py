"""Domain models package."""

from barstock.models.access import AllowedEmail, LoginEvent
from barstock.models.daily_stock_record import DailyStockRecord
from barstock.models.enums import DayStatus, PaymentMethod, StockStatus, UserRole
from barstock.models.product import Inventory, Product
from barstock.models.sale import Sale
from barstock.models.stock_movement import StockMovement
from barstock.models.user import User

__all__ = [
    "AllowedEmail",
    "DailyStockRecord",
    "DayStatus",
    "Inventory",
    "LoginEvent",
    "PaymentMethod",
    "Product",
    "Sale",
    "StockMovement",
    "StockStatus",
    "User",
    "UserRole",
]
