# Import models in dependency order to avoid relationship resolution issues

# Base models first (no foreign key dependencies)
from .user import User, UserRole
from .item import Item
from .store import Store

# Models that depend on User, Store and Item
from .order import FoodOrder, ItemsInOrder, OrderStatus, ORDER_ID_SEQUENCE

# Export all models
__all__ = [
    "User",
    "UserRole",
    "Item",
    "Store",
    "FoodOrder",
    "ItemsInOrder",
    "OrderStatus",
    "ORDER_ID_SEQUENCE",
]
