from .menu_service import MenuService
from .order_service import OrderService
from .store_service import StoreService
from .user_service import UserService

__all__ = [
    "MenuService",
    "OrderService",
    "StoreService",
    "UserService",
]
