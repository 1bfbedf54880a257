"""
Order workflow: menu browsing, order placement, order history and delivery status.

Order status moves one way only: Pending -> Delivered.
"""
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import List, Optional, Union

from pizzastore.auth_utils import AuthorizationPolicy, Capability
from pizzastore.config import settings
from pizzastore.CRUD import item_crud, order_crud, store_crud, user_crud
from pizzastore.errors import (InvalidInput, ItemNotFound, NotFound,
                               PermissionDenied)
from pizzastore.models.item import Item
from pizzastore.models.order import FoodOrder, OrderStatus
from pizzastore.models.user import UserRole
from pizzastore.schemas.order import OrderCreate
from pizzastore.services.menu_service import parse_price
from pizzastore.store_gateway import RecordStore

logger = logging.getLogger(__name__)

PRICE_SORTS = (None, "asc", "desc")


class OrderService:

    def __init__(self, store: RecordStore, policy: AuthorizationPolicy,
                 recent_limit: int = settings.RECENT_ORDERS_LIMIT):
        self.store = store
        self.policy = policy
        self.recent_limit = recent_limit

    # ============ Menu ============

    def list_menu(self, store_id: int, type_of_item: Optional[str] = None,
                  max_price: Optional[Union[str, Decimal]] = None,
                  sort_by_price: Optional[str] = None) -> List[Item]:
        """
        Menu of a store.

        Every store serves the whole catalog, so store_id is only checked for
        existence. Filters and price sorting are optional.
        """
        if store_crud.get_by_id(self.store, store_id) is None:
            raise NotFound(f"Store {store_id} not found")
        if sort_by_price not in PRICE_SORTS:
            raise InvalidInput("Sort order must be 'asc' or 'desc'")

        limit = parse_price(max_price) if max_price not in (None, "") else None
        return item_crud.get_all(self.store, type_of_item=type_of_item or None,
                                 max_price=limit, sort_by_price=sort_by_price)

    # ============ Placement ============

    def place_order(self, request: OrderCreate) -> FoodOrder:
        """
        Create an order and its line items in one transaction.

        The order id comes from the database (sequence or identity column),
        never from the client. Repeated item names are merged into one line.

        Raises:
            InvalidInput: a quantity below 1
            ItemNotFound: an item that is not on the menu
            NotFound: unknown login or store
        """
        quantities = OrderedDict()
        for line in request.items:
            if line.quantity < 1:
                raise InvalidInput(f"Quantity for '{line.item_name}' must be at least 1")
            quantities[line.item_name] = quantities.get(line.item_name, 0) + line.quantity

        if not user_crud.exists(self.store, request.login):
            raise NotFound(f"Login '{request.login}' not found")
        if store_crud.get_by_id(self.store, request.store_id) is None:
            raise NotFound(f"Store {request.store_id} not found")

        total = Decimal("0.00")
        for item_name, quantity in quantities.items():
            price = item_crud.get_price(self.store, item_name)
            if price is None:
                raise ItemNotFound(f"Item '{item_name}' not found")
            total += price * quantity

        with self.store.transaction():
            order = order_crud.create_order(self.store, request.login,
                                            request.store_id, total)
            order_id = order.order_id
            for item_name, quantity in quantities.items():
                order_crud.create_line_item(self.store, order_id, item_name, quantity)

        logger.info(f"Order {order_id} placed by {request.login} at store "
                    f"{request.store_id}, total {total}")
        return self.get_order(order_id)

    # ============ History ============

    def list_orders(self, login: str) -> List[FoodOrder]:
        """Full order history of a login, newest first"""
        return order_crud.get_by_login(self.store, login)

    def list_recent_orders(self, login: str, limit: Optional[int] = None) -> List[FoodOrder]:
        limit = self.recent_limit if limit is None else limit
        if limit < 1:
            raise InvalidInput("Limit must be at least 1")
        return order_crud.get_by_login(self.store, login, limit=limit)

    def get_order(self, order_id: int, actor_login: Optional[str] = None) -> FoodOrder:
        """
        Order header with its line items.

        When actor_login is given, customers may only see their own orders.
        """
        order = order_crud.get_by_id(self.store, order_id)
        if order is None:
            raise NotFound(f"Order {order_id} not found")

        if actor_login is not None and order.login != actor_login:
            try:
                role = self.policy.role_of(actor_login)
            except NotFound:
                raise PermissionDenied()
            if role == UserRole.customer:
                raise PermissionDenied()
        return order

    def list_all_orders(self, actor_login: str,
                        status: Optional[OrderStatus] = None) -> List[FoodOrder]:
        """Every order, for staff who update delivery status"""
        self.policy.require(actor_login, Capability.set_order_delivered)
        return order_crud.get_all(self.store, status=status)

    # ============ Status ============

    def set_delivered(self, actor_login: str, order_id: int) -> FoodOrder:
        """
        Mark an order Delivered.

        Already delivered orders are left Delivered without error.
        """
        self.policy.require(actor_login, Capability.set_order_delivered)

        with self.store.transaction():
            affected = order_crud.set_status(self.store, order_id, OrderStatus.delivered)
            if affected == 0:
                raise NotFound(f"Order {order_id} not found")

        logger.info(f"{actor_login} marked order {order_id} delivered")
        return self.get_order(order_id)
