"""
Menu catalog: add items and edit them field by field.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from pizzastore.auth_utils import AuthorizationPolicy, Capability
from pizzastore.CRUD import item_crud
from pizzastore.errors import AlreadyExists, IntegrityViolation, InvalidPrice, NotFound
from pizzastore.models.item import Item
from pizzastore.schemas.item import ItemCreate, ItemUpdate
from pizzastore.store_gateway import RecordStore

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
MAX_PRICE = Decimal("100000000")


def parse_price(value: str) -> Decimal:
    """
    Parse a fixed point price such as "9.99".

    Raises InvalidPrice for text that is not a finite, non-negative number
    with at most two decimal places.
    """
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidPrice(f"'{value}' is not a valid price")
    # items.price is NUMERIC(10, 2)
    if not price.is_finite() or price < 0 or price >= MAX_PRICE:
        raise InvalidPrice(f"'{value}' is not a valid price")
    if price != price.quantize(CENTS):
        raise InvalidPrice(f"'{value}' has more than two decimal places")
    return price.quantize(CENTS)


class MenuService:
    """Manager-only edits to the Item catalog"""

    def __init__(self, store: RecordStore, policy: AuthorizationPolicy):
        self.store = store
        self.policy = policy

    def item_exists(self, item_name: str) -> bool:
        return item_crud.exists(self.store, item_name)

    def get_item(self, item_name: str) -> Item:
        item = item_crud.get_by_name(self.store, item_name)
        if item is None:
            raise NotFound(f"Item '{item_name}' not found")
        return item

    def add_item(self, actor_login: str, request: ItemCreate) -> Item:
        self.policy.require(actor_login, Capability.edit_menu)

        if self.item_exists(request.item_name):
            raise AlreadyExists(f"Item '{request.item_name}' already exists")
        price = parse_price(request.price)

        try:
            with self.store.transaction():
                item = item_crud.create(
                    self.store,
                    item_name=request.item_name,
                    ingredients=request.ingredients,
                    type_of_item=request.type_of_item,
                    price=price,
                    description=request.description,
                )
        except IntegrityViolation:
            raise AlreadyExists(f"Item '{request.item_name}' already exists")

        logger.info(f"{actor_login} added item {request.item_name} at {price}")
        return item

    def update_item(self, actor_login: str, item_name: str,
                    request: ItemUpdate) -> Optional[Item]:
        """
        Replace only the non-blank fields of an existing item.

        Returns:
            The updated item, or None when no field was supplied (nothing is
            written in that case)

        Raises:
            PermissionDenied, NotFound, InvalidPrice
        """
        self.policy.require(actor_login, Capability.edit_menu)

        if not self.item_exists(item_name):
            raise NotFound(f"Item '{item_name}' not found")

        changes = request.changes()
        if not changes:
            logger.info(f"No changes requested for item {item_name}")
            return None

        values = dict(changes)
        if "price" in values:
            values["price"] = parse_price(values["price"])

        with self.store.transaction():
            affected = item_crud.update_fields(self.store, item_name, values)
            if affected == 0:
                # Deleted by someone else between the check and the update
                raise NotFound(f"Item '{item_name}' not found")

        logger.info(f"{actor_login} updated {sorted(values)} of item {item_name}")
        return self.get_item(item_name)
