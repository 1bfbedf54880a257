from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select, update

from pizzastore.models.item import Item
from pizzastore.store_gateway import RecordStore


def get_by_name(store: RecordStore, item_name: str) -> Optional[Item]:
    """Get menu item by name"""
    return store.fetch_one(select(Item).where(Item.item_name == item_name))


def exists(store: RecordStore, item_name: str) -> bool:
    return store.execute_query(
        select(Item.item_name).where(Item.item_name == item_name)) > 0


def get_price(store: RecordStore, item_name: str) -> Optional[Decimal]:
    rows = store.execute_query_with_rows(
        select(Item.price).where(Item.item_name == item_name))
    if not rows:
        return None
    return Decimal(rows[0][0])


def get_all(store: RecordStore, type_of_item: Optional[str] = None,
            max_price: Optional[Decimal] = None,
            sort_by_price: Optional[str] = None) -> List[Item]:
    """
    Get the catalog, optionally filtered.

    sort_by_price is "asc", "desc" or None (alphabetical).
    """
    query = select(Item)
    if type_of_item:
        query = query.where(Item.type_of_item == type_of_item)
    if max_price is not None:
        query = query.where(Item.price <= max_price)

    if sort_by_price == "asc":
        query = query.order_by(Item.price.asc(), Item.item_name)
    elif sort_by_price == "desc":
        query = query.order_by(Item.price.desc(), Item.item_name)
    else:
        query = query.order_by(Item.item_name)
    return store.fetch_all(query)


def create(store: RecordStore, item_name: str, ingredients: str, type_of_item: str,
           price: Decimal, description: str) -> Item:
    """Stage a new menu item; the caller's transaction commits it"""
    db_item = Item(
        item_name=item_name,
        ingredients=ingredients,
        type_of_item=type_of_item,
        price=price,
        description=description,
    )
    store.add(db_item)
    store.flush()
    return db_item


def update_fields(store: RecordStore, item_name: str, values: Dict[str, object]) -> int:
    """Replace only the given columns, returns rows affected"""
    return store.execute_update(
        update(Item).where(Item.item_name == item_name)
        .values({getattr(Item, field): value for field, value in values.items()}))
