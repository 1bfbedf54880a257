from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, update

from pizzastore.models.order import FoodOrder, ItemsInOrder, OrderStatus
from pizzastore.store_gateway import RecordStore


def get_by_id(store: RecordStore, order_id: int) -> Optional[FoodOrder]:
    """Get order by ID"""
    return store.fetch_one(select(FoodOrder).where(FoodOrder.order_id == order_id))


def exists(store: RecordStore, order_id: int) -> bool:
    return store.execute_query(
        select(FoodOrder.order_id).where(FoodOrder.order_id == order_id)) > 0


def get_by_login(store: RecordStore, login: str,
                 limit: Optional[int] = None) -> List[FoodOrder]:
    """Orders of one user, newest first"""
    query = (
        select(FoodOrder)
        .where(FoodOrder.login == login)
        .order_by(FoodOrder.order_timestamp.desc(), FoodOrder.order_id.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return store.fetch_all(query)


def get_all(store: RecordStore, status: Optional[OrderStatus] = None) -> List[FoodOrder]:
    query = select(FoodOrder)
    if status is not None:
        query = query.where(FoodOrder.order_status == status)
    query = query.order_by(FoodOrder.order_timestamp.desc(), FoodOrder.order_id.desc())
    return store.fetch_all(query)


def create_order(store: RecordStore, login: str, store_id: int,
                 total_price: Decimal) -> FoodOrder:
    """Stage an order header; flushing assigns the store generated order id"""
    db_order = FoodOrder(
        login=login,
        store_id=store_id,
        total_price=total_price,
        order_status=OrderStatus.pending,
    )
    store.add(db_order)
    store.flush()
    return db_order


def create_line_item(store: RecordStore, order_id: int, item_name: str,
                     quantity: int) -> ItemsInOrder:
    db_line = ItemsInOrder(order_id=order_id, item_name=item_name, quantity=quantity)
    store.add(db_line)
    store.flush()
    return db_line


def set_status(store: RecordStore, order_id: int, status: OrderStatus) -> int:
    """Overwrite the status of one order, returns rows affected"""
    return store.execute_update(
        update(FoodOrder).where(FoodOrder.order_id == order_id)
        .values(order_status=status))
