from typing import List, Optional

from sqlalchemy import select

from pizzastore.models.store import Store
from pizzastore.store_gateway import RecordStore


def get_by_id(store: RecordStore, store_id: int) -> Optional[Store]:
    """Get store by ID"""
    return store.fetch_one(select(Store).where(Store.store_id == store_id))


def get_all(store: RecordStore) -> List[Store]:
    return store.fetch_all(select(Store).order_by(Store.store_id))
