from typing import List

from pizzastore.CRUD import store_crud
from pizzastore.errors import NotFound
from pizzastore.models.store import Store
from pizzastore.store_gateway import RecordStore


class StoreService:
    """Read-only store directory"""

    def __init__(self, store: RecordStore):
        self.store = store

    def list_stores(self) -> List[Store]:
        return store_crud.get_all(self.store)

    def get_store(self, store_id: int) -> Store:
        location = store_crud.get_by_id(self.store, store_id)
        if location is None:
            raise NotFound(f"Store {store_id} not found")
        return location
