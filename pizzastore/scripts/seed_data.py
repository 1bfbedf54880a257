"""
Sample stores, menu items and a manager account.

Run once against a migrated database:
    python -m pizzastore.scripts.seed_data
"""
import logging
import os
from decimal import Decimal

from pizzastore import db
from pizzastore.auth_utils import get_password_hash
from pizzastore.config import settings
from pizzastore.CRUD import item_crud, store_crud, user_crud
from pizzastore.models.store import Store
from pizzastore.models.user import UserRole
from pizzastore.store_gateway import RecordStore

logger = logging.getLogger(__name__)

SAMPLE_STORES = [
    {"store_id": 1, "address": "900 University Ave", "city": "Riverside",
     "state": "CA", "is_open": True, "review_score": Decimal("4.5")},
    {"store_id": 2, "address": "3500 Market St", "city": "Riverside",
     "state": "CA", "is_open": True, "review_score": Decimal("3.9")},
    {"store_id": 3, "address": "120 Main St", "city": "Corona",
     "state": "CA", "is_open": False, "review_score": Decimal("4.1")},
]

SAMPLE_ITEMS = [
    {"item_name": "Margherita", "ingredients": "Tomato, Mozzarella, Basil",
     "type_of_item": "entree", "price": Decimal("8.50"),
     "description": "Classic cheese and basil pizza"},
    {"item_name": "Pepperoni", "ingredients": "Tomato, Mozzarella, Pepperoni",
     "type_of_item": "entree", "price": Decimal("10.00"),
     "description": "Loaded with pepperoni"},
    {"item_name": "Hawaiian", "ingredients": "Tomato, Mozzarella, Ham, Pineapple",
     "type_of_item": "entree", "price": Decimal("9.75"),
     "description": "Ham and pineapple"},
    {"item_name": "Garlic Knots", "ingredients": "Dough, Garlic, Butter",
     "type_of_item": "sides", "price": Decimal("4.00"),
     "description": "Six knots with marinara"},
    {"item_name": "Lemonade", "ingredients": "Lemon, Sugar, Water",
     "type_of_item": "drinks", "price": Decimal("2.50"),
     "description": "Fresh squeezed"},
]


def seed_initial_data(store: RecordStore, manager_login: str,
                      manager_password: str) -> None:
    """Insert whatever sample rows are missing; existing rows are left alone"""
    with store.transaction():
        for data in SAMPLE_STORES:
            if store_crud.get_by_id(store, data["store_id"]) is None:
                store.add(Store(**data))
                logger.info(f"Created store {data['store_id']}")

        for data in SAMPLE_ITEMS:
            if not item_crud.exists(store, data["item_name"]):
                item_crud.create(store, **data)
                logger.info(f"Created item {data['item_name']}")

        if not user_crud.exists(store, manager_login):
            user_crud.create(store, login=manager_login,
                             password_hash=get_password_hash(manager_password),
                             role=UserRole.manager)
            logger.info(f"Created manager account {manager_login}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    password = os.getenv("SEED_MANAGER_PASSWORD")
    if not password:
        raise SystemExit("Set SEED_MANAGER_PASSWORD to create the manager account")

    db.init_engine(settings.database_url())
    try:
        with db.get_db() as session:
            seed_initial_data(RecordStore(session),
                              os.getenv("SEED_MANAGER_LOGIN", "manager"), password)
        print("✅ Sample data created successfully")
    finally:
        db.dispose_engine()
