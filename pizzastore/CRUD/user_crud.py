from typing import List, Optional

from sqlalchemy import delete, select, update

from pizzastore.models.user import User, UserRole
from pizzastore.store_gateway import RecordStore


def get_by_login(store: RecordStore, login: str) -> Optional[User]:
    """Get user by login"""
    return store.fetch_one(select(User).where(User.login == login))


def exists(store: RecordStore, login: str) -> bool:
    return store.execute_query(select(User.login).where(User.login == login)) > 0


def get_all(store: RecordStore) -> List[User]:
    """Get all users ordered by login"""
    return store.fetch_all(select(User).order_by(User.login))


def create(store: RecordStore, login: str, password_hash: str, role: UserRole,
           phone_num: str = "", favorite_items: str = "") -> User:
    """Stage a new user; the caller's transaction commits it"""
    db_user = User(
        login=login,
        password=password_hash,
        role=role,
        favorite_items=favorite_items,
        phone_num=phone_num,
    )
    store.add(db_user)
    store.flush()
    return db_user


def update_field(store: RecordStore, login: str, field: str, value) -> int:
    """Replace one column of one user, returns rows affected"""
    return store.execute_update(
        update(User).where(User.login == login).values({getattr(User, field): value}))


def delete_by_login(store: RecordStore, login: str) -> int:
    """Delete a user, returns rows affected (0 when absent)"""
    return store.execute_update(delete(User).where(User.login == login))
