import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

import pizzastore.models  # noqa: F401 registers every table on Base.metadata
from pizzastore.auth_utils import AuthorizationPolicy, get_password_hash
from pizzastore.CRUD import user_crud
from pizzastore.db import Base, make_engine
from pizzastore.models.user import UserRole
from pizzastore.scripts.seed_data import seed_initial_data
from pizzastore.services import MenuService, OrderService, StoreService, UserService
from pizzastore.store_gateway import RecordStore


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = Session(bind=engine, autoflush=False)
    yield session
    session.close()


@pytest.fixture
def store(session):
    return RecordStore(session)


@pytest.fixture
def seeded(store):
    """
    Sample stores 1-3 and menu (Margherita at 8.50 among others), plus
    bob (manager), alice (customer) and dan (driver).
    """
    seed_initial_data(store, "bob", "bob-secret")
    with store.transaction():
        user_crud.create(store, "alice", get_password_hash("alice-secret"),
                         UserRole.customer, phone_num="555-0101")
        user_crud.create(store, "dan", get_password_hash("dan-secret"),
                         UserRole.driver, phone_num="555-0102")
    return store


@pytest.fixture
def policy(seeded):
    return AuthorizationPolicy(seeded)


@pytest.fixture
def user_service(seeded, policy):
    return UserService(seeded, policy)


@pytest.fixture
def menu_service(seeded, policy):
    return MenuService(seeded, policy)


@pytest.fixture
def order_service(seeded, policy):
    return OrderService(seeded, policy)


@pytest.fixture
def store_service(seeded):
    return StoreService(seeded)


@pytest.fixture
def count_rows(store):
    """count_rows(Model, *where) straight from the database"""
    def _count(model, *criteria):
        query = select(func.count()).select_from(model)
        for criterion in criteria:
            query = query.where(criterion)
        return store.session.scalar(query)
    return _count
