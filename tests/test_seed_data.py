from pizzastore.auth_utils import authenticate
from pizzastore.models import Item, Store, User, UserRole
from pizzastore.scripts.seed_data import SAMPLE_ITEMS, SAMPLE_STORES, seed_initial_data


def test_seed_is_idempotent(store, count_rows):
    seed_initial_data(store, "boss", "boss-secret")
    seed_initial_data(store, "boss", "another-password")

    assert count_rows(Store) == len(SAMPLE_STORES)
    assert count_rows(Item) == len(SAMPLE_ITEMS)
    assert count_rows(User) == 1
    # the second run does not touch the existing account
    assert authenticate(store, "boss", "boss-secret") == "boss"


def test_seed_creates_manager(store):
    seed_initial_data(store, "boss", "boss-secret")

    user = store.session.get(User, "boss")
    assert user.role == UserRole.manager
    assert user.password != "boss-secret"
