import pytest
from sqlalchemy import select

from pizzastore.auth_utils import authenticate, get_password_hash, verify_password
from pizzastore.CRUD import user_crud
from pizzastore.errors import AuthFailure, AuthFailureReason, StoreError
from pizzastore.models import User, UserRole


def test_authenticate_returns_login(seeded):
    assert authenticate(seeded, "alice", "alice-secret") == "alice"


def test_wrong_password_is_rejected(seeded):
    with pytest.raises(AuthFailure) as exc:
        authenticate(seeded, "alice", "wrong")

    assert exc.value.reason == AuthFailureReason.invalid_credentials


def test_unknown_login_is_rejected(seeded):
    with pytest.raises(AuthFailure) as exc:
        authenticate(seeded, "mallory", "alice-secret")

    assert exc.value.reason == AuthFailureReason.invalid_credentials


def test_passwords_are_stored_hashed(seeded):
    stored = seeded.session.scalar(select(User.password).where(User.login == "alice"))

    assert stored != "alice-secret"
    assert verify_password("alice-secret", stored)[0]


def test_legacy_cleartext_password_is_accepted_and_upgraded(seeded):
    with seeded.transaction():
        user_crud.create(seeded, "carol", "plain-pw", UserRole.customer)

    assert authenticate(seeded, "carol", "plain-pw") == "carol"

    stored = seeded.session.scalar(select(User.password).where(User.login == "carol"))
    assert stored != "plain-pw"
    assert authenticate(seeded, "carol", "plain-pw") == "carol"


def test_legacy_cleartext_password_must_match(seeded):
    with seeded.transaction():
        user_crud.create(seeded, "carol", "plain-pw", UserRole.customer)

    with pytest.raises(AuthFailure):
        authenticate(seeded, "carol", "plain-PW")


def test_store_errors_are_reported_as_backend_failures(seeded, monkeypatch):
    def broken(store, login):
        raise StoreError("connection lost")

    monkeypatch.setattr(user_crud, "get_by_login", broken)

    with pytest.raises(AuthFailure) as exc:
        authenticate(seeded, "alice", "alice-secret")

    assert exc.value.reason == AuthFailureReason.backend_error
    assert "connection lost" in exc.value.message


def test_verify_password_with_empty_stored_value():
    assert verify_password("anything", "") == (False, None)


def test_fresh_hash_needs_no_upgrade():
    matches, new_hash = verify_password("pw", get_password_hash("pw"))

    assert matches
    assert new_hash is None


@pytest.mark.parametrize("stored_role", [" Manager ", "DRIVER", "customer "])
def test_stored_role_with_padding_or_capitals_still_loads(seeded, policy, user_service,
                                                          stored_role):
    with seeded.transaction():
        seeded.execute_update(
            "INSERT INTO users (login, password, role, favoriteitems) "
            "VALUES (:login, :password, :role, '')",
            {"login": "carl", "password": get_password_hash("carl-secret"),
             "role": stored_role})
    expected = UserRole(stored_role.strip().lower())

    assert authenticate(seeded, "carl", "carl-secret") == "carl"
    assert user_service.get_profile("carl").role == expected
    assert policy.role_of("carl") == expected
