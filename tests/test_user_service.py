import pytest
from pydantic import ValidationError

from pizzastore.auth_utils import authenticate
from pizzastore.errors import (AlreadyExists, IntegrityViolation, InvalidRole,
                               NotFound, PermissionDenied)
from pizzastore.models import User, UserRole
from pizzastore.schemas.order import OrderCreate
from pizzastore.schemas.user import ProfileField, UserCreate, UserFieldUpdate
from pizzastore.services import OrderService, UserService


def new_user(login="erin", role="customer", **extra):
    return UserCreate(login=login, password="pw", role=role, phone_num="555-0199", **extra)


def test_register_creates_customer_with_empty_favorites(user_service):
    user = user_service.register(new_user(favorite_items="Pepperoni"))

    assert user.login == "erin"
    assert user.role == UserRole.customer
    assert user.favorite_items == ""
    assert user.phone_num == "555-0199"


@pytest.mark.parametrize("role", ["manager", "driver", " Driver "])
def test_register_accepts_every_role(user_service, role):
    user = user_service.register(new_user(role=role))

    assert user.role == UserRole(role.strip().lower())


@pytest.mark.parametrize("role", ["admin", "", "customers"])
def test_register_rejects_unknown_role_without_writing(user_service, count_rows, role):
    with pytest.raises(InvalidRole):
        user_service.register(new_user(role=role))

    assert count_rows(User, User.login == "erin") == 0


def test_register_duplicate_login(user_service, count_rows):
    with pytest.raises(AlreadyExists):
        user_service.register(new_user(login="alice"))

    assert count_rows(User, User.login == "alice") == 1


def test_blank_login_is_invalid_input():
    with pytest.raises(ValidationError):
        new_user(login="   ")


def test_registered_user_can_log_in(user_service, seeded):
    user_service.register(new_user())

    assert authenticate(seeded, "erin", "pw") == "erin"


def test_get_profile(user_service):
    profile = user_service.get_profile("alice")

    assert profile.phone_num == "555-0101"


def test_get_profile_unknown(user_service):
    with pytest.raises(NotFound):
        user_service.get_profile("nobody")


@pytest.mark.parametrize("field, value, attribute, expected", [
    (ProfileField.favorite_items, "Pepperoni, Lemonade", "favorite_items", "Pepperoni, Lemonade"),
    (ProfileField.phone_num, "555-9999", "phone_num", "555-9999"),
    (ProfileField.role, "driver", "role", UserRole.driver),
])
def test_update_profile_replaces_one_field(user_service, field, value, attribute, expected):
    user = user_service.update_profile("alice", UserFieldUpdate(field=field, value=value))

    assert getattr(user, attribute) == expected
    assert user_service.get_profile("alice").login == "alice"


def test_update_profile_can_set_empty_value(user_service):
    user_service.update_profile(
        "alice", UserFieldUpdate(field=ProfileField.favorite_items, value="Lemonade"))
    user = user_service.update_profile(
        "alice", UserFieldUpdate(field=ProfileField.favorite_items, value=""))

    assert user.favorite_items == ""


def test_update_profile_rejects_unknown_role(user_service, policy):
    with pytest.raises(InvalidRole):
        user_service.update_profile(
            "alice", UserFieldUpdate(field=ProfileField.role, value="owner"))

    assert policy.role_of("alice") == UserRole.customer


def test_update_profile_unknown_login(user_service):
    with pytest.raises(NotFound):
        user_service.update_profile(
            "ghost", UserFieldUpdate(field=ProfileField.phone_num, value="1"))


def test_self_role_change_can_be_disabled(seeded, policy):
    service = UserService(seeded, policy, allow_self_role_change=False)

    with pytest.raises(PermissionDenied):
        service.update_profile("alice", UserFieldUpdate(field=ProfileField.role, value="manager"))

    assert policy.role_of("alice") == UserRole.customer
    service.update_profile("alice", UserFieldUpdate(field=ProfileField.phone_num, value="1"))


def test_unknown_profile_field_is_invalid_input():
    with pytest.raises(ValidationError):
        UserFieldUpdate(field="password", value="x")


def test_manager_updates_another_user(user_service, policy):
    user = user_service.manager_update_user(
        "bob", "alice", UserFieldUpdate(field=ProfileField.role, value="driver"))

    assert user.role == UserRole.driver
    assert policy.role_of("alice") == UserRole.driver


@pytest.mark.parametrize("actor", ["alice", "dan", "ghost"])
def test_non_manager_cannot_update_users(user_service, actor):
    with pytest.raises(PermissionDenied):
        user_service.manager_update_user(
            actor, "bob", UserFieldUpdate(field=ProfileField.role, value="customer"))

    assert user_service.get_profile("bob").role == UserRole.manager


def test_manager_update_unknown_target(user_service):
    with pytest.raises(NotFound):
        user_service.manager_update_user(
            "bob", "ghost", UserFieldUpdate(field=ProfileField.phone_num, value="1"))


def test_manager_adds_user_with_favorites(user_service):
    user = user_service.add_user("bob", new_user(login="frank", role="driver",
                                                 favorite_items="Lemonade"))

    assert user.role == UserRole.driver
    assert user.favorite_items == "Lemonade"


def test_add_user_rejects_existing_login(user_service, count_rows):
    with pytest.raises(AlreadyExists):
        user_service.add_user("bob", new_user(login="dan"))

    assert count_rows(User, User.login == "dan") == 1


def test_add_user_rejects_unknown_role(user_service, count_rows):
    with pytest.raises(InvalidRole):
        user_service.add_user("bob", new_user(login="frank", role="chef"))

    assert count_rows(User, User.login == "frank") == 0


def test_customer_cannot_add_users(user_service, count_rows):
    with pytest.raises(PermissionDenied):
        user_service.add_user("alice", new_user(login="frank"))

    assert count_rows(User, User.login == "frank") == 0


def test_manager_deletes_user(user_service, count_rows):
    assert user_service.delete_user("bob", "dan") is True
    assert count_rows(User, User.login == "dan") == 0


def test_delete_missing_user_is_a_no_op(user_service, count_rows):
    before = count_rows(User)

    assert user_service.delete_user("bob", "ghost") is False
    assert user_service.delete_user("bob", "ghost") is False
    assert count_rows(User) == before


@pytest.mark.parametrize("actor", ["alice", "dan"])
def test_non_manager_cannot_delete_users(user_service, count_rows, actor):
    with pytest.raises(PermissionDenied):
        user_service.delete_user(actor, "bob")

    assert count_rows(User, User.login == "bob") == 1


def test_user_with_orders_is_not_deleted(user_service, seeded, policy, count_rows):
    OrderService(seeded, policy).place_order(OrderCreate.single("alice", 1, "Margherita"))

    with pytest.raises(IntegrityViolation):
        user_service.delete_user("bob", "alice")

    assert count_rows(User, User.login == "alice") == 1


def test_list_users_is_manager_only(user_service):
    assert [u.login for u in user_service.list_users("bob")] == ["alice", "bob", "dan"]

    with pytest.raises(PermissionDenied):
        user_service.list_users("alice")
