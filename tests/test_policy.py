import pytest

from pizzastore.auth_utils import AuthorizationPolicy, Capability
from pizzastore.config import Settings
from pizzastore.errors import NotFound, PermissionDenied
from pizzastore.models import UserRole


def test_role_of(policy):
    assert policy.role_of("bob") == UserRole.manager
    assert policy.role_of("alice") == UserRole.customer
    assert policy.role_of("dan") == UserRole.driver


def test_role_of_unknown_login(policy):
    with pytest.raises(NotFound):
        policy.role_of("nobody")


@pytest.mark.parametrize("capability", list(Capability))
def test_manager_holds_every_capability_by_default(policy, capability):
    assert policy.require("bob", capability) == UserRole.manager


@pytest.mark.parametrize("login", ["alice", "dan"])
@pytest.mark.parametrize("capability", list(Capability))
def test_non_managers_are_denied_by_default(policy, login, capability):
    with pytest.raises(PermissionDenied):
        policy.require(login, capability)
    assert not policy.is_allowed(login, capability)


def test_unknown_login_is_denied_not_crashed(policy):
    with pytest.raises(PermissionDenied) as exc:
        policy.require("ghost", Capability.edit_menu)

    assert "ghost" not in exc.value.message
    assert not policy.is_allowed("ghost", Capability.edit_menu)


def test_delivery_roles_are_configurable(seeded):
    app_settings = Settings(ORDER_STATUS_ROLES="manager, driver")
    policy = AuthorizationPolicy.from_settings(seeded, app_settings)

    assert policy.is_allowed("dan", Capability.set_order_delivered)
    assert policy.is_allowed("bob", Capability.set_order_delivered)
    assert not policy.is_allowed("dan", Capability.edit_menu)
    assert not policy.is_allowed("alice", Capability.set_order_delivered)


def test_explicit_mapping_overrides_defaults(seeded):
    policy = AuthorizationPolicy(
        seeded, {Capability.edit_menu: [UserRole.manager, UserRole.driver]})

    assert policy.is_allowed("dan", Capability.edit_menu)
    assert not policy.is_allowed("dan", Capability.manage_users)


def test_unknown_role_names_in_settings_are_ignored(seeded):
    app_settings = Settings(MANAGE_USERS_ROLES="manager,admin")
    policy = AuthorizationPolicy.from_settings(seeded, app_settings)

    assert policy.capability_roles[Capability.manage_users] == frozenset({UserRole.manager})
