"""
Authentication utilities: password hashing, credential checks and the
role based authorization policy.
"""
import enum
import hmac
import logging
from typing import Dict, Iterable, Mapping, Optional, Tuple

from passlib.context import CryptContext
from sqlalchemy import select

from .config import Settings, settings
from .CRUD import user_crud
from .errors import (AuthFailure, AuthFailureReason, NotFound,
                     PermissionDenied, StoreError)
from .models.user import User, UserRole
from .store_gateway import RecordStore

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)


def get_password_hash(password: str) -> str:
    """Hash a password for storage in users.password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, stored_password: str) -> Tuple[bool, Optional[str]]:
    """
    Check a password against the stored value.

    Returns (matches, replacement_hash). replacement_hash is set when the
    stored value should be upgraded: legacy cleartext rows or hashes made
    with deprecated settings.
    """
    if not stored_password:
        return False, None

    if pwd_context.identify(stored_password, required=False) is None:
        # Rows created before hashing hold the password itself
        matches = hmac.compare_digest(plain_password.encode("utf-8"),
                                      stored_password.encode("utf-8"))
        return matches, get_password_hash(plain_password) if matches else None

    try:
        return pwd_context.verify_and_update(plain_password, stored_password)
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False, None


def authenticate(store: RecordStore, login: str, password: str) -> str:
    """
    Authenticate a login/password pair.

    Returns:
        The login on success

    Raises:
        AuthFailure: reason invalid_credentials when nothing matches,
            backend_error when the store could not be queried
    """
    try:
        user = user_crud.get_by_login(store, login)
        if user is None:
            raise AuthFailure(AuthFailureReason.invalid_credentials)

        matches, new_hash = verify_password(password, user.password)
        if not matches:
            raise AuthFailure(AuthFailureReason.invalid_credentials)

        if new_hash is not None:
            with store.transaction():
                user.password = new_hash
            logger.info(f"Upgraded stored password for {login}")
    except StoreError as e:
        logger.error(f"Login check failed for {login}: {e.message}")
        raise AuthFailure(AuthFailureReason.backend_error,
                          f"Could not check credentials: {e.message}") from e

    logger.info(f"User {login} logged in")
    return user.login


class Capability(str, enum.Enum):
    edit_menu = "edit_menu"
    manage_users = "manage_users"
    set_order_delivered = "set_order_delivered"


DEFAULT_CAPABILITY_ROLES: Dict[Capability, frozenset] = {
    capability: frozenset({UserRole.manager}) for capability in Capability
}


def _parse_roles(names: Iterable[str]) -> frozenset:
    valid = {role.value for role in UserRole}
    return frozenset(UserRole(name) for name in names if name in valid)


class AuthorizationPolicy:
    """
    Single mapping from capability to the roles allowed to use it.

    Every mutating service operation calls require() before writing.
    """

    def __init__(self, store: RecordStore,
                 capability_roles: Optional[Mapping[Capability, Iterable[UserRole]]] = None):
        self.store = store
        roles = dict(DEFAULT_CAPABILITY_ROLES)
        for capability, allowed in (capability_roles or {}).items():
            roles[Capability(capability)] = frozenset(UserRole(r) for r in allowed)
        self.capability_roles = roles

    @classmethod
    def from_settings(cls, store: RecordStore,
                      app_settings: Settings = settings) -> "AuthorizationPolicy":
        configured = {
            Capability(name): _parse_roles(roles)
            for name, roles in app_settings.capability_roles().items()
        }
        return cls(store, configured)

    def role_of(self, login: str) -> UserRole:
        """Look up the role of a login; NotFound if the login does not exist"""
        rows = self.store.execute_query_with_rows(
            select(User.role).where(User.login == login))
        if not rows:
            raise NotFound(f"Login '{login}' not found")
        # RoleType has already normalised the stored value
        return UserRole(rows[0][0])

    def is_allowed(self, login: str, capability: Capability) -> bool:
        try:
            role = self.role_of(login)
        except NotFound:
            return False
        return role in self.capability_roles[capability]

    def require(self, login: str, capability: Capability) -> UserRole:
        """
        Raise PermissionDenied unless login holds the capability.

        Unknown logins are denied the same way, without saying why.
        """
        try:
            role = self.role_of(login)
        except NotFound:
            logger.warning(f"Unknown login {login!r} asked for {capability.value}")
            raise PermissionDenied()

        if role not in self.capability_roles[capability]:
            logger.warning(f"{login} ({role.value}) denied {capability.value}")
            raise PermissionDenied()
        return role
