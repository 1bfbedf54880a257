"""
User directory: registration, profile edits and manager-side user administration.
"""
import logging
from typing import List

from pizzastore.auth_utils import AuthorizationPolicy, Capability, get_password_hash
from pizzastore.config import settings
from pizzastore.CRUD import user_crud
from pizzastore.errors import (AlreadyExists, IntegrityViolation, InvalidRole,
                               NotFound, PermissionDenied)
from pizzastore.models.user import User, UserRole
from pizzastore.schemas.user import ProfileField, UserCreate, UserFieldUpdate
from pizzastore.store_gateway import RecordStore

logger = logging.getLogger(__name__)


def parse_role(value: str) -> UserRole:
    """Map user input to a role; InvalidRole for anything else"""
    try:
        return UserRole(value.strip().lower())
    except ValueError:
        raise InvalidRole()


class UserService:
    """Create, read, update and delete User records"""

    def __init__(self, store: RecordStore, policy: AuthorizationPolicy,
                 allow_self_role_change: bool = settings.ALLOW_SELF_ROLE_CHANGE):
        self.store = store
        self.policy = policy
        self.allow_self_role_change = allow_self_role_change

    def _create(self, request: UserCreate) -> User:
        # Role is checked before anything touches the store
        role = parse_role(request.role)

        if user_crud.exists(self.store, request.login):
            raise AlreadyExists(f"User '{request.login}' already exists")

        try:
            with self.store.transaction():
                user = user_crud.create(
                    self.store,
                    login=request.login,
                    password_hash=get_password_hash(request.password),
                    role=role,
                    phone_num=request.phone_num,
                    favorite_items=request.favorite_items,
                )
        except IntegrityViolation:
            # Lost a race with another client on the same login
            raise AlreadyExists(f"User '{request.login}' already exists")
        return user

    def register(self, request: UserCreate) -> User:
        """
        Self registration, open to anyone for any role.

        favorite_items always starts empty here.
        """
        request = request.model_copy(update={"favorite_items": ""})
        user = self._create(request)
        logger.info(f"Registered {user.login} as {user.role.value}")
        return user

    def get_profile(self, login: str) -> User:
        user = user_crud.get_by_login(self.store, login)
        if user is None:
            raise NotFound(f"No profile found for login '{login}'")
        return user

    def _apply_field(self, login: str, update: UserFieldUpdate) -> User:
        value = update.value
        if update.field == ProfileField.role:
            value = parse_role(value)

        with self.store.transaction():
            affected = user_crud.update_field(self.store, login, update.field.value, value)
            if affected == 0:
                raise NotFound(f"Login '{login}' not found")
        return self.get_profile(login)

    def update_profile(self, login: str, update: UserFieldUpdate) -> User:
        """Replace one of the caller's own profile fields"""
        if update.field == ProfileField.role and not self.allow_self_role_change:
            raise PermissionDenied("Changing your own role is not permitted")

        user = self._apply_field(login, update)
        logger.info(f"{login} updated own {update.field.value}")
        return user

    def manager_update_user(self, actor_login: str, target_login: str,
                            update: UserFieldUpdate) -> User:
        """Replace a field of any user (manage_users capability)"""
        self.policy.require(actor_login, Capability.manage_users)
        user = self._apply_field(target_login, update)
        logger.info(f"{actor_login} updated {update.field.value} of {target_login}")
        return user

    def add_user(self, actor_login: str, request: UserCreate) -> User:
        self.policy.require(actor_login, Capability.manage_users)
        user = self._create(request)
        logger.info(f"{actor_login} added user {user.login} ({user.role.value})")
        return user

    def delete_user(self, actor_login: str, target_login: str) -> bool:
        """
        Delete a user (manage_users capability).

        Deleting a login that does not exist is not an error: returns False.
        Users with orders stay, since orders are never deleted.
        """
        self.policy.require(actor_login, Capability.manage_users)

        try:
            with self.store.transaction():
                affected = user_crud.delete_by_login(self.store, target_login)
        except IntegrityViolation as e:
            raise IntegrityViolation(
                f"User '{target_login}' has order history and cannot be deleted") from e

        if affected:
            logger.info(f"{actor_login} deleted user {target_login}")
        else:
            logger.info(f"{actor_login} tried to delete missing user {target_login}")
        return affected > 0

    def list_users(self, actor_login: str) -> List[User]:
        self.policy.require(actor_login, Capability.manage_users)
        return user_crud.get_all(self.store)
