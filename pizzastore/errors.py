"""
Error taxonomy shared by every service.

Services raise these; the console prints the message and returns to the menu.
"""
import enum


class PizzaStoreError(Exception):
    """Base class for errors reported back to the caller"""

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = "Operation failed"


class InvalidInput(PizzaStoreError):
    default_message = "Invalid input"


class InvalidRole(InvalidInput):
    default_message = "Invalid role. Expected one of: customer, manager, driver"


class InvalidPrice(InvalidInput):
    default_message = "Price must be a non-negative number"


class NotFound(PizzaStoreError):
    default_message = "Not found"


class ItemNotFound(NotFound):
    default_message = "Item not found"


class PermissionDenied(PizzaStoreError):
    default_message = "You are not permitted to perform this operation"


class AlreadyExists(PizzaStoreError):
    default_message = "Record already exists"


class StoreError(PizzaStoreError):
    default_message = "Database error"


class IntegrityViolation(StoreError):
    """A unique or foreign key constraint rejected the write"""
    default_message = "The database rejected the change"


class AuthFailureReason(str, enum.Enum):
    invalid_credentials = "invalid_credentials"
    backend_error = "backend_error"


class AuthFailure(PizzaStoreError):
    default_message = "Invalid login or password"

    def __init__(self, reason: AuthFailureReason = AuthFailureReason.invalid_credentials,
                 message: str = ""):
        super().__init__(message)
        self.reason = reason
