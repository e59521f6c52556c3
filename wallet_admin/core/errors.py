"""
Domain-specific exceptions for the Wallet Admin API.

These exceptions represent business rule violations and are mapped
to appropriate HTTP status codes in the API layer. Notification problems
are never raised through this hierarchy; they are reported as outcomes.
"""

from typing import Any


class WalletAdminError(Exception):
    """Base exception for all wallet admin domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(WalletAdminError):
    """
    Raised when input data fails validation.

    Examples:
    - Withdrawal without destination address
    - Unsupported transaction kind

    HTTP Status: 400 Bad Request
    """

    pass


class InvalidAmountError(ValidationError):
    """
    Raised when a transaction amount is zero or negative.

    HTTP Status: 400 Bad Request
    """

    pass


class InsufficientBalanceError(WalletAdminError):
    """
    Raised when a withdrawal exceeds the account balance.

    HTTP Status: 400 Bad Request
    """

    pass


class SelfActionForbiddenError(WalletAdminError):
    """
    Raised when an admin attempts to suspend their own account.

    HTTP Status: 400 Bad Request
    """

    pass


class NotFoundError(WalletAdminError):
    """
    Raised when a requested resource does not exist.

    Examples:
    - Account ID not found
    - Transaction ID not found

    HTTP Status: 404 Not Found
    """

    pass


class UnauthorizedError(WalletAdminError):
    """
    Raised when a caller lacks valid authentication.

    HTTP Status: 401 Unauthorized
    """

    pass


class ForbiddenError(WalletAdminError):
    """
    Raised when a caller is authenticated but lacks the admin role.

    HTTP Status: 403 Forbidden
    """

    pass


class AlreadyResolvedError(WalletAdminError):
    """
    Raised when confirming or rejecting a transaction that is no longer pending.

    HTTP Status: 409 Conflict
    """

    pass


class UnknownTemplateError(WalletAdminError):
    """
    Raised when a notification template name is not registered.

    HTTP Status: 500 Internal Server Error
    """

    pass


ERROR_STATUS_MAP = {
    ValidationError: 400,
    InvalidAmountError: 400,
    InsufficientBalanceError: 400,
    SelfActionForbiddenError: 400,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    AlreadyResolvedError: 409,
    UnknownTemplateError: 500,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    return ERROR_STATUS_MAP.get(type(error), 500)
