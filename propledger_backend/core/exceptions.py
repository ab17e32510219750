"""
Custom exception classes for consistent error handling across all modules.
"""

from typing import Any


class PropLedgerException(Exception):
    """Base exception for all PropLedger related errors."""

    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(PropLedgerException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        identifier: Any,
        details: dict[str, Any] | None = None,
    ):
        message = f"{resource_type} with identifier '{identifier}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class ValidationError(PropLedgerException):
    """Raised when data validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class UnsupportedCountryError(ValidationError):
    """Raised when no tax rules exist for the requested country."""

    def __init__(self, country: Any):
        super().__init__(f"Unsupported country: {country}", field="country", value=country)
        self.country = country


class OwnershipPercentageError(ValidationError):
    """Raised when owner percentages do not add up to 100."""

    def __init__(self, total: Any):
        super().__init__(
            f"Owner percentages must sum to 100, got {total:.2f}",
            field="owners",
            value=total,
        )
        self.total = total


class BusinessLogicError(PropLedgerException):
    """Raised when business logic constraints are violated."""

    status_code = 409


class PermissionDeniedError(PropLedgerException):
    """Raised when user lacks permission to perform an action."""

    status_code = 403

    def __init__(
        self, action: str, resource_type: str, details: dict[str, Any] | None = None
    ):
        message = f"Permission denied: cannot {action} {resource_type}"
        super().__init__(message, details)
        self.action = action
        self.resource_type = resource_type


class AuthenticationError(PropLedgerException):
    """Raised when authentication fails."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication failed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class NotFoundError(PropLedgerException):
    """Raised when a resource is not found (simplified version)."""

    status_code = 404

    def __init__(
        self, message: str = "Resource not found", details: dict[str, Any] | None = None
    ):
        super().__init__(message, details)
