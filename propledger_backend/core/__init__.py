"""Core infrastructure for PropLedger backend."""

from .base_crud import BaseCRUD
from .database_types import UUID
from .exceptions import (
    AuthenticationError,
    BusinessLogicError,
    NotFoundError,
    OwnershipPercentageError,
    PermissionDeniedError,
    PropLedgerException,
    ResourceNotFoundError,
    UnsupportedCountryError,
    ValidationError,
)

__all__ = [
    "BaseCRUD",
    "UUID",
    "PropLedgerException",
    "AuthenticationError",
    "BusinessLogicError",
    "NotFoundError",
    "OwnershipPercentageError",
    "PermissionDeniedError",
    "ResourceNotFoundError",
    "UnsupportedCountryError",
    "ValidationError",
]
