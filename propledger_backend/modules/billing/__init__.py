"""Invoices, late fees and payments."""

from .late_fees import LateFeeConfig, calculate_late_fee
from .models import (
    Invoice,
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentTransaction,
)
from .payment_methods import (
    available_payment_methods,
    format_multibanco_reference,
    validate_portuguese_phone,
    validate_spanish_phone,
)
from .routers import payments_router, router

__all__ = [
    # Models
    "Invoice",
    "PaymentTransaction",
    # Enums
    "InvoiceStatus",
    "PaymentMethod",
    "PaymentStatus",
    # Late fees
    "LateFeeConfig",
    "calculate_late_fee",
    # Payment helpers
    "available_payment_methods",
    "format_multibanco_reference",
    "validate_portuguese_phone",
    "validate_spanish_phone",
    # Routers
    "router",
    "payments_router",
]
