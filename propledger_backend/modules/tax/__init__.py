"""Rental-income tax rules and calculator."""

from .brackets import (
    TAX_RULES,
    TaxBracket,
    TaxCountry,
    TaxMode,
    get_tax_brackets,
    get_tax_rules,
)
from .calculator import (
    TaxCalculationInput,
    TaxCalculationResult,
    calculate_quarterly_estimate,
    calculate_tax,
    progressive_tax,
)
from .routers import router

__all__ = [
    "TAX_RULES",
    "TaxBracket",
    "TaxCountry",
    "TaxMode",
    "TaxCalculationInput",
    "TaxCalculationResult",
    "calculate_quarterly_estimate",
    "calculate_tax",
    "get_tax_brackets",
    "get_tax_rules",
    "progressive_tax",
    "router",
]
