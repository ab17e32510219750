"""Property and unit management for PropLedger."""

from .models import (
    DistributionFrequency,
    Property,
    PropertyStatus,
    PropertyUsageType,
    Unit,
    UnitStatus,
    UnitType,
)
from .routers import router, units_router

__all__ = [
    # Models
    "Property",
    "Unit",
    # Enums
    "DistributionFrequency",
    "PropertyStatus",
    "PropertyUsageType",
    "UnitStatus",
    "UnitType",
    # Routers
    "router",
    "units_router",
]
