"""Multi-owner income distribution and owner tax reporting."""

from .calculator import (
    DistributionInput,
    DistributionResult,
    OwnerShareInput,
    OwnerShareResult,
    calculate_distribution,
    validate_owner_percentages,
)
from .models import IncomeDistribution, IncomeDistributionShare
from .routers import router

__all__ = [
    "IncomeDistribution",
    "IncomeDistributionShare",
    "DistributionInput",
    "DistributionResult",
    "OwnerShareInput",
    "OwnerShareResult",
    "calculate_distribution",
    "validate_owner_percentages",
    "router",
]
