"""Tenant leases and their lifecycle."""

from .models import Lease, LeaseStatus, TaxRegime
from .routers import router

__all__ = [
    # Models
    "Lease",
    # Enums
    "LeaseStatus",
    "TaxRegime",
    # Routers
    "router",
]
