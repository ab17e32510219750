"""Property owners and ownership shares."""

from .models import Owner, OwnerRole, PropertyOwner
from .routers import property_owners_router, router

__all__ = [
    "Owner",
    "OwnerRole",
    "PropertyOwner",
    "router",
    "property_owners_router",
]
