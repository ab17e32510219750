"""Tenant management and the tenant portal."""

from .models import Tenant, TenantPortalToken, TenantStatus, TenantType
from .routers import portal_router, router

__all__ = [
    # Models
    "Tenant",
    "TenantPortalToken",
    # Enums
    "TenantType",
    "TenantStatus",
    # Routers
    "router",
    "portal_router",
]
