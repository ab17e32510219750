"""Maintenance tickets."""

from .models import (
    STATUS_TRANSITIONS,
    MaintenanceCategory,
    MaintenancePriority,
    MaintenanceStatus,
    MaintenanceTicket,
)
from .routers import router

__all__ = [
    "MaintenanceTicket",
    "MaintenanceCategory",
    "MaintenancePriority",
    "MaintenanceStatus",
    "STATUS_TRANSITIONS",
    "router",
]
