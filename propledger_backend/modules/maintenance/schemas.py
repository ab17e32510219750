"""Maintenance ticket schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from .models import MaintenanceCategory, MaintenancePriority, MaintenanceStatus


class TicketBase(BaseModel):
    property_id: int
    unit_id: int | None = None
    tenant_id: int | None = None
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    category: MaintenanceCategory = MaintenanceCategory.OTHER
    priority: MaintenancePriority = MaintenancePriority.MEDIUM
    assigned_to: str | None = Field(None, max_length=100)
    scheduled_date: date | None = None
    estimated_cost: Decimal | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=2000)


class TicketCreate(TicketBase):
    reported_date: date | None = Field(None, description="Defaults to today")


class TicketUpdate(BaseModel):
    unit_id: int | None = None
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=2000)
    category: MaintenanceCategory | None = None
    priority: MaintenancePriority | None = None
    assigned_to: str | None = Field(None, max_length=100)
    scheduled_date: date | None = None
    estimated_cost: Decimal | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=2000)


class TicketStatusChange(BaseModel):
    status: MaintenanceStatus
    completed_date: date | None = Field(
        None, description="Only for COMPLETED; defaults to today"
    )
    actual_cost: Decimal | None = Field(None, ge=0)
    record_expense: bool = Field(
        default=False,
        description="Book actual_cost as a maintenance expense on completion",
    )


class TicketResponse(TicketBase):
    id: int
    uuid: UUID
    status: MaintenanceStatus
    reported_date: date
    completed_date: date | None = None
    resolved_at: datetime | None = None
    actual_cost: Decimal | None = None
    expense_id: int | None = None
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
