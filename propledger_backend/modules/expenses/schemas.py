"""Expense schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from .models import ExpenseCategory


class ExpenseBase(BaseModel):
    property_id: int
    unit_id: int | None = None
    amount: Decimal = Field(..., gt=0)
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    expense_date: date
    category: ExpenseCategory = ExpenseCategory.OTHER
    description: str | None = Field(None, max_length=500)
    vendor_name: str | None = Field(None, max_length=255)
    notes: str | None = None


class ExpenseCreate(ExpenseBase):
    maintenance_ticket_id: int | None = None


class ExpenseUpdate(BaseModel):
    unit_id: int | None = None
    amount: Decimal | None = Field(None, gt=0)
    expense_date: date | None = None
    category: ExpenseCategory | None = None
    description: str | None = Field(None, max_length=500)
    vendor_name: str | None = Field(None, max_length=255)
    notes: str | None = None


class ExpenseResponse(ExpenseBase):
    id: int
    uuid: UUID
    maintenance_ticket_id: int | None = None
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ExpenseTotals(BaseModel):
    property_id: int
    period_start: date
    period_end: date
    by_category: dict[ExpenseCategory, Decimal]
    total: Decimal
