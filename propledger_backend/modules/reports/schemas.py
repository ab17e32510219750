"""Financial report schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from ..billing.schemas import InvoiceSummary
from ..expenses.models import ExpenseCategory
from ..property_management.models import UnitStatus

ZERO = Decimal("0.00")


class ReportPeriod(BaseModel):
    period_start: date
    period_end: date
    label: str


class PropertyIncome(BaseModel):
    property_id: int | None = None
    property_name: str
    rent: Decimal = ZERO
    other: Decimal = ZERO
    total: Decimal = ZERO


class IncomeBreakdown(BaseModel):
    total_rent: Decimal = ZERO
    total_other: Decimal = ZERO
    total: Decimal = ZERO
    by_property: list[PropertyIncome] = Field(default_factory=list)


class CategoryExpense(BaseModel):
    category: ExpenseCategory
    amount: Decimal
    percentage: Decimal


class PropertyExpense(BaseModel):
    property_id: int
    property_name: str
    amount: Decimal
    percentage: Decimal


class ExpenseBreakdown(BaseModel):
    total: Decimal = ZERO
    by_category: list[CategoryExpense] = Field(default_factory=list)
    by_property: list[PropertyExpense] = Field(default_factory=list)


class FinancialReport(BaseModel):
    """Income, expenses and invoices of a company over a period."""

    period: ReportPeriod
    income: IncomeBreakdown
    expenses: ExpenseBreakdown
    invoices: InvoiceSummary
    net_income: Decimal
    profit_margin: Decimal = Field(description="Net income as a percent of income")


class QuarterSummary(BaseModel):
    quarter: str
    income: Decimal
    expenses: Decimal
    net: Decimal


class PropertyNet(BaseModel):
    property_id: int | None = None
    property_name: str
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    net: Decimal = ZERO


class TaxReport(BaseModel):
    year: int
    gross_income: Decimal
    total_expenses: Decimal
    net_income: Decimal
    deductible_expenses: list[CategoryExpense]
    quarterly_breakdown: list[QuarterSummary]
    properties: list[PropertyNet]


class RentRollEntry(BaseModel):
    property_id: int
    property_name: str
    unit_id: int
    unit_code: str
    unit_status: UnitStatus
    monthly_rent: Decimal | None = Field(
        None, description="Lease rent when let, otherwise the unit's asking rent"
    )
    lease_id: int | None = None
    tenant_name: str | None = None
    lease_end: date | None = None


class RentRoll(BaseModel):
    as_of: date
    total_monthly_rent: Decimal
    total_annual_rent: Decimal
    units_count: int
    occupied_count: int
    occupancy_rate: Decimal
    entries: list[RentRollEntry]
