"""Billing schemas for PropLedger."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from .models import InvoiceStatus, PaymentMethod, PaymentStatus

# ----- Invoices -----


class InvoiceLineItem(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    quantity: Decimal = Field(default=Decimal("1"), gt=0)
    unit_price: Decimal = Field(..., ge=0)
    amount: Decimal | None = Field(None, description="quantity x unit_price when omitted")

    @model_validator(mode="after")
    def fill_amount(self):
        if self.amount is None:
            self.amount = (self.quantity * self.unit_price).quantize(Decimal("0.01"))
        return self


class InvoiceCreate(BaseModel):
    tenant_id: int
    lease_id: int | None = None
    property_id: int | None = None
    amount: Decimal | None = Field(
        None, gt=0, description="Defaults to the sum of the line items"
    )
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    issue_date: date | None = None
    due_date: date
    description: str | None = Field(None, max_length=500)
    line_items: list[InvoiceLineItem] = []
    notes: str | None = None

    @model_validator(mode="after")
    def require_amount(self):
        if self.amount is None and not self.line_items:
            raise ValueError("Either amount or line_items is required")
        return self


class InvoiceUpdate(BaseModel):
    amount: Decimal | None = Field(None, gt=0)
    due_date: date | None = None
    description: str | None = Field(None, max_length=500)
    line_items: list[InvoiceLineItem] | None = None
    notes: str | None = None


class InvoiceMarkPaid(BaseModel):
    paid_date: date | None = Field(None, description="Defaults to today")


class InvoiceResponse(BaseModel):
    id: int
    uuid: UUID
    account_id: int
    company_id: int
    invoice_number: str
    tenant_id: int
    lease_id: int | None = None
    property_id: int | None = None
    amount: Decimal
    original_amount: Decimal
    late_fee: Decimal
    currency: str
    issue_date: date
    due_date: date
    paid_date: date | None = None
    billing_period: date | None = None
    status: InvoiceStatus
    description: str | None = None
    line_items: list[InvoiceLineItem] | None = None
    late_fee_applied_at: datetime | None = None
    cancelled_at: datetime | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class InvoiceSummary(BaseModel):
    pending_total: Decimal = Decimal("0.00")
    pending_count: int = 0
    paid_total: Decimal = Decimal("0.00")
    paid_count: int = 0
    overdue_total: Decimal = Decimal("0.00")
    overdue_count: int = 0
    cancelled_count: int = 0
    late_fees_total: Decimal = Decimal("0.00")


class LateFeeRunResult(BaseModel):
    checked: int = 0
    fees_applied: int = 0
    marked_overdue: int = 0
    skipped: int = 0
    total_late_fees: Decimal = Decimal("0.00")


class MonthlyInvoiceRequest(BaseModel):
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)
    due_day: int | None = Field(
        None, ge=1, le=28, description="Defaults to each lease's payment day"
    )


class MonthlyInvoiceResult(BaseModel):
    created: list[InvoiceResponse] = []
    skipped: int = 0


# ----- Payments -----


class PaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    payment_method: PaymentMethod
    reference: str | None = Field(None, max_length=255)
    paid_at: datetime | None = None
    notes: str | None = None


class RefundRequest(BaseModel):
    amount: Decimal | None = Field(None, gt=0, description="Full refund when omitted")
    reason: str | None = None


class PaymentResponse(BaseModel):
    id: int
    uuid: UUID
    invoice_id: int
    amount: Decimal
    currency: str
    payment_method: PaymentMethod
    status: PaymentStatus
    reference: str | None = None
    paid_at: datetime
    refunded_amount: Decimal | None = None
    refunded_at: datetime | None = None
    refund_reason: str | None = None
    notes: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class PaymentMethodsResponse(BaseModel):
    country: str
    methods: list[PaymentMethod]
