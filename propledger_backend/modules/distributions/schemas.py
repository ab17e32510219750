"""Income distribution schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from ..tax.brackets import TaxMode


class OwnerShareRequest(BaseModel):
    owner_id: int
    owner_name: str = Field(..., min_length=1, max_length=255)
    percentage: Decimal = Field(..., gt=0, le=100)
    tax_country: str = "Portugal"


class _PeriodMixin(BaseModel):
    period_start: date
    period_end: date

    @model_validator(mode="after")
    def validate_period(self):
        if self.period_end < self.period_start:
            raise ValueError("period_end must not precede period_start")
        return self


class DistributionRequest(_PeriodMixin):
    property_id: int
    total_income: Decimal = Field(default=Decimal("0"), ge=0)
    total_expenses: Decimal = Field(default=Decimal("0"), ge=0)
    owners: list[OwnerShareRequest] = Field(..., min_length=1)
    tax_mode: TaxMode = TaxMode.PRE_TAX
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    notes: str | None = None
    save: bool = Field(default=True, description="False returns a preview only")


class LedgerDistributionRequest(_PeriodMixin):
    property_id: int
    tax_mode: TaxMode = TaxMode.PRE_TAX
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    notes: str | None = None
    save: bool = True


class OwnerShareResponse(BaseModel):
    owner_id: int
    owner_name: str
    percentage: Decimal
    gross_share: Decimal
    taxable_income: Decimal
    tax_amount: Decimal
    net_share: Decimal
    tax_country: str
    tax_rate: Decimal
    effective_rate: Decimal
    notified_at: datetime | None = None

    class Config:
        from_attributes = True


class DistributionResponse(BaseModel):
    """A saved distribution, or a preview when ``id`` is null."""

    id: int | None = None
    uuid: UUID | None = None
    property_id: int
    period_start: date
    period_end: date
    total_income: Decimal
    total_expenses: Decimal
    net_income: Decimal
    total_tax: Decimal
    total_net_distributed: Decimal
    tax_mode: TaxMode
    currency: str
    version: int
    calculated_by: int | None = None
    recalculated_by: int | None = None
    recalculated_at: datetime | None = None
    notes: str | None = None
    shares: list[OwnerShareResponse] = []
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class NotifyResult(BaseModel):
    distribution_id: int
    notified: int


class TaxSummaryRow(BaseModel):
    distribution_id: int
    property_id: int
    period: str
    gross_share: Decimal
    tax_amount: Decimal
    net_share: Decimal


class AnnualTaxSummary(BaseModel):
    owner_id: int
    year: int
    total_gross_income: Decimal
    total_tax_paid: Decimal
    total_net_income: Decimal
    distributions: list[TaxSummaryRow] = []


class TaxForm(BaseModel):
    form: str
    year: int
    fields: dict[str, Decimal | str]


class TaxSummaryResponse(BaseModel):
    summary: AnnualTaxSummary
    tax_form: TaxForm | None = None
