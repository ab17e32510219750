"""Lease management schemas for PropLedger."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .models import LeaseStatus, TaxRegime


class LeaseBase(BaseModel):
    start_date: date
    end_date: date
    monthly_rent: Decimal = Field(..., gt=0)
    deposit: Decimal = Field(default=Decimal("0"), ge=0)
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    payment_day: int = Field(default=1, ge=1, le=28)
    tax_regime: TaxRegime = TaxRegime.STANDARD
    auto_renew: bool = False
    renewal_notice_days: int = Field(default=60, ge=0, le=365)
    notes: str | None = None

    @field_validator("end_date")
    @classmethod
    def end_date_after_start(cls, v, info):
        if "start_date" in info.data and v <= info.data["start_date"]:
            raise ValueError("End date must be after start date")
        return v


class LeaseCreate(LeaseBase):
    """Schema for creating a lease; the code is generated when omitted."""

    property_id: int
    unit_id: int
    tenant_id: int
    lease_code: str | None = Field(None, min_length=1, max_length=50)


class LeaseUpdate(BaseModel):
    """Schema for updating a DRAFT lease."""

    lease_code: str | None = Field(None, min_length=1, max_length=50)
    start_date: date | None = None
    end_date: date | None = None
    monthly_rent: Decimal | None = Field(None, gt=0)
    deposit: Decimal | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    payment_day: int | None = Field(None, ge=1, le=28)
    tax_regime: TaxRegime | None = None
    auto_renew: bool | None = None
    renewal_notice_days: int | None = Field(None, ge=0, le=365)
    notes: str | None = None


class LeaseTerminateRequest(BaseModel):
    termination_date: date | None = Field(
        None, description="Defaults to today when omitted"
    )
    reason: str = Field(..., min_length=1, max_length=2000)


class LeaseRenewRequest(BaseModel):
    new_end_date: date
    new_monthly_rent: Decimal | None = Field(None, gt=0)


class LeaseResponse(LeaseBase):
    id: int
    uuid: UUID
    account_id: int
    company_id: int
    property_id: int
    unit_id: int
    tenant_id: int
    lease_code: str
    term_days: int
    status: LeaseStatus
    activated_at: datetime | None = None
    renewed_at: datetime | None = None
    termination_date: date | None = None
    terminated_at: datetime | None = None
    termination_reason: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class LeaseExpiryResult(BaseModel):
    expired: int
    renewed: int
