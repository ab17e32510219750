"""Tenant management schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from .models import TenantStatus, TenantType


class TenantBase(BaseModel):
    tenant_code: str = Field(..., min_length=1, max_length=50)
    tenant_type: TenantType = TenantType.INDIVIDUAL
    first_name: str | None = Field(None, max_length=120)
    last_name: str | None = Field(None, max_length=120)
    company_name: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    tax_id: str | None = Field(None, max_length=50)
    nationality: str | None = Field(None, max_length=100)
    address: str | None = None
    notes: str | None = None


class TenantCreate(TenantBase):
    status: TenantStatus = TenantStatus.ACTIVE

    @model_validator(mode="after")
    def check_name(self):
        if self.tenant_type == TenantType.COMPANY and not self.company_name:
            raise ValueError("company_name is required for company tenants")
        if self.tenant_type == TenantType.INDIVIDUAL and not self.first_name:
            raise ValueError("first_name is required for individual tenants")
        return self


class TenantUpdate(BaseModel):
    tenant_code: str | None = Field(None, min_length=1, max_length=50)
    first_name: str | None = Field(None, max_length=120)
    last_name: str | None = Field(None, max_length=120)
    company_name: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    tax_id: str | None = Field(None, max_length=50)
    nationality: str | None = Field(None, max_length=100)
    address: str | None = None
    status: TenantStatus | None = None
    notes: str | None = None


class TenantResponse(TenantBase):
    id: int
    uuid: UUID
    display_name: str
    status: TenantStatus
    active_leases_count: int = 0
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


# ----- Portal -----


class PortalTokenResponse(BaseModel):
    token: str
    expires_at: datetime


class _StatusValue(BaseModel):
    """Reads enum statuses from other modules' rows as plain strings."""

    status: str

    @field_validator("status", mode="before")
    @classmethod
    def status_value(cls, value):
        return getattr(value, "value", value)


class PortalLeaseSummary(_StatusValue):
    id: int
    lease_code: str
    property_id: int
    unit_id: int
    start_date: date
    end_date: date
    monthly_rent: Decimal
    currency: str

    class Config:
        from_attributes = True


class PortalInvoiceSummary(_StatusValue):
    id: int
    invoice_number: str
    amount: Decimal
    currency: str
    due_date: date
    paid_date: date | None = None
    description: str | None = None

    class Config:
        from_attributes = True


class PortalView(BaseModel):
    """What a tenant sees through a portal link."""

    tenant: TenantResponse
    leases: list[PortalLeaseSummary]
    invoices: list[PortalInvoiceSummary]
