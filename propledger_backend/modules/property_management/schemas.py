"""Property management schemas for PropLedger."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from ..tax.brackets import TaxMode
from .models import (
    DistributionFrequency,
    PropertyStatus,
    PropertyUsageType,
    UnitStatus,
    UnitType,
)

# ----- Property Schemas -----


class PropertyBase(BaseModel):
    """Base property schema."""

    property_code: str = Field(..., min_length=1, max_length=50)
    property_name: str = Field(..., min_length=1, max_length=255)
    usage_type: PropertyUsageType = PropertyUsageType.RESIDENTIAL
    address_line_1: str | None = Field(None, max_length=255)
    address_line_2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=120)
    region: str | None = Field(None, max_length=120)
    country: str = Field(default="PT", min_length=2, max_length=120)
    postal_code: str | None = Field(None, max_length=20)
    latitude: Decimal | None = Field(None, ge=-90, le=90)
    longitude: Decimal | None = Field(None, ge=-180, le=180)
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    income_split_mode: TaxMode = TaxMode.PRE_TAX
    distribution_frequency: DistributionFrequency = DistributionFrequency.MONTHLY
    notes: str | None = None


class PropertyCreate(PropertyBase):
    status: PropertyStatus = PropertyStatus.ACTIVE


class PropertyUpdate(BaseModel):
    """Partial property update; unset fields are left alone."""

    property_code: str | None = Field(None, min_length=1, max_length=50)
    property_name: str | None = Field(None, min_length=1, max_length=255)
    usage_type: PropertyUsageType | None = None
    address_line_1: str | None = Field(None, max_length=255)
    address_line_2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=120)
    region: str | None = Field(None, max_length=120)
    country: str | None = Field(None, min_length=2, max_length=120)
    postal_code: str | None = Field(None, max_length=20)
    latitude: Decimal | None = Field(None, ge=-90, le=90)
    longitude: Decimal | None = Field(None, ge=-180, le=180)
    currency: str | None = Field(None, min_length=3, max_length=3)
    income_split_mode: TaxMode | None = None
    distribution_frequency: DistributionFrequency | None = None
    status: PropertyStatus | None = None
    notes: str | None = None


class PropertyResponse(PropertyBase):
    id: int
    uuid: UUID
    account_id: int
    company_id: int
    status: PropertyStatus
    total_units_count: int = 0
    active_units_count: int = 0
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


# ----- Unit Schemas -----


class UnitBase(BaseModel):
    unit_code: str = Field(..., min_length=1, max_length=50)
    display_name: str | None = Field(None, max_length=255)
    unit_type: UnitType = UnitType.APARTMENT
    floor_number: str | None = Field(None, max_length=10)
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    area_sqm: Decimal | None = Field(None, ge=0)
    monthly_rent: Decimal | None = Field(None, ge=0)
    notes: str | None = None


class UnitCreate(UnitBase):
    property_id: int
    status: UnitStatus = UnitStatus.AVAILABLE


class UnitUpdate(BaseModel):
    unit_code: str | None = Field(None, min_length=1, max_length=50)
    display_name: str | None = Field(None, max_length=255)
    unit_type: UnitType | None = None
    floor_number: str | None = Field(None, max_length=10)
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    area_sqm: Decimal | None = Field(None, ge=0)
    monthly_rent: Decimal | None = Field(None, ge=0)
    status: UnitStatus | None = None
    notes: str | None = None


class UnitResponse(UnitBase):
    id: int
    uuid: UUID
    account_id: int
    company_id: int
    property_id: int
    status: UnitStatus
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class PropertyWithUnitsResponse(PropertyResponse):
    """Property response with its units."""

    units: list[UnitResponse] = []
