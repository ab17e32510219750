"""Owner schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from .models import OwnerRole


class OwnerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    address: str | None = None
    tax_residence_country: str = Field(default="PT", min_length=2, max_length=120)
    tax_identification_number: str | None = Field(None, max_length=50)
    tax_rate: Decimal | None = Field(None, ge=0, le=100)
    role: OwnerRole = OwnerRole.OWNER


class OwnerCreate(OwnerBase):
    pass


class OwnerUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    address: str | None = None
    tax_residence_country: str | None = Field(None, min_length=2, max_length=120)
    tax_identification_number: str | None = Field(None, max_length=50)
    tax_rate: Decimal | None = Field(None, ge=0, le=100)
    role: OwnerRole | None = None
    is_active: bool | None = None


class OwnerResponse(OwnerBase):
    id: int
    uuid: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class PropertyOwnerCreate(BaseModel):
    owner_id: int
    ownership_percentage: Decimal = Field(..., gt=0, le=100)


class PropertyOwnerUpdate(BaseModel):
    ownership_percentage: Decimal = Field(..., gt=0, le=100)


class PropertyOwnerResponse(BaseModel):
    id: int
    property_id: int
    owner_id: int
    ownership_percentage: Decimal
    created_at: datetime

    class Config:
        from_attributes = True


class PropertyOwnersReplace(BaseModel):
    """Full replacement of a property's ownership table."""

    owners: list[PropertyOwnerCreate] = Field(..., min_length=1)
