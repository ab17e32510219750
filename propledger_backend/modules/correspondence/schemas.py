"""Correspondence schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .models import CorrespondenceStatus, CorrespondenceType

# ----- Templates -----


class TemplateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    template_type: CorrespondenceType = CorrespondenceType.LETTER
    subject: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    variables: list[str] | None = Field(
        None, description="Detected from subject and content when omitted"
    )


class TemplateCreate(TemplateBase):
    is_active: bool = True


class TemplateUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    template_type: CorrespondenceType | None = None
    subject: str | None = Field(None, min_length=1, max_length=500)
    content: str | None = Field(None, min_length=1)
    variables: list[str] | None = None
    is_active: bool | None = None


class TemplateResponse(TemplateBase):
    id: int
    uuid: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


# ----- Correspondence -----


class GenerateCorrespondenceRequest(BaseModel):
    template_id: int
    tenant_id: int
    variables: dict[str, str] = {}


class CorrespondenceFailed(BaseModel):
    reason: str = Field(..., min_length=1)


class CorrespondenceResponse(BaseModel):
    id: int
    uuid: UUID
    tenant_id: int
    template_id: int | None = None
    correspondence_type: CorrespondenceType
    subject: str
    content: str
    status: CorrespondenceStatus
    sent_at: datetime | None = None
    sent_by: int | None = None
    failure_reason: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
