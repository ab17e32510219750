"""Correspondence models for PropLedger.

Templates hold reusable text with ``{{ variable }}`` placeholders;
correspondence rows are the rendered, tenant-specific letters and emails.
"""

import enum
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...database import AccountScoped, Base, TimestampMixin


class CorrespondenceType(str, enum.Enum):
    LETTER = "letter"
    EMAIL = "email"
    NOTICE = "notice"
    REMINDER = "reminder"


class CorrespondenceStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    FAILED = "failed"


class CorrespondenceTemplate(AccountScoped, TimestampMixin, Base):
    __tablename__ = "correspondence_templates"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    template_type: Mapped[CorrespondenceType] = mapped_column(
        Enum(CorrespondenceType), nullable=False, default=CorrespondenceType.LETTER
    )
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Placeholder names the template expects, for editors and validation
    variables: Mapped[list | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("ix_correspondence_templates_name", "account_id", "company_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<CorrespondenceTemplate(id={self.id}, name={self.name})>"


class Correspondence(AccountScoped, TimestampMixin, Base):
    __tablename__ = "correspondence"

    tenant_id: Mapped[int] = mapped_column(Integer, nullable=False)
    template_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    correspondence_type: Mapped[CorrespondenceType] = mapped_column(
        Enum(CorrespondenceType), nullable=False, default=CorrespondenceType.LETTER
    )
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[CorrespondenceStatus] = mapped_column(
        Enum(CorrespondenceStatus),
        nullable=False,
        default=CorrespondenceStatus.DRAFT,
    )
    sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    # User id of the sender
    sent_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    failure_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "tenant_id"],
            ["tenants.account_id", "tenants.company_id", "tenants.id"],
            ondelete="CASCADE",
        ),
        Index("ix_correspondence_tenant", "account_id", "company_id", "tenant_id"),
        Index("ix_correspondence_status", "account_id", "company_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Correspondence(id={self.id}, tenant_id={self.tenant_id}, status={self.status})>"
