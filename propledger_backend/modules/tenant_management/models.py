"""Tenant management models for PropLedger."""

import enum
from datetime import datetime

from sqlalchemy import (
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ...core.utils import as_utc, utc_now
from ...database import AccountScoped, Base, TimestampMixin


class TenantType(str, enum.Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"


class TenantStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLACKLISTED = "blacklisted"


class Tenant(AccountScoped, TimestampMixin, Base):
    """A renter: an individual person or a company."""

    __tablename__ = "tenants"

    tenant_code: Mapped[str] = mapped_column(String(50), nullable=False)
    tenant_type: Mapped[TenantType] = mapped_column(
        Enum(TenantType), nullable=False, default=TenantType.INDIVIDUAL
    )

    # Individual
    first_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    # Company
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # NIF for Portuguese and Spanish tenants
    tax_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[TenantStatus] = mapped_column(
        Enum(TenantStatus), nullable=False, default=TenantStatus.ACTIVE
    )
    active_leases_count: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index(
            "ix_tenants_code",
            "account_id",
            "company_id",
            "tenant_code",
            unique=True,
        ),
        Index("ix_tenants_status", "account_id", "company_id", "status"),
        Index("ix_tenants_email", "account_id", "company_id", "email"),
    )

    @property
    def display_name(self) -> str:
        """Person's full name or company name, falling back to the code."""
        if self.tenant_type == TenantType.COMPANY:
            return self.company_name or self.tenant_code
        parts = [self.first_name, self.last_name]
        return " ".join(p for p in parts if p) or self.tenant_code

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, code={self.tenant_code})>"


class TenantPortalToken(Base):
    """Opaque access token for the read-only tenant portal (stored hashed)."""

    __tablename__ = "tenant_portal_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_account_id: Mapped[int] = mapped_column(Integer, nullable=False)
    tenant_company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    tenant_id: Mapped[int] = mapped_column(Integer, nullable=False)
    token_hash: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index(
            "ix_tenant_portal_tokens_tenant",
            "tenant_account_id",
            "tenant_company_id",
            "tenant_id",
        ),
    )

    @property
    def is_expired(self) -> bool:
        return utc_now() > as_utc(self.expires_at)

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None
