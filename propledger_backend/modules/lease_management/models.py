"""Lease management models for PropLedger.

A lease binds a tenant to one unit of a property for a date range at a
monthly rent. Only ACTIVE leases are billed and occupy their unit.
"""

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...core.database_types import Money
from ...database import AccountScoped, Base, TimestampMixin


class LeaseStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class TaxRegime(str, enum.Enum):
    """How the rent is taxed for the landlord."""

    STANDARD = "standard"
    # Portuguese "regime de arrendamento acessível" and similar
    REDUCED = "reduced"
    EXEMPT = "exempt"


class Lease(AccountScoped, TimestampMixin, Base):
    """Rental agreement between the company and a tenant for one unit."""

    __tablename__ = "leases"

    property_id: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_id: Mapped[int] = mapped_column(Integer, nullable=False)
    tenant_id: Mapped[int] = mapped_column(Integer, nullable=False)
    lease_code: Mapped[str] = mapped_column(String(50), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Length of the signed term; auto-renewals extend by this many days
    term_days: Mapped[int] = mapped_column(Integer, nullable=False)

    # Financial
    monthly_rent: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    deposit: Mapped[Decimal] = mapped_column(Money(), nullable=False, default=0)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    payment_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    tax_regime: Mapped[TaxRegime] = mapped_column(
        Enum(TaxRegime), nullable=False, default=TaxRegime.STANDARD
    )

    # Renewal
    auto_renew: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    renewal_notice_days: Mapped[int] = mapped_column(
        Integer, default=60, nullable=False
    )
    renewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Status
    status: Mapped[LeaseStatus] = mapped_column(
        Enum(LeaseStatus), nullable=False, default=LeaseStatus.DRAFT
    )
    activated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Termination
    termination_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    terminated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    termination_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "property_id"],
            ["properties.account_id", "properties.company_id", "properties.id"],
            ondelete="CASCADE",
        ),
        ForeignKeyConstraint(
            ["account_id", "company_id", "unit_id"],
            ["units.account_id", "units.company_id", "units.id"],
            ondelete="CASCADE",
        ),
        ForeignKeyConstraint(
            ["account_id", "company_id", "tenant_id"],
            ["tenants.account_id", "tenants.company_id", "tenants.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_leases_code",
            "account_id",
            "company_id",
            "lease_code",
            unique=True,
        ),
        Index("ix_leases_unit", "account_id", "company_id", "unit_id"),
        Index("ix_leases_tenant", "account_id", "company_id", "tenant_id"),
        Index("ix_leases_status", "account_id", "company_id", "status"),
        Index(
            "ix_leases_dates",
            "account_id",
            "company_id",
            "start_date",
            "end_date",
        ),
    )

    def __repr__(self) -> str:
        return f"<Lease(id={self.id}, code={self.lease_code}, unit_id={self.unit_id})>"
