"""Income distribution models.

A distribution is one calculation run for a property and period; each
recalculation of the same period is stored as a new version so earlier
figures stay auditable.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import Money, Percentage
from ...database import AccountScoped, Base, TimestampMixin
from ..tax.brackets import TaxMode


class IncomeDistribution(AccountScoped, TimestampMixin, Base):
    __tablename__ = "income_distributions"

    property_id: Mapped[int] = mapped_column(Integer, nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    # Financial totals
    total_income: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    total_expenses: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    net_income: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    total_tax: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    total_net_distributed: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    tax_mode: Mapped[TaxMode] = mapped_column(
        Enum(TaxMode), nullable=False, default=TaxMode.PRE_TAX
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    # Audit
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    calculated_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    recalculated_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    recalculated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    shares: Mapped[list["IncomeDistributionShare"]] = relationship(
        "IncomeDistributionShare",
        back_populates="distribution",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="IncomeDistributionShare.id",
        foreign_keys=(
            "[IncomeDistributionShare.account_id, IncomeDistributionShare.company_id, "
            "IncomeDistributionShare.distribution_id]"
        ),
    )

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "property_id"],
            ["properties.account_id", "properties.company_id", "properties.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_income_distributions_version",
            "account_id",
            "company_id",
            "property_id",
            "period_start",
            "period_end",
            "version",
            unique=True,
        ),
        Index(
            "ix_income_distributions_period",
            "account_id",
            "company_id",
            "period_start",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<IncomeDistribution(id={self.id}, property_id={self.property_id}, "
            f"period={self.period_start}..{self.period_end}, v{self.version})>"
        )


class IncomeDistributionShare(AccountScoped, TimestampMixin, Base):
    """One owner's slice of a distribution."""

    __tablename__ = "income_distribution_shares"

    distribution_id: Mapped[int] = mapped_column(Integer, nullable=False)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    # Snapshot of the owner's name at calculation time
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    percentage: Mapped[Decimal] = mapped_column(Percentage(), nullable=False)
    gross_share: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    taxable_income: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    net_share: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    tax_country: Mapped[str] = mapped_column(String(50), nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(Percentage(), nullable=False)
    effective_rate: Mapped[Decimal] = mapped_column(Percentage(), nullable=False)
    notified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    distribution: Mapped["IncomeDistribution"] = relationship(
        "IncomeDistribution",
        back_populates="shares",
        foreign_keys=(
            "[IncomeDistributionShare.account_id, IncomeDistributionShare.company_id, "
            "IncomeDistributionShare.distribution_id]"
        ),
    )

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "distribution_id"],
            [
                "income_distributions.account_id",
                "income_distributions.company_id",
                "income_distributions.id",
            ],
            ondelete="CASCADE",
        ),
        Index(
            "ix_income_distribution_shares_owner",
            "account_id",
            "company_id",
            "owner_id",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<IncomeDistributionShare(distribution_id={self.distribution_id}, "
            f"owner_id={self.owner_id}, net={self.net_share})>"
        )
