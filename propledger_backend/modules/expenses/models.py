"""Property expense models for PropLedger."""

import enum
from datetime import date
from decimal import Decimal

from sqlalchemy import (
    Date,
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


class ExpenseCategory(str, enum.Enum):
    MAINTENANCE = "maintenance"
    UTILITIES = "utilities"
    INSURANCE = "insurance"
    TAXES = "taxes"
    MANAGEMENT = "management"
    MORTGAGE_INTEREST = "mortgage_interest"
    COMMUNITY_FEES = "community_fees"
    OTHER = "other"


class Expense(AccountScoped, TimestampMixin, Base):
    """Money spent on a property; deducted from income in distributions."""

    __tablename__ = "expenses"

    property_id: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    expense_date: Mapped[date] = mapped_column(Date, nullable=False)
    category: Mapped[ExpenseCategory] = mapped_column(
        Enum(ExpenseCategory), nullable=False, default=ExpenseCategory.OTHER
    )
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    vendor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Set when the expense was booked from a completed maintenance ticket
    maintenance_ticket_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "property_id"],
            ["properties.account_id", "properties.company_id", "properties.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_expenses_property_date",
            "account_id",
            "company_id",
            "property_id",
            "expense_date",
        ),
        Index("ix_expenses_category", "account_id", "company_id", "category"),
    )

    def __repr__(self) -> str:
        return f"<Expense(id={self.id}, property_id={self.property_id}, amount={self.amount})>"
