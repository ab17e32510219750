"""Billing models for PropLedger.

Invoices are what tenants owe; payment transactions record money received
against them. Provider-side payment flows are out of scope, so a payment is
recorded here once it has succeeded elsewhere.
"""

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
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


class InvoiceStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class PaymentMethod(str, enum.Enum):
    CARD = "card"
    MULTIBANCO = "multibanco"
    MBWAY = "mbway"
    SEPA_DEBIT = "sepa_debit"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"


class Invoice(AccountScoped, TimestampMixin, Base):
    """Amount owed by a tenant, usually one month of rent."""

    __tablename__ = "invoices"

    invoice_number: Mapped[str] = mapped_column(String(20), nullable=False)
    tenant_id: Mapped[int] = mapped_column(Integer, nullable=False)
    lease_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    property_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # amount = original_amount + late_fee
    amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    original_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    late_fee: Mapped[Decimal] = mapped_column(Money(), nullable=False, default=0)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    paid_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    # First day of the rent month for generated invoices
    billing_period: Mapped[date | None] = mapped_column(Date, nullable=True)

    status: Mapped[InvoiceStatus] = mapped_column(
        Enum(InvoiceStatus), nullable=False, default=InvoiceStatus.PENDING
    )
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # [{description, quantity, unit_price, amount}]
    line_items: Mapped[list | None] = mapped_column(JSON, nullable=True)
    late_fee_applied_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    cancelled_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "tenant_id"],
            ["tenants.account_id", "tenants.company_id", "tenants.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_invoices_number",
            "account_id",
            "company_id",
            "invoice_number",
            unique=True,
        ),
        Index("ix_invoices_tenant", "account_id", "company_id", "tenant_id"),
        Index("ix_invoices_property", "account_id", "company_id", "property_id"),
        Index(
            "ix_invoices_lease_period",
            "account_id",
            "company_id",
            "lease_id",
            "billing_period",
        ),
        Index("ix_invoices_status_due", "account_id", "company_id", "status", "due_date"),
    )

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, number={self.invoice_number}, status={self.status})>"


class PaymentTransaction(AccountScoped, TimestampMixin, Base):
    """Money received (or refunded) against an invoice."""

    __tablename__ = "payment_transactions"

    invoice_id: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod), nullable=False
    )
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), nullable=False, default=PaymentStatus.SUCCEEDED
    )
    # Provider id, Multibanco reference, transfer reference...
    reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    paid_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    refunded_amount: Mapped[Decimal | None] = mapped_column(Money(), nullable=True)
    refunded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    refund_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "invoice_id"],
            ["invoices.account_id", "invoices.company_id", "invoices.id"],
            ondelete="CASCADE",
        ),
        Index("ix_payment_transactions_invoice", "account_id", "company_id", "invoice_id"),
        Index("ix_payment_transactions_status", "account_id", "company_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<PaymentTransaction(id={self.id}, invoice_id={self.invoice_id}, amount={self.amount})>"
