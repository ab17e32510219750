"""Maintenance ticket models for PropLedger."""

import enum
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
from sqlalchemy.orm import Mapped, mapped_column

from ...core.database_types import Money
from ...database import AccountScoped, Base, TimestampMixin


class MaintenanceCategory(str, enum.Enum):
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    HVAC = "hvac"
    CLEANING = "cleaning"
    REPAIRS = "repairs"
    INSPECTION = "inspection"
    OTHER = "other"


class MaintenancePriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class MaintenanceStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Allowed status moves; COMPLETED and CANCELLED are terminal
STATUS_TRANSITIONS: dict[MaintenanceStatus, frozenset[MaintenanceStatus]] = {
    MaintenanceStatus.OPEN: frozenset(
        {
            MaintenanceStatus.IN_PROGRESS,
            MaintenanceStatus.CANCELLED,
            MaintenanceStatus.COMPLETED,
        }
    ),
    MaintenanceStatus.IN_PROGRESS: frozenset(
        {MaintenanceStatus.COMPLETED, MaintenanceStatus.CANCELLED}
    ),
    MaintenanceStatus.COMPLETED: frozenset(),
    MaintenanceStatus.CANCELLED: frozenset(),
}


class MaintenanceTicket(AccountScoped, TimestampMixin, Base):
    """Repair or inspection request for a property or one of its units."""

    __tablename__ = "maintenance_tickets"

    property_id: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tenant_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[MaintenanceCategory] = mapped_column(
        Enum(MaintenanceCategory), nullable=False, default=MaintenanceCategory.OTHER
    )
    priority: Mapped[MaintenancePriority] = mapped_column(
        Enum(MaintenancePriority), nullable=False, default=MaintenancePriority.MEDIUM
    )
    status: Mapped[MaintenanceStatus] = mapped_column(
        Enum(MaintenanceStatus), nullable=False, default=MaintenanceStatus.OPEN
    )
    assigned_to: Mapped[str | None] = mapped_column(String(100), nullable=True)

    reported_date: Mapped[date] = mapped_column(Date, nullable=False)
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    estimated_cost: Mapped[Decimal | None] = mapped_column(Money(), nullable=True)
    actual_cost: Mapped[Decimal | None] = mapped_column(Money(), nullable=True)
    # Expense booked on completion, if any
    expense_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "property_id"],
            ["properties.account_id", "properties.company_id", "properties.id"],
            ondelete="CASCADE",
        ),
        Index("ix_maintenance_tickets_property", "account_id", "company_id", "property_id"),
        Index("ix_maintenance_tickets_status", "account_id", "company_id", "status"),
        Index("ix_maintenance_tickets_priority", "account_id", "company_id", "priority"),
    )

    @property
    def is_closed(self) -> bool:
        return not STATUS_TRANSITIONS[self.status]

    def __repr__(self) -> str:
        return f"<MaintenanceTicket(id={self.id}, title={self.title}, status={self.status})>"
