"""Property management models for PropLedger.

Properties carry the tax jurisdiction and the default distribution policy
used by owner income reporting. Units are the rentable spaces inside them.
"""

import enum
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import Money
from ...database import AccountScoped, Base, TimestampMixin
from ..tax.brackets import TaxMode


class PropertyUsageType(str, enum.Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    MIXED = "mixed"


class PropertyStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    UNDER_MAINTENANCE = "under_maintenance"


class DistributionFrequency(str, enum.Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class UnitType(str, enum.Enum):
    APARTMENT = "apartment"
    ROOM = "room"
    STUDIO = "studio"
    HOUSE = "house"
    COMMERCIAL = "commercial"
    PARKING = "parking"
    STORAGE = "storage"


class UnitStatus(str, enum.Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    UNDER_MAINTENANCE = "under_maintenance"
    INACTIVE = "inactive"


class Property(AccountScoped, TimestampMixin, Base):
    """A building or complex that contains units."""

    __tablename__ = "properties"

    property_code: Mapped[str] = mapped_column(String(50), nullable=False)
    property_name: Mapped[str] = mapped_column(String(255), nullable=False)
    usage_type: Mapped[PropertyUsageType] = mapped_column(
        Enum(PropertyUsageType), nullable=False, default=PropertyUsageType.RESIDENTIAL
    )
    address_line_1: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_line_2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    region: Mapped[str | None] = mapped_column(String(120), nullable=True)
    # Tax jurisdiction for income distributions
    country: Mapped[str] = mapped_column(String(120), nullable=False, default="PT")
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    income_split_mode: Mapped[TaxMode] = mapped_column(
        Enum(TaxMode), nullable=False, default=TaxMode.PRE_TAX
    )
    distribution_frequency: Mapped[DistributionFrequency] = mapped_column(
        Enum(DistributionFrequency),
        nullable=False,
        default=DistributionFrequency.MONTHLY,
    )
    total_units_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    active_units_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[PropertyStatus] = mapped_column(
        Enum(PropertyStatus), nullable=False, default=PropertyStatus.ACTIVE
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    units: Mapped[list["Unit"]] = relationship(
        "Unit",
        back_populates="property",
        cascade="all, delete-orphan",
        foreign_keys="[Unit.account_id, Unit.company_id, Unit.property_id]",
    )

    __table_args__ = (
        Index(
            "ix_properties_code",
            "account_id",
            "company_id",
            "property_code",
            unique=True,
        ),
        Index("ix_properties_status", "account_id", "company_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, code={self.property_code})>"


class Unit(AccountScoped, TimestampMixin, Base):
    """A rentable space within a property."""

    __tablename__ = "units"

    property_id: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_code: Mapped[str] = mapped_column(String(50), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    unit_type: Mapped[UnitType] = mapped_column(
        Enum(UnitType), nullable=False, default=UnitType.APARTMENT
    )
    floor_number: Mapped[str | None] = mapped_column(String(10), nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    area_sqm: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    monthly_rent: Mapped[Decimal | None] = mapped_column(Money(), nullable=True)
    status: Mapped[UnitStatus] = mapped_column(
        Enum(UnitStatus), nullable=False, default=UnitStatus.AVAILABLE
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    property: Mapped["Property"] = relationship(
        "Property",
        back_populates="units",
        foreign_keys="[Unit.account_id, Unit.company_id, Unit.property_id]",
    )

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "property_id"],
            ["properties.account_id", "properties.company_id", "properties.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_units_code",
            "account_id",
            "company_id",
            "property_id",
            "unit_code",
            unique=True,
        ),
        Index("ix_units_property", "account_id", "company_id", "property_id"),
        Index("ix_units_status", "account_id", "company_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Unit(id={self.id}, code={self.unit_code})>"
