"""Owner models: beneficial owners and their share of each property."""

import enum
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...core.database_types import Percentage
from ...database import AccountScoped, Base, TimestampMixin


class OwnerRole(str, enum.Enum):
    OWNER = "owner"
    CO_OWNER = "co_owner"
    INVESTOR = "investor"


class Owner(AccountScoped, TimestampMixin, Base):
    """A person or entity that receives rental income."""

    __tablename__ = "owners"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    tax_residence_country: Mapped[str] = mapped_column(
        String(120), nullable=False, default="PT"
    )
    # NIF
    tax_identification_number: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    tax_rate: Mapped[Decimal | None] = mapped_column(Percentage(), nullable=True)
    role: Mapped[OwnerRole] = mapped_column(
        Enum(OwnerRole), nullable=False, default=OwnerRole.OWNER
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("ix_owners_name", "account_id", "company_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<Owner(id={self.id}, name={self.name})>"


class PropertyOwner(AccountScoped, TimestampMixin, Base):
    """An owner's percentage share of one property."""

    __tablename__ = "property_owners"

    property_id: Mapped[int] = mapped_column(Integer, nullable=False)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    ownership_percentage: Mapped[Decimal] = mapped_column(Percentage(), nullable=False)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "property_id"],
            ["properties.account_id", "properties.company_id", "properties.id"],
            ondelete="CASCADE",
        ),
        ForeignKeyConstraint(
            ["account_id", "company_id", "owner_id"],
            ["owners.account_id", "owners.company_id", "owners.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_property_owners_pair",
            "account_id",
            "company_id",
            "property_id",
            "owner_id",
            unique=True,
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<PropertyOwner(property_id={self.property_id}, "
            f"owner_id={self.owner_id}, pct={self.ownership_percentage})>"
        )
