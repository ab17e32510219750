"""Owner and property-ownership business rules."""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import BusinessLogicError, NotFoundError, ValidationError
from ...core.logging import get_logger
from ..distributions.calculator import (
    HUNDRED,
    PERCENTAGE_TOLERANCE,
    validate_owner_percentages,
)
from ..property_management import crud as property_crud
from . import crud
from .crud import owner_crud
from .models import Owner, PropertyOwner
from .schemas import OwnerCreate, OwnerUpdate, PropertyOwnerCreate

logger = get_logger("owners")


async def get_owner(
    db: AsyncSession, owner_id: int, account_id: int, company_id: int
) -> Owner:
    owner = await owner_crud.get(db, owner_id, account_id, company_id)
    if not owner:
        raise NotFoundError(f"Owner with ID {owner_id} not found")
    return owner


async def create_owner(
    db: AsyncSession, data: OwnerCreate, account_id: int, company_id: int
) -> Owner:
    owner = await owner_crud.create(db, data, account_id, company_id)
    await db.commit()
    logger.info("Owner created", extra={"owner_id": owner.id})
    return owner


async def update_owner(
    db: AsyncSession,
    owner_id: int,
    data: OwnerUpdate,
    account_id: int,
    company_id: int,
) -> Owner:
    owner = await get_owner(db, owner_id, account_id, company_id)
    owner = await owner_crud.update(db, owner, data)
    await db.commit()
    return owner


async def deactivate_owner(
    db: AsyncSession, owner_id: int, account_id: int, company_id: int
) -> None:
    """Soft delete; historical distribution shares keep pointing at the row."""
    owner = await get_owner(db, owner_id, account_id, company_id)
    await owner_crud.delete(db, owner)
    await db.commit()


async def _require_property(
    db: AsyncSession, property_id: int, account_id: int, company_id: int
) -> None:
    if not await property_crud.get_property_by_id(
        db, property_id, account_id, company_id
    ):
        raise NotFoundError(f"Property with ID {property_id} not found")


def _check_running_total(total: Decimal) -> None:
    if total > HUNDRED + PERCENTAGE_TOLERANCE:
        raise ValidationError(
            f"Total ownership would be {total:.2f}%, which exceeds 100%",
            field="ownership_percentage",
            value=total,
        )


async def list_property_owners(
    db: AsyncSession, property_id: int, account_id: int, company_id: int
) -> list[PropertyOwner]:
    await _require_property(db, property_id, account_id, company_id)
    return await crud.list_property_owners(db, property_id, account_id, company_id)


async def add_property_owner(
    db: AsyncSession,
    property_id: int,
    data: PropertyOwnerCreate,
    account_id: int,
    company_id: int,
) -> PropertyOwner:
    """Give an owner a share of a property.

    Raises:
        NotFoundError: If the property or owner does not exist
        BusinessLogicError: If the owner already holds a share
        ValidationError: If the total would exceed 100%
    """
    await _require_property(db, property_id, account_id, company_id)
    await get_owner(db, data.owner_id, account_id, company_id)

    if await crud.get_property_owner(
        db, property_id, data.owner_id, account_id, company_id
    ):
        raise BusinessLogicError("Owner already has a share of this property")

    current = await crud.total_ownership(db, property_id, account_id, company_id)
    _check_running_total(current + data.ownership_percentage)

    [link] = await crud.create_property_owners(
        db,
        property_id,
        [(data.owner_id, data.ownership_percentage)],
        account_id,
        company_id,
    )
    await db.commit()
    return link


async def update_property_owner(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    percentage: Decimal,
    account_id: int,
    company_id: int,
) -> PropertyOwner:
    link = await crud.get_property_owner(
        db, property_id, owner_id, account_id, company_id
    )
    if not link:
        raise NotFoundError("Owner has no share of this property")

    others = await crud.total_ownership(
        db, property_id, account_id, company_id, exclude_owner_id=owner_id
    )
    _check_running_total(others + percentage)

    link = await crud.update_property_owner(db, link, percentage)
    await db.commit()
    return link


async def remove_property_owner(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    account_id: int,
    company_id: int,
) -> None:
    link = await crud.get_property_owner(
        db, property_id, owner_id, account_id, company_id
    )
    if not link:
        raise NotFoundError("Owner has no share of this property")
    await crud.delete_property_owner(db, link)
    await db.commit()


async def set_property_owners(
    db: AsyncSession,
    property_id: int,
    shares: list[PropertyOwnerCreate],
    account_id: int,
    company_id: int,
) -> list[PropertyOwner]:
    """Replace a property's full ownership table; shares must total 100.

    Raises:
        OwnershipPercentageError: If the shares do not total 100
        ValidationError: If an owner is listed twice
    """
    validate_owner_percentages(share.ownership_percentage for share in shares)

    owner_ids = [share.owner_id for share in shares]
    if len(set(owner_ids)) != len(owner_ids):
        raise ValidationError("Each owner may appear only once", field="owners")

    await _require_property(db, property_id, account_id, company_id)
    known = await owner_crud.get_many(db, owner_ids, account_id, company_id)
    missing = [owner_id for owner_id in owner_ids if owner_id not in known]
    if missing:
        raise NotFoundError(f"Owners not found: {missing}")

    links = await crud.replace_property_owners(
        db,
        property_id,
        [(share.owner_id, share.ownership_percentage) for share in shares],
        account_id,
        company_id,
    )
    await db.commit()

    logger.info(
        "Property ownership replaced",
        extra={"property_id": property_id, "owners": len(links)},
    )
    return links
