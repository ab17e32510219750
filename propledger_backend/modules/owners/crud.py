"""Data access for owners and property ownership shares."""

from decimal import Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from ...database import get_next_id_for_tenant
from .models import Owner, PropertyOwner
from .schemas import OwnerCreate, OwnerUpdate


class OwnerCRUD(BaseCRUD[Owner, OwnerCreate, OwnerUpdate]):
    search_fields = ["name", "email", "tax_identification_number"]
    default_order_by = "name"
    default_order_desc = False

    async def get_many(
        self, db: AsyncSession, ids: list[int], account_id: int, company_id: int
    ) -> dict[int, Owner]:
        """Owners keyed by id; unknown ids are simply absent."""
        if not ids:
            return {}
        query = self._scoped(select(Owner), account_id, company_id).where(
            Owner.id.in_(ids)
        )
        result = await db.execute(query)
        return {owner.id: owner for owner in result.scalars().all()}


owner_crud = OwnerCRUD(Owner)


async def get_property_owner(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    account_id: int,
    company_id: int,
) -> PropertyOwner | None:
    result = await db.execute(
        select(PropertyOwner).where(
            and_(
                PropertyOwner.account_id == account_id,
                PropertyOwner.company_id == company_id,
                PropertyOwner.property_id == property_id,
                PropertyOwner.owner_id == owner_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def list_property_owners(
    db: AsyncSession, property_id: int, account_id: int, company_id: int
) -> list[PropertyOwner]:
    result = await db.execute(
        select(PropertyOwner)
        .where(
            and_(
                PropertyOwner.account_id == account_id,
                PropertyOwner.company_id == company_id,
                PropertyOwner.property_id == property_id,
            )
        )
        .order_by(PropertyOwner.ownership_percentage.desc(), PropertyOwner.id)
    )
    return list(result.scalars().all())


async def total_ownership(
    db: AsyncSession,
    property_id: int,
    account_id: int,
    company_id: int,
    exclude_owner_id: int | None = None,
) -> Decimal:
    """Sum of ownership percentages on a property."""
    query = select(func.coalesce(func.sum(PropertyOwner.ownership_percentage), 0)).where(
        and_(
            PropertyOwner.account_id == account_id,
            PropertyOwner.company_id == company_id,
            PropertyOwner.property_id == property_id,
        )
    )
    if exclude_owner_id is not None:
        query = query.where(PropertyOwner.owner_id != exclude_owner_id)
    result = await db.execute(query)
    return Decimal(str(result.scalar() or 0))


async def create_property_owners(
    db: AsyncSession,
    property_id: int,
    shares: list[tuple[int, Decimal]],
    account_id: int,
    company_id: int,
    first_id: int | None = None,
) -> list[PropertyOwner]:
    """Insert (owner_id, percentage) rows in one flush."""
    if first_id is None:
        first_id = await get_next_id_for_tenant(
            db, PropertyOwner, account_id, company_id
        )
    links = [
        PropertyOwner(
            account_id=account_id,
            company_id=company_id,
            id=first_id + offset,
            property_id=property_id,
            owner_id=owner_id,
            ownership_percentage=percentage,
        )
        for offset, (owner_id, percentage) in enumerate(shares)
    ]
    db.add_all(links)
    await db.flush()
    for link in links:
        await db.refresh(link)
    return links


async def update_property_owner(
    db: AsyncSession, link: PropertyOwner, percentage: Decimal
) -> PropertyOwner:
    link.ownership_percentage = percentage
    await db.flush()
    await db.refresh(link)
    return link


async def delete_property_owner(db: AsyncSession, link: PropertyOwner) -> None:
    await db.delete(link)
    await db.flush()


async def replace_property_owners(
    db: AsyncSession,
    property_id: int,
    shares: list[tuple[int, Decimal]],
    account_id: int,
    company_id: int,
) -> list[PropertyOwner]:
    """Swap a property's ownership table for ``shares``.

    New ids are allocated before the delete so none is reused in the
    same transaction.
    """
    first_id = await get_next_id_for_tenant(db, PropertyOwner, account_id, company_id)
    for link in await list_property_owners(db, property_id, account_id, company_id):
        await db.delete(link)
    await db.flush()
    return await create_property_owners(
        db, property_id, shares, account_id, company_id, first_id=first_id
    )
