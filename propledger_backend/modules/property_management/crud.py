"""CRUD operations for property management module."""

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ...database import get_next_id_for_tenant
from .models import Property, PropertyStatus, Unit, UnitStatus

# ----- Property CRUD -----


async def get_property_by_id(
    db: AsyncSession,
    property_id: int,
    account_id: int,
    company_id: int,
    include_units: bool = False,
    include_deleted: bool = False,
) -> Property | None:
    """Get a property by ID within tenant scope."""
    filters = [
        Property.id == property_id,
        Property.account_id == account_id,
        Property.company_id == company_id,
    ]
    if not include_deleted:
        filters.append(Property.is_deleted == False)  # noqa: E712
    query = select(Property).where(and_(*filters))
    if include_units:
        query = query.options(selectinload(Property.units))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_property_by_code(
    db: AsyncSession,
    property_code: str,
    account_id: int,
    company_id: int,
) -> Property | None:
    result = await db.execute(
        select(Property).where(
            and_(
                Property.property_code == property_code,
                Property.account_id == account_id,
                Property.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_properties(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    skip: int = 0,
    limit: int = 100,
    status: PropertyStatus | None = None,
    usage_type: str | None = None,
    country: str | None = None,
    search: str | None = None,
) -> tuple[list[Property], int]:
    """Get properties with filtering and pagination.

    Returns:
        Tuple of (list of properties, total count)
    """
    filters = [
        Property.account_id == account_id,
        Property.company_id == company_id,
        Property.is_deleted == False,  # noqa: E712
    ]
    if status:
        filters.append(Property.status == status)
    if usage_type:
        filters.append(Property.usage_type == usage_type)
    if country:
        filters.append(Property.country == country)
    if search:
        search_filter = f"%{search}%"
        filters.append(
            (Property.property_name.ilike(search_filter))
            | (Property.property_code.ilike(search_filter))
            | (Property.address_line_1.ilike(search_filter))
            | (Property.city.ilike(search_filter))
        )

    total_result = await db.execute(
        select(func.count(Property.id)).where(and_(*filters))
    )
    total = total_result.scalar_one()

    result = await db.execute(
        select(Property)
        .where(and_(*filters))
        .order_by(Property.created_at.desc(), Property.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def create_property(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    **fields,
) -> Property:
    property_obj = Property(
        account_id=account_id,
        company_id=company_id,
        id=await get_next_id_for_tenant(db, Property, account_id, company_id),
        is_deleted=False,
        **fields,
    )
    db.add(property_obj)
    await db.flush()
    await db.refresh(property_obj)
    return property_obj


async def update_property(db: AsyncSession, property_obj: Property, **kwargs) -> Property:
    for key, value in kwargs.items():
        if hasattr(property_obj, key):
            setattr(property_obj, key, value)
    await db.flush()
    await db.refresh(property_obj)
    return property_obj


async def soft_delete_property(db: AsyncSession, property_obj: Property) -> Property:
    property_obj.is_deleted = True
    property_obj.status = PropertyStatus.INACTIVE
    await db.flush()
    await db.refresh(property_obj)
    return property_obj


async def count_units(
    db: AsyncSession,
    property_id: int,
    account_id: int,
    company_id: int,
    active_only: bool = False,
) -> int:
    """Count a property's units; ``active_only`` excludes INACTIVE units."""
    filters = [
        Unit.account_id == account_id,
        Unit.company_id == company_id,
        Unit.property_id == property_id,
    ]
    if active_only:
        filters.append(Unit.status != UnitStatus.INACTIVE)
    result = await db.execute(select(func.count(Unit.id)).where(and_(*filters)))
    return result.scalar_one()


async def sync_unit_counters(
    db: AsyncSession, property_obj: Property
) -> Property:
    """Recount total/active units onto the property row."""
    scope = (property_obj.id, property_obj.account_id, property_obj.company_id)
    property_obj.total_units_count = await count_units(db, *scope)
    property_obj.active_units_count = await count_units(db, *scope, active_only=True)
    await db.flush()
    await db.refresh(property_obj)
    return property_obj


# ----- Unit CRUD -----


async def get_unit_by_id(
    db: AsyncSession,
    unit_id: int,
    account_id: int,
    company_id: int,
) -> Unit | None:
    result = await db.execute(
        select(Unit).where(
            and_(
                Unit.id == unit_id,
                Unit.account_id == account_id,
                Unit.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_unit_by_code(
    db: AsyncSession,
    unit_code: str,
    property_id: int,
    account_id: int,
    company_id: int,
) -> Unit | None:
    result = await db.execute(
        select(Unit).where(
            and_(
                Unit.unit_code == unit_code,
                Unit.property_id == property_id,
                Unit.account_id == account_id,
                Unit.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_units_by_property(
    db: AsyncSession,
    property_id: int,
    account_id: int,
    company_id: int,
    skip: int = 0,
    limit: int = 100,
    status: UnitStatus | None = None,
) -> tuple[list[Unit], int]:
    """Get units for a property.

    Returns:
        Tuple of (list of units, total count)
    """
    filters = [
        Unit.account_id == account_id,
        Unit.company_id == company_id,
        Unit.property_id == property_id,
    ]
    if status:
        filters.append(Unit.status == status)

    total_result = await db.execute(select(func.count(Unit.id)).where(and_(*filters)))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Unit)
        .where(and_(*filters))
        .order_by(Unit.unit_code)
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def create_unit(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    property_id: int,
    **fields,
) -> Unit:
    unit = Unit(
        account_id=account_id,
        company_id=company_id,
        id=await get_next_id_for_tenant(db, Unit, account_id, company_id),
        property_id=property_id,
        **fields,
    )
    db.add(unit)
    await db.flush()
    await db.refresh(unit)
    return unit


async def update_unit(db: AsyncSession, unit: Unit, **kwargs) -> Unit:
    for key, value in kwargs.items():
        if hasattr(unit, key):
            setattr(unit, key, value)
    await db.flush()
    await db.refresh(unit)
    return unit


async def set_unit_status(db: AsyncSession, unit: Unit, status: UnitStatus) -> Unit:
    unit.status = status
    await db.flush()
    await db.refresh(unit)
    return unit


async def delete_unit(db: AsyncSession, unit: Unit) -> None:
    await db.delete(unit)
    await db.flush()
