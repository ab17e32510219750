"""Property management business logic services."""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import BusinessLogicError, NotFoundError, ValidationError
from ...core.logging import get_logger
from . import crud
from .models import Property, Unit, UnitStatus
from .schemas import PropertyCreate, PropertyUpdate, UnitCreate, UnitUpdate

logger = get_logger("property_management")


async def get_property(
    db: AsyncSession,
    property_id: int,
    account_id: int,
    company_id: int,
    include_units: bool = False,
) -> Property:
    """Get a property or raise NotFoundError."""
    property_obj = await crud.get_property_by_id(
        db, property_id, account_id, company_id, include_units=include_units
    )
    if not property_obj:
        raise NotFoundError(f"Property with ID {property_id} not found")
    return property_obj


async def get_unit(
    db: AsyncSession, unit_id: int, account_id: int, company_id: int
) -> Unit:
    unit = await crud.get_unit_by_id(db, unit_id, account_id, company_id)
    if not unit:
        raise NotFoundError(f"Unit with ID {unit_id} not found")
    return unit


async def create_property(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    data: PropertyCreate,
) -> Property:
    """Create a new property.

    Raises:
        ValidationError: If the property code already exists
    """
    if await crud.get_property_by_code(db, data.property_code, account_id, company_id):
        raise ValidationError(
            f"Property with code '{data.property_code}' already exists",
            field="property_code",
        )

    property_obj = await crud.create_property(
        db, account_id=account_id, company_id=company_id, **data.model_dump()
    )
    await db.commit()

    logger.info(
        "Property created",
        extra={"property_id": property_obj.id, "account_id": account_id},
    )
    return property_obj


async def update_property(
    db: AsyncSession,
    property_id: int,
    account_id: int,
    company_id: int,
    data: PropertyUpdate,
) -> Property:
    """Update a property.

    Raises:
        NotFoundError: If property not found
        ValidationError: If the new property code conflicts
    """
    property_obj = await get_property(db, property_id, account_id, company_id)

    if data.property_code and data.property_code != property_obj.property_code:
        if await crud.get_property_by_code(
            db, data.property_code, account_id, company_id
        ):
            raise ValidationError(
                f"Property with code '{data.property_code}' already exists",
                field="property_code",
            )

    updated = await crud.update_property(
        db, property_obj, **data.model_dump(exclude_unset=True)
    )
    await db.commit()
    return updated


async def delete_property(
    db: AsyncSession,
    property_id: int,
    account_id: int,
    company_id: int,
) -> None:
    """Soft-delete a property that has no active units.

    Raises:
        NotFoundError: If property not found
        BusinessLogicError: If the property still has active units
    """
    property_obj = await get_property(db, property_id, account_id, company_id)

    active_units = await crud.count_units(
        db, property_id, account_id, company_id, active_only=True
    )
    if active_units > 0:
        raise BusinessLogicError(
            f"Cannot delete property with {active_units} active unit(s). "
            "Deactivate all units first."
        )

    await crud.soft_delete_property(db, property_obj)
    await db.commit()
    logger.info("Property deleted", extra={"property_id": property_id})


async def create_unit(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    data: UnitCreate,
) -> Unit:
    """Create a unit and refresh the property's unit counters.

    Raises:
        NotFoundError: If the property does not exist
        ValidationError: If the unit code is taken within the property
    """
    property_obj = await get_property(db, data.property_id, account_id, company_id)

    if await crud.get_unit_by_code(
        db, data.unit_code, data.property_id, account_id, company_id
    ):
        raise ValidationError(
            f"Unit with code '{data.unit_code}' already exists in this property",
            field="unit_code",
        )

    fields = data.model_dump(exclude={"property_id"})
    unit = await crud.create_unit(
        db,
        account_id=account_id,
        company_id=company_id,
        property_id=data.property_id,
        **fields,
    )
    await crud.sync_unit_counters(db, property_obj)
    await db.commit()
    return unit


async def update_unit(
    db: AsyncSession,
    unit_id: int,
    account_id: int,
    company_id: int,
    data: UnitUpdate,
) -> Unit:
    unit = await get_unit(db, unit_id, account_id, company_id)

    if data.unit_code and data.unit_code != unit.unit_code:
        if await crud.get_unit_by_code(
            db, data.unit_code, unit.property_id, account_id, company_id
        ):
            raise ValidationError(
                f"Unit with code '{data.unit_code}' already exists in this property",
                field="unit_code",
            )

    updated = await crud.update_unit(db, unit, **data.model_dump(exclude_unset=True))

    if data.status is not None:
        property_obj = await get_property(
            db, unit.property_id, account_id, company_id
        )
        await crud.sync_unit_counters(db, property_obj)

    await db.commit()
    return updated


async def delete_unit(
    db: AsyncSession,
    unit_id: int,
    account_id: int,
    company_id: int,
) -> None:
    """Delete a unit that is not occupied.

    Raises:
        NotFoundError: If unit not found
        BusinessLogicError: If the unit is occupied
    """
    unit = await get_unit(db, unit_id, account_id, company_id)
    if unit.status == UnitStatus.OCCUPIED:
        raise BusinessLogicError("Cannot delete an occupied unit")

    property_id = unit.property_id
    await crud.delete_unit(db, unit)

    property_obj = await crud.get_property_by_id(
        db, property_id, account_id, company_id
    )
    if property_obj:
        await crud.sync_unit_counters(db, property_obj)
    await db.commit()
