"""Lease management business logic services."""

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import BusinessLogicError, NotFoundError, ValidationError
from ...core.logging import get_logger
from ...core.utils import today
from ..property_management import crud as property_crud
from ..property_management.models import UnitStatus
from ..tenant_management import crud as tenant_crud
from ..tenant_management.models import TenantStatus
from . import crud
from .models import Lease, LeaseStatus
from .schemas import LeaseCreate, LeaseExpiryResult, LeaseUpdate

logger = get_logger("lease_management")


async def get_lease(
    db: AsyncSession, lease_id: int, account_id: int, company_id: int
) -> Lease:
    lease = await crud.get_lease_by_id(db, lease_id, account_id, company_id)
    if not lease:
        raise NotFoundError(f"Lease with ID {lease_id} not found")
    return lease


async def _check_unit_in_property(
    db: AsyncSession, property_id: int, unit_id: int, account_id: int, company_id: int
):
    property_obj = await property_crud.get_property_by_id(
        db, property_id, account_id, company_id
    )
    if not property_obj:
        raise NotFoundError(f"Property with ID {property_id} not found")

    unit = await property_crud.get_unit_by_id(db, unit_id, account_id, company_id)
    if not unit:
        raise NotFoundError(f"Unit with ID {unit_id} not found")
    if unit.property_id != property_id:
        raise ValidationError(
            f"Unit {unit_id} does not belong to property {property_id}",
            field="unit_id",
            value=unit_id,
        )
    return unit


async def create_lease(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    data: LeaseCreate,
) -> Lease:
    """Create a DRAFT lease.

    Raises:
        NotFoundError: If the property, unit or tenant does not exist
        ValidationError: If the unit is not in the property or the code is taken
    """
    await _check_unit_in_property(
        db, data.property_id, data.unit_id, account_id, company_id
    )

    tenant = await tenant_crud.get_tenant_by_id(
        db, data.tenant_id, account_id, company_id
    )
    if not tenant:
        raise NotFoundError(f"Tenant with ID {data.tenant_id} not found")
    if tenant.status == TenantStatus.BLACKLISTED:
        raise BusinessLogicError("Cannot create a lease for a blacklisted tenant")

    if data.lease_code and await crud.get_lease_by_code(
        db, data.lease_code, account_id, company_id
    ):
        raise ValidationError(
            f"Lease with code '{data.lease_code}' already exists", field="lease_code"
        )

    lease = await crud.create_lease(
        db, account_id=account_id, company_id=company_id, **data.model_dump()
    )
    await db.commit()
    logger.info(
        "Lease created", extra={"lease_id": lease.id, "unit_id": lease.unit_id}
    )
    return lease


async def update_lease(
    db: AsyncSession,
    lease_id: int,
    account_id: int,
    company_id: int,
    data: LeaseUpdate,
) -> Lease:
    """Update a lease. Only DRAFT leases can be edited."""
    lease = await get_lease(db, lease_id, account_id, company_id)

    if lease.status != LeaseStatus.DRAFT:
        raise ValidationError(
            f"Cannot update lease in '{lease.status.value}' status. "
            "Only DRAFT leases can be updated."
        )

    if data.lease_code and data.lease_code != lease.lease_code:
        if await crud.get_lease_by_code(db, data.lease_code, account_id, company_id):
            raise ValidationError(
                f"Lease with code '{data.lease_code}' already exists",
                field="lease_code",
            )

    start = data.start_date or lease.start_date
    end = data.end_date or lease.end_date
    if end <= start:
        raise ValidationError("End date must be after start date", field="end_date")

    updated = await crud.update_lease(db, lease, **data.model_dump(exclude_unset=True))
    await db.commit()
    return updated


async def activate_lease(
    db: AsyncSession, lease_id: int, account_id: int, company_id: int
) -> Lease:
    """Activate a DRAFT lease, occupying its unit.

    Raises:
        ValidationError: If the lease is not a draft
        BusinessLogicError: If another ACTIVE lease overlaps on the same unit
    """
    lease = await get_lease(db, lease_id, account_id, company_id)

    if lease.status != LeaseStatus.DRAFT:
        raise ValidationError(
            f"Cannot activate lease in '{lease.status.value}' status. "
            "Only DRAFT leases can be activated."
        )

    overlapping = await crud.find_overlapping_active_lease(
        db,
        lease.unit_id,
        lease.start_date,
        lease.end_date,
        account_id,
        company_id,
        exclude_lease_id=lease.id,
    )
    if overlapping:
        raise BusinessLogicError(
            f"Unit {lease.unit_id} already has active lease "
            f"'{overlapping.lease_code}' overlapping these dates"
        )

    unit = await property_crud.get_unit_by_id(db, lease.unit_id, account_id, company_id)
    if unit.status == UnitStatus.INACTIVE:
        raise BusinessLogicError(f"Unit {unit.unit_code} is inactive")

    activated = await crud.activate_lease(db, lease)
    await property_crud.set_unit_status(db, unit, UnitStatus.OCCUPIED)
    tenant = await tenant_crud.get_tenant_by_id(
        db, lease.tenant_id, account_id, company_id
    )
    await tenant_crud.adjust_active_leases(db, tenant, 1)

    await db.commit()
    logger.info(
        "Lease activated",
        extra={"lease_id": lease.id, "unit_id": lease.unit_id},
    )
    return activated


async def _release_lease(db: AsyncSession, lease: Lease) -> None:
    """Free the unit and the tenant's active counter once a lease stops.

    The unit stays occupied while another ACTIVE lease still holds it.
    """
    unit = await property_crud.get_unit_by_id(
        db, lease.unit_id, lease.account_id, lease.company_id
    )
    if (
        unit
        and unit.status == UnitStatus.OCCUPIED
        and not await crud.unit_has_other_active_lease(
            db, unit.id, lease.id, lease.account_id, lease.company_id
        )
    ):
        await property_crud.set_unit_status(db, unit, UnitStatus.AVAILABLE)
    tenant = await tenant_crud.get_tenant_by_id(
        db, lease.tenant_id, lease.account_id, lease.company_id
    )
    if tenant:
        await tenant_crud.adjust_active_leases(db, tenant, -1)


async def terminate_lease(
    db: AsyncSession,
    lease_id: int,
    account_id: int,
    company_id: int,
    reason: str,
    termination_date: date | None = None,
) -> Lease:
    """Terminate an ACTIVE lease early."""
    lease = await get_lease(db, lease_id, account_id, company_id)

    if lease.status != LeaseStatus.ACTIVE:
        raise ValidationError(
            f"Cannot terminate lease in '{lease.status.value}' status. "
            "Only ACTIVE leases can be terminated."
        )

    termination_date = termination_date or today()
    if termination_date < lease.start_date:
        raise ValidationError(
            "Termination date cannot precede the lease start date",
            field="termination_date",
        )

    terminated = await crud.terminate_lease(db, lease, termination_date, reason)
    await _release_lease(db, lease)

    await db.commit()
    logger.info(
        "Lease terminated",
        extra={"lease_id": lease.id, "termination_date": termination_date.isoformat()},
    )
    return terminated


async def renew_lease(
    db: AsyncSession,
    lease_id: int,
    account_id: int,
    company_id: int,
    new_end_date: date,
    new_monthly_rent: Decimal | None = None,
) -> Lease:
    """Extend an ACTIVE lease, optionally at a new rent."""
    lease = await get_lease(db, lease_id, account_id, company_id)

    if lease.status != LeaseStatus.ACTIVE:
        raise ValidationError(
            f"Cannot renew lease in '{lease.status.value}' status. "
            "Only ACTIVE leases can be renewed."
        )
    if new_end_date <= lease.end_date:
        raise ValidationError(
            "New end date must be after the current end date",
            field="new_end_date",
            value=new_end_date.isoformat(),
        )

    overlapping = await crud.find_overlapping_active_lease(
        db,
        lease.unit_id,
        lease.end_date + timedelta(days=1),
        new_end_date,
        account_id,
        company_id,
        exclude_lease_id=lease.id,
    )
    if overlapping:
        raise BusinessLogicError(
            f"Renewal would overlap active lease '{overlapping.lease_code}'"
        )

    renewed = await crud.extend_lease(db, lease, new_end_date)
    if new_monthly_rent is not None:
        renewed = await crud.update_lease(db, lease, monthly_rent=new_monthly_rent)

    await db.commit()
    logger.info(
        "Lease renewed",
        extra={"lease_id": lease.id, "end_date": new_end_date.isoformat()},
    )
    return renewed


async def _auto_renew_end(
    db: AsyncSession, lease: Lease, as_of: date, account_id: int, company_id: int
) -> date | None:
    """New end date for an auto-renewal, or None when it cannot renew."""
    if not lease.auto_renew or lease.term_days <= 0:
        return None

    new_end = lease.end_date
    while new_end < as_of:
        new_end += timedelta(days=lease.term_days)

    overlapping = await crud.find_overlapping_active_lease(
        db,
        lease.unit_id,
        lease.end_date + timedelta(days=1),
        new_end,
        account_id,
        company_id,
        exclude_lease_id=lease.id,
    )
    if overlapping:
        logger.info(
            "Auto-renewal skipped, unit already leased",
            extra={"lease_id": lease.id, "overlapping_lease_id": overlapping.id},
        )
        return None
    return new_end


async def expire_leases(
    db: AsyncSession, account_id: int, company_id: int, as_of: date | None = None
) -> LeaseExpiryResult:
    """Close out ACTIVE leases that ended before ``as_of``.

    Auto-renewing leases are rolled forward by their original term until
    they cover ``as_of``, unless another ACTIVE lease on the unit already
    holds part of that window. The rest become EXPIRED and release their
    unit.
    """
    as_of = as_of or today()
    leases = await crud.get_active_leases_ending_before(
        db, as_of, account_id, company_id
    )

    expired = renewed = 0
    for lease in leases:
        new_end = await _auto_renew_end(db, lease, as_of, account_id, company_id)
        if new_end is not None:
            await crud.extend_lease(db, lease, new_end)
            renewed += 1
        else:
            await crud.expire_lease(db, lease)
            await _release_lease(db, lease)
            expired += 1

    await db.commit()
    if leases:
        logger.info(
            "Leases expired",
            extra={"expired": expired, "renewed": renewed, "as_of": as_of.isoformat()},
        )
    return LeaseExpiryResult(expired=expired, renewed=renewed)


async def get_expiring_leases(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    within_days: int = 60,
    as_of: date | None = None,
) -> list[Lease]:
    """ACTIVE leases whose end date falls in the next ``within_days`` days."""
    as_of = as_of or today()
    return await crud.get_active_leases_ending_between(
        db, as_of, as_of + timedelta(days=within_days), account_id, company_id
    )


async def delete_lease(
    db: AsyncSession, lease_id: int, account_id: int, company_id: int
) -> None:
    lease = await get_lease(db, lease_id, account_id, company_id)

    if lease.status not in [LeaseStatus.DRAFT, LeaseStatus.TERMINATED]:
        raise ValidationError(
            f"Cannot delete lease in '{lease.status.value}' status. "
            "Only DRAFT or TERMINATED leases can be deleted."
        )

    await crud.delete_lease(db, lease)
    await db.commit()
