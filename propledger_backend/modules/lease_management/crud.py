"""CRUD operations for lease management module."""

from datetime import date

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import generate_code, utc_now
from ...database import get_next_id_for_tenant
from .models import Lease, LeaseStatus


async def get_lease_by_id(
    db: AsyncSession, lease_id: int, account_id: int, company_id: int
) -> Lease | None:
    """Get a lease by ID within tenant scope."""
    result = await db.execute(
        select(Lease).where(
            and_(
                Lease.id == lease_id,
                Lease.account_id == account_id,
                Lease.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_lease_by_code(
    db: AsyncSession, lease_code: str, account_id: int, company_id: int
) -> Lease | None:
    result = await db.execute(
        select(Lease).where(
            and_(
                Lease.lease_code == lease_code,
                Lease.account_id == account_id,
                Lease.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_leases(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    skip: int = 0,
    limit: int = 100,
    property_id: int | None = None,
    unit_id: int | None = None,
    tenant_id: int | None = None,
    status: LeaseStatus | None = None,
    search: str | None = None,
) -> tuple[list[Lease], int]:
    """Get leases with filtering and pagination."""
    filters = [
        Lease.account_id == account_id,
        Lease.company_id == company_id,
    ]
    if property_id:
        filters.append(Lease.property_id == property_id)
    if unit_id:
        filters.append(Lease.unit_id == unit_id)
    if tenant_id:
        filters.append(Lease.tenant_id == tenant_id)
    if status:
        filters.append(Lease.status == status)
    if search:
        search_filter = f"%{search}%"
        filters.append(
            (Lease.lease_code.ilike(search_filter))
            | (Lease.notes.ilike(search_filter))
        )

    total_result = await db.execute(select(func.count(Lease.id)).where(and_(*filters)))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Lease)
        .where(and_(*filters))
        .order_by(Lease.start_date.desc(), Lease.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def get_leases_by_tenant(
    db: AsyncSession, tenant_id: int, account_id: int, company_id: int
) -> list[Lease]:
    result = await db.execute(
        select(Lease)
        .where(
            and_(
                Lease.tenant_id == tenant_id,
                Lease.account_id == account_id,
                Lease.company_id == company_id,
            )
        )
        .order_by(Lease.start_date.desc())
    )
    return list(result.scalars().all())


async def find_overlapping_active_lease(
    db: AsyncSession,
    unit_id: int,
    start_date: date,
    end_date: date,
    account_id: int,
    company_id: int,
    exclude_lease_id: int | None = None,
) -> Lease | None:
    """First ACTIVE lease on the unit whose dates intersect [start, end]."""
    filters = [
        Lease.account_id == account_id,
        Lease.company_id == company_id,
        Lease.unit_id == unit_id,
        Lease.status == LeaseStatus.ACTIVE,
        Lease.start_date <= end_date,
        Lease.end_date >= start_date,
    ]
    if exclude_lease_id is not None:
        filters.append(Lease.id != exclude_lease_id)
    result = await db.execute(select(Lease).where(and_(*filters)).limit(1))
    return result.scalar_one_or_none()


async def unit_has_other_active_lease(
    db: AsyncSession,
    unit_id: int,
    exclude_lease_id: int,
    account_id: int,
    company_id: int,
) -> bool:
    result = await db.execute(
        select(func.count(Lease.id)).where(
            and_(
                Lease.account_id == account_id,
                Lease.company_id == company_id,
                Lease.unit_id == unit_id,
                Lease.status == LeaseStatus.ACTIVE,
                Lease.id != exclude_lease_id,
            )
        )
    )
    return (result.scalar() or 0) > 0


async def get_active_leases_overlapping(
    db: AsyncSession,
    period_start: date,
    period_end: date,
    account_id: int,
    company_id: int,
) -> list[Lease]:
    """ACTIVE leases running at any point between the two dates (inclusive)."""
    result = await db.execute(
        select(Lease)
        .where(
            and_(
                Lease.account_id == account_id,
                Lease.company_id == company_id,
                Lease.status == LeaseStatus.ACTIVE,
                Lease.start_date <= period_end,
                Lease.end_date >= period_start,
            )
        )
        .order_by(Lease.id)
    )
    return list(result.scalars().all())


async def get_active_leases_ending_before(
    db: AsyncSession, as_of: date, account_id: int, company_id: int
) -> list[Lease]:
    result = await db.execute(
        select(Lease).where(
            and_(
                Lease.account_id == account_id,
                Lease.company_id == company_id,
                Lease.status == LeaseStatus.ACTIVE,
                Lease.end_date < as_of,
            )
        )
    )
    return list(result.scalars().all())


async def get_active_leases_ending_between(
    db: AsyncSession,
    start: date,
    end: date,
    account_id: int,
    company_id: int,
) -> list[Lease]:
    result = await db.execute(
        select(Lease)
        .where(
            and_(
                Lease.account_id == account_id,
                Lease.company_id == company_id,
                Lease.status == LeaseStatus.ACTIVE,
                Lease.end_date >= start,
                Lease.end_date <= end,
            )
        )
        .order_by(Lease.end_date)
    )
    return list(result.scalars().all())


async def create_lease(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    lease_code: str | None = None,
    **fields,
) -> Lease:
    """Create a DRAFT lease, generating ``LSE-000042`` style codes if needed."""
    next_id = await get_next_id_for_tenant(db, Lease, account_id, company_id)
    lease = Lease(
        account_id=account_id,
        company_id=company_id,
        id=next_id,
        lease_code=lease_code or generate_code("LSE", next_id),
        status=LeaseStatus.DRAFT,
        **fields,
    )
    lease.term_days = (lease.end_date - lease.start_date).days
    db.add(lease)
    await db.flush()
    await db.refresh(lease)
    return lease


async def update_lease(db: AsyncSession, lease: Lease, **kwargs) -> Lease:
    for key, value in kwargs.items():
        if hasattr(lease, key):
            setattr(lease, key, value)
    if lease.status == LeaseStatus.DRAFT:
        lease.term_days = (lease.end_date - lease.start_date).days
    await db.flush()
    await db.refresh(lease)
    return lease


async def activate_lease(db: AsyncSession, lease: Lease) -> Lease:
    lease.status = LeaseStatus.ACTIVE
    lease.activated_at = utc_now()
    await db.flush()
    await db.refresh(lease)
    return lease


async def terminate_lease(
    db: AsyncSession, lease: Lease, termination_date: date, reason: str
) -> Lease:
    lease.status = LeaseStatus.TERMINATED
    lease.termination_date = termination_date
    lease.terminated_at = utc_now()
    lease.termination_reason = reason
    await db.flush()
    await db.refresh(lease)
    return lease


async def expire_lease(db: AsyncSession, lease: Lease) -> Lease:
    lease.status = LeaseStatus.EXPIRED
    await db.flush()
    await db.refresh(lease)
    return lease


async def extend_lease(db: AsyncSession, lease: Lease, new_end_date: date) -> Lease:
    lease.end_date = new_end_date
    lease.renewed_at = utc_now()
    await db.flush()
    await db.refresh(lease)
    return lease


async def delete_lease(db: AsyncSession, lease: Lease) -> None:
    await db.delete(lease)
    await db.flush()
