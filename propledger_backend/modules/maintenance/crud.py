"""CRUD operations for maintenance tickets."""

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_next_id_for_tenant
from .models import (
    MaintenancePriority,
    MaintenanceStatus,
    MaintenanceTicket,
)


async def get_ticket_by_id(
    db: AsyncSession, ticket_id: int, account_id: int, company_id: int
) -> MaintenanceTicket | None:
    result = await db.execute(
        select(MaintenanceTicket).where(
            and_(
                MaintenanceTicket.id == ticket_id,
                MaintenanceTicket.account_id == account_id,
                MaintenanceTicket.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_tickets(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    skip: int = 0,
    limit: int = 100,
    status: MaintenanceStatus | None = None,
    priority: MaintenancePriority | None = None,
    property_id: int | None = None,
    unit_id: int | None = None,
    tenant_id: int | None = None,
    search: str | None = None,
) -> tuple[list[MaintenanceTicket], int]:
    """Get tickets with filtering and pagination, newest first."""
    filters = [
        MaintenanceTicket.account_id == account_id,
        MaintenanceTicket.company_id == company_id,
    ]
    if status:
        filters.append(MaintenanceTicket.status == status)
    if priority:
        filters.append(MaintenanceTicket.priority == priority)
    if property_id:
        filters.append(MaintenanceTicket.property_id == property_id)
    if unit_id:
        filters.append(MaintenanceTicket.unit_id == unit_id)
    if tenant_id:
        filters.append(MaintenanceTicket.tenant_id == tenant_id)
    if search:
        search_filter = f"%{search}%"
        filters.append(
            (MaintenanceTicket.title.ilike(search_filter))
            | (MaintenanceTicket.description.ilike(search_filter))
            | (MaintenanceTicket.assigned_to.ilike(search_filter))
        )

    total_result = await db.execute(
        select(func.count(MaintenanceTicket.id)).where(and_(*filters))
    )
    total = total_result.scalar_one()

    result = await db.execute(
        select(MaintenanceTicket)
        .where(and_(*filters))
        .order_by(MaintenanceTicket.reported_date.desc(), MaintenanceTicket.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def create_ticket(
    db: AsyncSession, account_id: int, company_id: int, **fields
) -> MaintenanceTicket:
    ticket = MaintenanceTicket(
        account_id=account_id,
        company_id=company_id,
        id=await get_next_id_for_tenant(db, MaintenanceTicket, account_id, company_id),
        status=MaintenanceStatus.OPEN,
        **fields,
    )
    db.add(ticket)
    await db.flush()
    await db.refresh(ticket)
    return ticket


async def update_ticket(
    db: AsyncSession, ticket: MaintenanceTicket, **kwargs
) -> MaintenanceTicket:
    for key, value in kwargs.items():
        if hasattr(ticket, key):
            setattr(ticket, key, value)
    await db.flush()
    await db.refresh(ticket)
    return ticket


async def delete_ticket(db: AsyncSession, ticket: MaintenanceTicket) -> None:
    await db.delete(ticket)
    await db.flush()
