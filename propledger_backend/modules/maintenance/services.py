"""Maintenance ticket business logic."""

from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import BusinessLogicError, NotFoundError, ValidationError
from ...core.logging import get_logger
from ...core.utils import round_money, today, utc_now
from ..expenses.crud import expense_crud
from ..expenses.models import ExpenseCategory
from ..property_management import crud as property_crud
from ..tenant_management import crud as tenant_crud
from . import crud
from .models import STATUS_TRANSITIONS, MaintenanceStatus, MaintenanceTicket
from .schemas import TicketCreate, TicketStatusChange, TicketUpdate

logger = get_logger("maintenance")


async def get_ticket(
    db: AsyncSession, ticket_id: int, account_id: int, company_id: int
) -> MaintenanceTicket:
    ticket = await crud.get_ticket_by_id(db, ticket_id, account_id, company_id)
    if not ticket:
        raise NotFoundError(f"Maintenance ticket with ID {ticket_id} not found")
    return ticket


async def _check_unit(
    db: AsyncSession, property_id: int, unit_id: int, account_id: int, company_id: int
) -> None:
    unit = await property_crud.get_unit_by_id(db, unit_id, account_id, company_id)
    if not unit or unit.property_id != property_id:
        raise ValidationError(
            f"Unit {unit_id} does not belong to property {property_id}",
            field="unit_id",
            value=unit_id,
        )


async def create_ticket(
    db: AsyncSession, data: TicketCreate, account_id: int, company_id: int
) -> MaintenanceTicket:
    """Open a ticket against a property, optionally a unit and reporting tenant."""
    if not await property_crud.get_property_by_id(
        db, data.property_id, account_id, company_id
    ):
        raise NotFoundError(f"Property with ID {data.property_id} not found")
    if data.unit_id is not None:
        await _check_unit(db, data.property_id, data.unit_id, account_id, company_id)
    if data.tenant_id is not None and not await tenant_crud.get_tenant_by_id(
        db, data.tenant_id, account_id, company_id
    ):
        raise NotFoundError(f"Tenant with ID {data.tenant_id} not found")

    fields = data.model_dump()
    fields["reported_date"] = data.reported_date or today()
    if data.scheduled_date and data.scheduled_date < fields["reported_date"]:
        raise ValidationError(
            "Scheduled date cannot be before reported date", field="scheduled_date"
        )

    ticket = await crud.create_ticket(
        db, account_id=account_id, company_id=company_id, **fields
    )
    await db.commit()
    logger.info(
        "Maintenance ticket opened",
        extra={"ticket_id": ticket.id, "priority": ticket.priority.value},
    )
    return ticket


async def update_ticket(
    db: AsyncSession,
    ticket_id: int,
    data: TicketUpdate,
    account_id: int,
    company_id: int,
) -> MaintenanceTicket:
    ticket = await get_ticket(db, ticket_id, account_id, company_id)
    if ticket.is_closed:
        raise ValidationError(
            f"Cannot update a ticket in '{ticket.status.value}' status"
        )
    if data.unit_id is not None:
        await _check_unit(db, ticket.property_id, data.unit_id, account_id, company_id)
    if data.scheduled_date and data.scheduled_date < ticket.reported_date:
        raise ValidationError(
            "Scheduled date cannot be before reported date", field="scheduled_date"
        )

    updated = await crud.update_ticket(
        db, ticket, **data.model_dump(exclude_unset=True)
    )
    await db.commit()
    return updated


async def change_status(
    db: AsyncSession,
    ticket_id: int,
    data: TicketStatusChange,
    account_id: int,
    company_id: int,
) -> MaintenanceTicket:
    """Move a ticket along its workflow.

    Completing a ticket stamps ``completed_date`` and ``resolved_at``; with
    ``record_expense`` a positive ``actual_cost`` is booked as a maintenance
    expense on the property.

    Raises:
        BusinessLogicError: If the transition is not allowed
        ValidationError: If the completion date precedes the reported date
    """
    ticket = await get_ticket(db, ticket_id, account_id, company_id)
    if data.status == ticket.status:
        return ticket
    if data.status not in STATUS_TRANSITIONS[ticket.status]:
        raise BusinessLogicError(
            f"Cannot move ticket from '{ticket.status.value}' "
            f"to '{data.status.value}'"
        )

    changes: dict = {"status": data.status}
    if data.actual_cost is not None:
        changes["actual_cost"] = round_money(data.actual_cost)

    if data.status == MaintenanceStatus.COMPLETED:
        completed_date = data.completed_date or today()
        if completed_date < ticket.reported_date:
            raise ValidationError(
                "Completed date cannot be before reported date",
                field="completed_date",
                value=completed_date.isoformat(),
            )
        changes["completed_date"] = completed_date
        changes["resolved_at"] = utc_now()

        cost = changes.get("actual_cost", ticket.actual_cost)
        if data.record_expense and cost and cost > 0:
            expense = await _book_expense(db, ticket, cost, completed_date)
            changes["expense_id"] = expense.id
    elif data.completed_date is not None:
        raise ValidationError(
            "completed_date is only accepted when completing a ticket",
            field="completed_date",
        )

    updated = await crud.update_ticket(db, ticket, **changes)
    await db.commit()
    logger.info(
        "Maintenance ticket status changed",
        extra={"ticket_id": ticket.id, "status": data.status.value},
    )
    return updated


async def _book_expense(
    db: AsyncSession, ticket: MaintenanceTicket, cost: Decimal, expense_date: date
):
    return await expense_crud.create(
        db,
        {
            "property_id": ticket.property_id,
            "unit_id": ticket.unit_id,
            "amount": cost,
            "expense_date": expense_date,
            "category": ExpenseCategory.MAINTENANCE,
            "description": f"Maintenance: {ticket.title}",
            "vendor_name": ticket.assigned_to,
            "maintenance_ticket_id": ticket.id,
        },
        ticket.account_id,
        ticket.company_id,
    )


async def delete_ticket(
    db: AsyncSession, ticket_id: int, account_id: int, company_id: int
) -> None:
    ticket = await get_ticket(db, ticket_id, account_id, company_id)
    if ticket.status == MaintenanceStatus.COMPLETED:
        raise BusinessLogicError("Completed tickets are kept for the record")
    await crud.delete_ticket(db, ticket)
    await db.commit()
