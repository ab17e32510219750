"""Tests for maintenance tickets and the expenses they book."""

from datetime import date
from decimal import Decimal

import pytest

from propledger_backend.core.exceptions import (
    BusinessLogicError,
    NotFoundError,
    ValidationError,
)
from propledger_backend.modules.expenses import services as expense_services
from propledger_backend.modules.expenses.crud import expense_crud
from propledger_backend.modules.expenses.models import ExpenseCategory
from propledger_backend.modules.expenses.schemas import ExpenseCreate
from propledger_backend.modules.maintenance import services
from propledger_backend.modules.maintenance.models import (
    MaintenancePriority,
    MaintenanceStatus,
)
from propledger_backend.modules.maintenance.schemas import (
    TicketCreate,
    TicketStatusChange,
    TicketUpdate,
)

REPORTED = date(2025, 4, 2)


@pytest.fixture
def new_ticket(db, scope, property_obj, unit, tenant):
    async def create(**overrides):
        fields = dict(
            property_id=property_obj.id,
            unit_id=unit.id,
            tenant_id=tenant.id,
            title="Leaking tap",
            description="Kitchen tap drips constantly",
            priority=MaintenancePriority.HIGH,
            assigned_to="Canalizações Lda",
            reported_date=REPORTED,
        )
        fields.update(overrides)
        return await services.create_ticket(db, TicketCreate(**fields), *scope)

    return create


class TestTickets:
    async def test_opens_ticket(self, new_ticket):
        ticket = await new_ticket()
        assert ticket.status == MaintenanceStatus.OPEN
        assert ticket.reported_date == REPORTED

    async def test_unknown_property(self, new_ticket):
        with pytest.raises(NotFoundError):
            await new_ticket(property_id=99, unit_id=None)

    async def test_unknown_tenant(self, new_ticket):
        with pytest.raises(NotFoundError):
            await new_ticket(tenant_id=99)

    async def test_scheduled_before_reported(self, new_ticket):
        with pytest.raises(ValidationError):
            await new_ticket(scheduled_date=date(2025, 4, 1))

    async def test_scheduled_before_default_reported_date(self, new_ticket):
        # reported_date falls back to today
        with pytest.raises(ValidationError):
            await new_ticket(reported_date=None, scheduled_date=date(2000, 1, 1))

    async def test_update(self, db, scope, new_ticket):
        ticket = await new_ticket()
        updated = await services.update_ticket(
            db, ticket.id, TicketUpdate(priority=MaintenancePriority.URGENT), *scope
        )
        assert updated.priority == MaintenancePriority.URGENT


class TestStatusWorkflow:
    async def test_complete_books_expense(self, db, scope, new_ticket):
        ticket = await new_ticket()
        await services.change_status(
            db, ticket.id, TicketStatusChange(status=MaintenanceStatus.IN_PROGRESS), *scope
        )

        done = await services.change_status(
            db,
            ticket.id,
            TicketStatusChange(
                status=MaintenanceStatus.COMPLETED,
                completed_date=date(2025, 4, 5),
                actual_cost=Decimal("120.50"),
                record_expense=True,
            ),
            *scope,
        )

        assert done.status == MaintenanceStatus.COMPLETED
        assert done.resolved_at is not None
        assert done.expense_id is not None
        expense = await expense_crud.get_by_ticket(db, ticket.id, *scope)
        assert expense.id == done.expense_id
        assert expense.amount == Decimal("120.50")
        assert expense.category == ExpenseCategory.MAINTENANCE
        assert expense.vendor_name == "Canalizações Lda"

    async def test_complete_without_booking(self, db, scope, new_ticket):
        ticket = await new_ticket()
        done = await services.change_status(
            db,
            ticket.id,
            TicketStatusChange(status=MaintenanceStatus.COMPLETED, actual_cost=Decimal("80")),
            *scope,
        )
        assert done.expense_id is None

    async def test_terminal_status_cannot_move(self, db, scope, new_ticket):
        ticket = await new_ticket()
        await services.change_status(
            db, ticket.id, TicketStatusChange(status=MaintenanceStatus.CANCELLED), *scope
        )
        with pytest.raises(BusinessLogicError):
            await services.change_status(
                db, ticket.id, TicketStatusChange(status=MaintenanceStatus.OPEN), *scope
            )

    async def test_completed_before_reported(self, db, scope, new_ticket):
        ticket = await new_ticket()
        with pytest.raises(ValidationError):
            await services.change_status(
                db,
                ticket.id,
                TicketStatusChange(
                    status=MaintenanceStatus.COMPLETED, completed_date=date(2025, 3, 1)
                ),
                *scope,
            )

    async def test_completed_date_only_on_completion(self, db, scope, new_ticket):
        ticket = await new_ticket()
        with pytest.raises(ValidationError):
            await services.change_status(
                db,
                ticket.id,
                TicketStatusChange(
                    status=MaintenanceStatus.IN_PROGRESS, completed_date=date(2025, 4, 5)
                ),
                *scope,
            )

    async def test_completed_ticket_is_kept(self, db, scope, new_ticket):
        ticket = await new_ticket()
        await services.change_status(
            db, ticket.id, TicketStatusChange(status=MaintenanceStatus.COMPLETED), *scope
        )
        with pytest.raises(BusinessLogicError):
            await services.delete_ticket(db, ticket.id, *scope)


async def test_expense_totals_by_category(db, scope, property_obj):
    for amount, category, day in [
        ("100", ExpenseCategory.UTILITIES, date(2025, 1, 10)),
        ("250.25", ExpenseCategory.INSURANCE, date(2025, 2, 1)),
        ("49.75", ExpenseCategory.UTILITIES, date(2025, 3, 31)),
        ("999", ExpenseCategory.TAXES, date(2025, 4, 1)),
    ]:
        await expense_services.create_expense(
            db,
            ExpenseCreate(
                property_id=property_obj.id,
                amount=Decimal(amount),
                category=category,
                expense_date=day,
            ),
            *scope,
        )

    totals = await expense_services.get_expense_totals(
        db, property_obj.id, date(2025, 1, 1), date(2025, 3, 31), *scope
    )

    assert totals.by_category[ExpenseCategory.UTILITIES] == Decimal("149.75")
    assert totals.by_category[ExpenseCategory.INSURANCE] == Decimal("250.25")
    assert ExpenseCategory.TAXES not in totals.by_category
    assert totals.total == Decimal("400.00")
