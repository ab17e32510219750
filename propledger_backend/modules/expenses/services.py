"""Expense business logic."""

from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError, ValidationError
from ...core.logging import get_logger
from ...core.utils import round_money
from ..property_management import crud as property_crud
from .crud import expense_crud
from .models import Expense
from .schemas import ExpenseCreate, ExpenseTotals, ExpenseUpdate

logger = get_logger("expenses")


async def get_expense(
    db: AsyncSession, expense_id: int, account_id: int, company_id: int
) -> Expense:
    expense = await expense_crud.get(db, expense_id, account_id, company_id)
    if not expense:
        raise NotFoundError(f"Expense with ID {expense_id} not found")
    return expense


async def _check_location(
    db: AsyncSession,
    property_id: int,
    unit_id: int | None,
    account_id: int,
    company_id: int,
) -> None:
    if not await property_crud.get_property_by_id(
        db, property_id, account_id, company_id
    ):
        raise NotFoundError(f"Property with ID {property_id} not found")
    if unit_id is not None:
        unit = await property_crud.get_unit_by_id(db, unit_id, account_id, company_id)
        if not unit or unit.property_id != property_id:
            raise ValidationError(
                f"Unit {unit_id} does not belong to property {property_id}",
                field="unit_id",
                value=unit_id,
            )


async def create_expense(
    db: AsyncSession, data: ExpenseCreate, account_id: int, company_id: int
) -> Expense:
    await _check_location(db, data.property_id, data.unit_id, account_id, company_id)
    expense = await expense_crud.create(
        db, data, account_id, company_id, amount=round_money(data.amount)
    )
    await db.commit()
    logger.info(
        "Expense recorded",
        extra={"expense_id": expense.id, "property_id": expense.property_id},
    )
    return expense


async def update_expense(
    db: AsyncSession,
    expense_id: int,
    data: ExpenseUpdate,
    account_id: int,
    company_id: int,
) -> Expense:
    expense = await get_expense(db, expense_id, account_id, company_id)
    if data.unit_id is not None:
        await _check_location(
            db, expense.property_id, data.unit_id, account_id, company_id
        )
    expense = await expense_crud.update(db, expense, data)
    await db.commit()
    return expense


async def delete_expense(
    db: AsyncSession, expense_id: int, account_id: int, company_id: int
) -> None:
    expense = await get_expense(db, expense_id, account_id, company_id)
    await expense_crud.delete(db, expense)
    await db.commit()


async def get_expense_totals(
    db: AsyncSession,
    property_id: int,
    period_start: date,
    period_end: date,
    account_id: int,
    company_id: int,
) -> ExpenseTotals:
    """Expenses of a property between two dates, per category and overall."""
    if period_end < period_start:
        raise ValidationError("period_end must not precede period_start")

    by_category = await expense_crud.get_totals_by_category(
        db, property_id, period_start, period_end, account_id, company_id
    )
    by_category = {cat: round_money(amount) for cat, amount in by_category.items()}
    return ExpenseTotals(
        property_id=property_id,
        period_start=period_start,
        period_end=period_end,
        by_category=by_category,
        total=round_money(sum(by_category.values(), Decimal("0"))),
    )
