"""Data access for property expenses."""

from datetime import date
from decimal import Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import Expense, ExpenseCategory
from .schemas import ExpenseCreate, ExpenseUpdate


class ExpenseCRUD(BaseCRUD[Expense, ExpenseCreate, ExpenseUpdate]):
    search_fields = ["description", "vendor_name", "notes"]
    date_field = "expense_date"
    default_order_by = "expense_date"

    async def get_totals_by_category(
        self,
        db: AsyncSession,
        property_id: int,
        period_start: date,
        period_end: date,
        account_id: int,
        company_id: int,
    ) -> dict[ExpenseCategory, Decimal]:
        """Sum of expense amounts per category, both dates inclusive."""
        query = self._scoped(
            select(Expense.category, func.sum(Expense.amount)),
            account_id,
            company_id,
        ).where(
            and_(
                Expense.property_id == property_id,
                Expense.expense_date >= period_start,
                Expense.expense_date <= period_end,
            )
        )
        result = await db.execute(query.group_by(Expense.category))
        return {
            category: Decimal(str(amount or 0)) for category, amount in result.all()
        }

    async def get_by_ticket(
        self, db: AsyncSession, ticket_id: int, account_id: int, company_id: int
    ) -> Expense | None:
        query = self._scoped(select(Expense), account_id, company_id).where(
            Expense.maintenance_ticket_id == ticket_id
        )
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()


expense_crud = ExpenseCRUD(Expense)
