"""Read-only aggregate queries behind the financial reports."""

from datetime import date
from decimal import Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..billing.models import Invoice, InvoiceStatus
from ..expenses.models import Expense, ExpenseCategory
from ..lease_management.models import Lease, LeaseStatus
from ..property_management.models import Property, Unit
from ..tenant_management.models import Tenant


async def get_paid_income(
    db: AsyncSession,
    period_start: date,
    period_end: date,
    account_id: int,
    company_id: int,
) -> list[tuple[int | None, bool, Decimal]]:
    """PAID invoice totals by paid date, as (property_id, is_rent, amount).

    Invoices raised against a lease count as rent; the rest as other income.
    """
    is_rent = Invoice.lease_id.is_not(None)
    result = await db.execute(
        select(Invoice.property_id, is_rent, func.sum(Invoice.amount))
        .where(
            and_(
                Invoice.account_id == account_id,
                Invoice.company_id == company_id,
                Invoice.status == InvoiceStatus.PAID,
                Invoice.paid_date >= period_start,
                Invoice.paid_date <= period_end,
            )
        )
        .group_by(Invoice.property_id, is_rent)
    )
    return [
        (property_id, bool(rent), Decimal(str(amount or 0)))
        for property_id, rent, amount in result.all()
    ]


async def get_expenses(
    db: AsyncSession,
    period_start: date,
    period_end: date,
    account_id: int,
    company_id: int,
) -> list[tuple[int, ExpenseCategory, Decimal]]:
    """Expense totals as (property_id, category, amount), dates inclusive."""
    result = await db.execute(
        select(Expense.property_id, Expense.category, func.sum(Expense.amount))
        .where(
            and_(
                Expense.account_id == account_id,
                Expense.company_id == company_id,
                Expense.expense_date >= period_start,
                Expense.expense_date <= period_end,
            )
        )
        .group_by(Expense.property_id, Expense.category)
    )
    return [
        (property_id, category, Decimal(str(amount or 0)))
        for property_id, category, amount in result.all()
    ]


async def get_property_names(
    db: AsyncSession, property_ids: set[int], account_id: int, company_id: int
) -> dict[int, str]:
    if not property_ids:
        return {}
    result = await db.execute(
        select(Property.id, Property.property_name).where(
            and_(
                Property.account_id == account_id,
                Property.company_id == company_id,
                Property.id.in_(property_ids),
            )
        )
    )
    return dict(result.all())


async def get_units_with_properties(
    db: AsyncSession, account_id: int, company_id: int
) -> list[tuple[Unit, Property]]:
    """Units of non-deleted properties, ordered by property then unit code."""
    result = await db.execute(
        select(Unit, Property)
        .join(
            Property,
            and_(
                Property.account_id == Unit.account_id,
                Property.company_id == Unit.company_id,
                Property.id == Unit.property_id,
            ),
        )
        .where(
            and_(
                Unit.account_id == account_id,
                Unit.company_id == company_id,
                Property.is_deleted.is_(False),
            )
        )
        .order_by(Property.property_code, Unit.unit_code)
    )
    return [(unit, prop) for unit, prop in result.all()]


async def get_current_leases(
    db: AsyncSession, as_of: date, account_id: int, company_id: int
) -> list[Lease]:
    """ACTIVE leases whose term covers ``as_of``."""
    result = await db.execute(
        select(Lease).where(
            and_(
                Lease.account_id == account_id,
                Lease.company_id == company_id,
                Lease.status == LeaseStatus.ACTIVE,
                Lease.start_date <= as_of,
                Lease.end_date >= as_of,
            )
        )
    )
    return list(result.scalars().all())


async def get_tenants(
    db: AsyncSession, tenant_ids: set[int], account_id: int, company_id: int
) -> dict[int, Tenant]:
    if not tenant_ids:
        return {}
    result = await db.execute(
        select(Tenant).where(
            and_(
                Tenant.account_id == account_id,
                Tenant.company_id == company_id,
                Tenant.id.in_(tenant_ids),
            )
        )
    )
    return {tenant.id: tenant for tenant in result.scalars().all()}
