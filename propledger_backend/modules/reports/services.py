"""Company-wide financial, tax and rent roll reports."""

from collections import defaultdict
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import ValidationError
from ...core.logging import get_logger
from ...core.utils import month_bounds, round_money, today
from ..billing import services as billing_services
from ..property_management.models import UnitStatus
from . import crud
from .schemas import (
    CategoryExpense,
    ExpenseBreakdown,
    FinancialReport,
    IncomeBreakdown,
    PropertyExpense,
    PropertyIncome,
    PropertyNet,
    QuarterSummary,
    RentRoll,
    RentRollEntry,
    ReportPeriod,
    TaxReport,
)

logger = get_logger("reports")

ZERO = Decimal("0")
HUNDRED = Decimal("100")
UNASSIGNED = "Unassigned"


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    return round_money(part / whole * HUNDRED) if whole > 0 else round_money(ZERO)


def period_label(period_start: date, period_end: date) -> str:
    """``Jan 2025`` for a single month, else ``Jan 2025 - Mar 2025``."""
    start = period_start.strftime("%b %Y")
    end = period_end.strftime("%b %Y")
    return start if start == end else f"{start} - {end}"


def quarter_bounds(year: int) -> list[tuple[str, date, date]]:
    return [
        (
            f"Q{quarter}",
            month_bounds(year, quarter * 3 - 2)[0],
            month_bounds(year, quarter * 3)[1],
        )
        for quarter in range(1, 5)
    ]


async def _income(
    db: AsyncSession,
    period_start: date,
    period_end: date,
    account_id: int,
    company_id: int,
) -> IncomeBreakdown:
    by_property: dict[int | None, PropertyIncome] = {}
    rows = await crud.get_paid_income(
        db, period_start, period_end, account_id, company_id
    )
    names = await crud.get_property_names(
        db,
        {pid for pid, _, _ in rows if pid is not None},
        account_id,
        company_id,
    )
    for property_id, is_rent, amount in rows:
        entry = by_property.setdefault(
            property_id,
            PropertyIncome(
                property_id=property_id,
                property_name=names.get(property_id, UNASSIGNED),
            ),
        )
        if is_rent:
            entry.rent += amount
        else:
            entry.other += amount
        entry.total += amount

    entries = sorted(by_property.values(), key=lambda e: e.total, reverse=True)
    for entry in entries:
        entry.rent = round_money(entry.rent)
        entry.other = round_money(entry.other)
        entry.total = round_money(entry.total)

    total_rent = sum((e.rent for e in entries), ZERO)
    total_other = sum((e.other for e in entries), ZERO)
    return IncomeBreakdown(
        total_rent=round_money(total_rent),
        total_other=round_money(total_other),
        total=round_money(total_rent + total_other),
        by_property=entries,
    )


async def _expenses(
    db: AsyncSession,
    period_start: date,
    period_end: date,
    account_id: int,
    company_id: int,
) -> ExpenseBreakdown:
    rows = await crud.get_expenses(db, period_start, period_end, account_id, company_id)
    by_category: dict = defaultdict(lambda: ZERO)
    by_property: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for property_id, category, amount in rows:
        by_category[category] += amount
        by_property[property_id] += amount

    total = sum(by_category.values(), ZERO)
    names = await crud.get_property_names(
        db, set(by_property), account_id, company_id
    )
    return ExpenseBreakdown(
        total=round_money(total),
        by_category=sorted(
            (
                CategoryExpense(
                    category=category,
                    amount=round_money(amount),
                    percentage=_percentage(amount, total),
                )
                for category, amount in by_category.items()
            ),
            key=lambda e: e.amount,
            reverse=True,
        ),
        by_property=sorted(
            (
                PropertyExpense(
                    property_id=property_id,
                    property_name=names.get(property_id, UNASSIGNED),
                    amount=round_money(amount),
                    percentage=_percentage(amount, total),
                )
                for property_id, amount in by_property.items()
            ),
            key=lambda e: e.amount,
            reverse=True,
        ),
    )


async def generate_financial_report(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    period_start: date,
    period_end: date,
) -> FinancialReport:
    """Income, expenses and invoice totals for a period.

    Income is PAID invoices by paid date; expenses go by expense date;
    the invoice summary covers invoices issued in the period.

    Raises:
        ValidationError: If the period ends before it starts
    """
    if period_end < period_start:
        raise ValidationError(
            "period_end must not precede period_start", field="period_end"
        )

    income = await _income(db, period_start, period_end, account_id, company_id)
    expenses = await _expenses(db, period_start, period_end, account_id, company_id)
    invoices = await billing_services.get_invoice_summary(
        db, account_id, company_id, issued_from=period_start, issued_to=period_end
    )
    net_income = income.total - expenses.total

    return FinancialReport(
        period=ReportPeriod(
            period_start=period_start,
            period_end=period_end,
            label=period_label(period_start, period_end),
        ),
        income=income,
        expenses=expenses,
        invoices=invoices,
        net_income=round_money(net_income),
        profit_margin=_percentage(net_income, income.total),
    )


async def generate_tax_report(
    db: AsyncSession, account_id: int, company_id: int, year: int | None = None
) -> TaxReport:
    """A calendar year's income and expenses, by quarter and by property."""
    year = year or today().year
    quarters = quarter_bounds(year)
    year_start, year_end = quarters[0][1], quarters[-1][2]

    income = await _income(db, year_start, year_end, account_id, company_id)
    expenses = await _expenses(db, year_start, year_end, account_id, company_id)

    breakdown = []
    for label, start, end in quarters:
        q_income = await _income(db, start, end, account_id, company_id)
        q_expenses = await _expenses(db, start, end, account_id, company_id)
        breakdown.append(
            QuarterSummary(
                quarter=label,
                income=q_income.total,
                expenses=q_expenses.total,
                net=q_income.total - q_expenses.total,
            )
        )

    properties: dict[int | None, PropertyNet] = {}
    for entry in income.by_property:
        properties[entry.property_id] = PropertyNet(
            property_id=entry.property_id,
            property_name=entry.property_name,
            income=entry.total,
        )
    for entry in expenses.by_property:
        properties.setdefault(
            entry.property_id,
            PropertyNet(property_id=entry.property_id, property_name=entry.property_name),
        ).expenses = entry.amount
    for entry in properties.values():
        entry.net = entry.income - entry.expenses

    return TaxReport(
        year=year,
        gross_income=income.total,
        total_expenses=expenses.total,
        net_income=income.total - expenses.total,
        deductible_expenses=expenses.by_category,
        quarterly_breakdown=breakdown,
        properties=list(properties.values()),
    )


async def generate_rent_roll(
    db: AsyncSession, account_id: int, company_id: int, as_of: date | None = None
) -> RentRoll:
    """Every unit with its current lease, rent and occupancy on ``as_of``.

    Inactive units are listed but left out of the occupancy rate.
    """
    as_of = as_of or today()
    units = await crud.get_units_with_properties(db, account_id, company_id)
    leases = {
        lease.unit_id: lease
        for lease in await crud.get_current_leases(db, as_of, account_id, company_id)
    }
    tenants = await crud.get_tenants(
        db, {lease.tenant_id for lease in leases.values()}, account_id, company_id
    )

    entries = []
    monthly_total = ZERO
    counted = occupied = 0
    for unit, prop in units:
        lease = leases.get(unit.id)
        entry = RentRollEntry(
            property_id=prop.id,
            property_name=prop.property_name,
            unit_id=unit.id,
            unit_code=unit.unit_code,
            unit_status=unit.status,
            monthly_rent=unit.monthly_rent,
        )
        if lease:
            tenant = tenants.get(lease.tenant_id)
            entry.monthly_rent = lease.monthly_rent
            entry.lease_id = lease.id
            entry.lease_end = lease.end_date
            entry.tenant_name = tenant.display_name if tenant else None
            monthly_total += lease.monthly_rent
            occupied += 1
        if unit.status != UnitStatus.INACTIVE:
            counted += 1
        entries.append(entry)

    return RentRoll(
        as_of=as_of,
        total_monthly_rent=round_money(monthly_total),
        total_annual_rent=round_money(monthly_total * 12),
        units_count=counted,
        occupied_count=occupied,
        occupancy_rate=_percentage(Decimal(occupied), Decimal(counted)),
        entries=entries,
    )
