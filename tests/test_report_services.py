"""Tests for the financial, tax and rent roll reports."""

from datetime import date
from decimal import Decimal

import pytest

from propledger_backend.core.exceptions import ValidationError
from propledger_backend.modules.billing import services as billing_services
from propledger_backend.modules.billing.schemas import InvoiceCreate
from propledger_backend.modules.expenses import services as expense_services
from propledger_backend.modules.expenses.models import ExpenseCategory
from propledger_backend.modules.expenses.schemas import ExpenseCreate
from propledger_backend.modules.lease_management import services as lease_services
from propledger_backend.modules.lease_management.schemas import LeaseCreate
from propledger_backend.modules.property_management import crud as property_crud
from propledger_backend.modules.reports import services

YEAR_2025 = (date(2025, 1, 1), date(2025, 12, 31))


@pytest.fixture
async def lease(db, scope, property_obj, unit, tenant):
    created = await lease_services.create_lease(
        db,
        *scope,
        LeaseCreate(
            property_id=property_obj.id,
            unit_id=unit.id,
            tenant_id=tenant.id,
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
            monthly_rent=Decimal("950.00"),
        ),
    )
    return await lease_services.activate_lease(db, created.id, *scope)


async def _invoice(db, scope, tenant, property_obj, amount, issued, paid=None, lease=None):
    invoice = await billing_services.create_invoice(
        db,
        *scope,
        InvoiceCreate(
            tenant_id=tenant.id,
            lease_id=lease.id if lease else None,
            property_id=property_obj.id,
            amount=Decimal(amount),
            issue_date=issued,
            due_date=issued.replace(day=10),
        ),
    )
    if paid:
        await billing_services.mark_as_paid(db, invoice.id, *scope, paid_date=paid)
    return invoice


async def _expense(db, scope, property_obj, amount, spent, category):
    await expense_services.create_expense(
        db,
        ExpenseCreate(
            property_id=property_obj.id,
            amount=Decimal(amount),
            expense_date=spent,
            category=category,
        ),
        *scope,
    )


@pytest.fixture
async def ledger(db, scope, property_obj, tenant, lease):
    # Q1 rent, Q2 other income, one unpaid invoice; Q1 and Q3 expenses
    await _invoice(
        db, scope, tenant, property_obj, "950", date(2025, 2, 1), date(2025, 2, 5), lease
    )
    await _invoice(db, scope, tenant, property_obj, "200", date(2025, 5, 1), date(2025, 5, 3))
    await _invoice(db, scope, tenant, property_obj, "950", date(2025, 3, 1), lease=lease)
    await _expense(
        db, scope, property_obj, "300", date(2025, 2, 10), ExpenseCategory.MAINTENANCE
    )
    await _expense(
        db, scope, property_obj, "100", date(2025, 8, 1), ExpenseCategory.INSURANCE
    )


class TestFinancialReport:
    async def test_totals_and_breakdowns(self, db, scope, property_obj, ledger):
        report = await services.generate_financial_report(db, *scope, *YEAR_2025)

        assert report.period.label == "Jan 2025 - Dec 2025"
        assert report.income.total_rent == Decimal("950.00")
        assert report.income.total_other == Decimal("200.00")
        assert report.income.total == Decimal("1150.00")
        [by_property] = report.income.by_property
        assert by_property.property_name == "Rua Augusta 10"
        assert by_property.total == Decimal("1150.00")

        assert report.expenses.total == Decimal("400.00")
        assert [(e.category, e.percentage) for e in report.expenses.by_category] == [
            (ExpenseCategory.MAINTENANCE, Decimal("75.00")),
            (ExpenseCategory.INSURANCE, Decimal("25.00")),
        ]
        assert report.expenses.by_property[0].percentage == Decimal("100.00")

        assert report.invoices.paid_count == 2
        assert report.invoices.pending_count == 1
        assert report.net_income == Decimal("750.00")
        assert report.profit_margin == Decimal("65.22")

    async def test_single_month(self, db, scope, ledger):
        report = await services.generate_financial_report(
            db, *scope, date(2025, 3, 1), date(2025, 3, 31)
        )

        assert report.period.label == "Mar 2025"
        assert report.income.total == 0
        assert report.profit_margin == 0
        assert report.invoices.pending_count == 1

    async def test_period_must_not_run_backwards(self, db, scope):
        with pytest.raises(ValidationError):
            await services.generate_financial_report(
                db, *scope, date(2025, 12, 31), date(2025, 1, 1)
            )


class TestTaxReport:
    async def test_quarters_and_properties(self, db, scope, property_obj, ledger):
        report = await services.generate_tax_report(db, *scope, year=2025)

        assert report.gross_income == Decimal("1150.00")
        assert report.total_expenses == Decimal("400.00")
        assert report.net_income == Decimal("750.00")
        assert [(q.quarter, q.income, q.expenses, q.net) for q in report.quarterly_breakdown] == [
            ("Q1", Decimal("950"), Decimal("300"), Decimal("650")),
            ("Q2", Decimal("200"), Decimal("0"), Decimal("200")),
            ("Q3", Decimal("0"), Decimal("100"), Decimal("-100")),
            ("Q4", Decimal("0"), Decimal("0"), Decimal("0")),
        ]
        [prop] = report.properties
        assert prop.property_id == property_obj.id
        assert prop.net == Decimal("750.00")
        assert sum(q.net for q in report.quarterly_breakdown) == report.net_income

    async def test_empty_year(self, db, scope):
        report = await services.generate_tax_report(db, *scope, year=2024)
        assert report.gross_income == 0
        assert report.properties == []
        assert len(report.quarterly_breakdown) == 4


class TestRentRoll:
    @pytest.fixture
    async def vacant_unit(self, db, scope, property_obj):
        vacant = await property_crud.create_unit(
            db, *scope, property_obj.id, unit_code="1B", monthly_rent=Decimal("800.00")
        )
        await db.commit()
        return vacant

    async def test_current_lease_and_occupancy(self, db, scope, lease, vacant_unit):
        roll = await services.generate_rent_roll(db, *scope, as_of=date(2025, 6, 1))

        let, vacant = roll.entries
        assert let.unit_code == "1A"
        assert let.lease_id == lease.id
        assert let.tenant_name == "Ana Silva"
        assert let.lease_end == date(2025, 12, 31)
        assert vacant.tenant_name is None
        assert vacant.monthly_rent == Decimal("800.00")

        assert roll.total_monthly_rent == Decimal("950.00")
        assert roll.total_annual_rent == Decimal("11400.00")
        assert (roll.units_count, roll.occupied_count) == (2, 1)
        assert roll.occupancy_rate == Decimal("50.00")

    async def test_lease_outside_date_is_not_counted(self, db, scope, lease):
        roll = await services.generate_rent_roll(db, *scope, as_of=date(2026, 2, 1))

        assert roll.occupied_count == 0
        assert roll.total_monthly_rent == 0
        assert roll.occupancy_rate == 0
