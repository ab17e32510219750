"""Tests for stored distributions, ledger calculation and owner tax reports."""

from datetime import date
from decimal import Decimal

import pytest

from propledger_backend.core.exceptions import NotFoundError, OwnershipPercentageError
from propledger_backend.core.utils import today
from propledger_backend.modules.billing import services as billing_services
from propledger_backend.modules.billing.schemas import InvoiceCreate
from propledger_backend.modules.distributions import services
from propledger_backend.modules.distributions.calculator import (
    DistributionInput,
    OwnerShareInput,
    calculate_distribution,
)
from propledger_backend.modules.expenses import services as expense_services
from propledger_backend.modules.expenses.schemas import ExpenseCreate
from propledger_backend.modules.owners import services as owner_services
from propledger_backend.modules.owners.schemas import OwnerCreate, PropertyOwnerCreate

PERIOD = (date(2025, 1, 1), date(2025, 12, 31))


@pytest.fixture
async def owners(db, scope, property_obj):
    maria = await owner_services.create_owner(
        db,
        OwnerCreate(name="Maria Costa", tax_residence_country="PT",
                    tax_identification_number="234567890"),
        *scope,
    )
    javier = await owner_services.create_owner(
        db, OwnerCreate(name="Javier Ruiz", tax_residence_country="Spain"), *scope
    )
    await owner_services.set_property_owners(
        db,
        property_obj.id,
        [
            PropertyOwnerCreate(owner_id=maria.id, ownership_percentage=Decimal("60")),
            PropertyOwnerCreate(owner_id=javier.id, ownership_percentage=Decimal("40")),
        ],
        *scope,
    )
    return maria, javier


def _result(property_id, owners, income="12000", period=PERIOD, calculated_by=1):
    maria, javier = owners
    return calculate_distribution(
        DistributionInput(
            property_id=property_id,
            period_start=period[0],
            period_end=period[1],
            total_income=Decimal(income),
            total_expenses=Decimal("2000"),
            owners=[
                OwnerShareInput(maria.id, maria.name, Decimal("60"), "PT"),
                OwnerShareInput(javier.id, javier.name, Decimal("40"), "ES"),
            ],
            calculated_by=calculated_by,
        )
    )


class TestSaveDistribution:
    async def test_versions_increase_per_period(self, db, scope, property_obj, owners):
        first = await services.save_distribution(
            db, _result(property_obj.id, owners), *scope
        )
        second = await services.save_distribution(
            db, _result(property_obj.id, owners, calculated_by=2), *scope
        )
        third = await services.save_distribution(
            db, _result(property_obj.id, owners, calculated_by=3), *scope
        )

        assert [first.version, second.version, third.version] == [1, 2, 3]
        assert first.recalculated_by is None
        assert first.recalculated_at is None
        assert second.recalculated_by == 2
        assert second.recalculated_at is not None
        assert third.calculated_by == 3

    async def test_other_period_starts_at_version_one(self, db, scope, property_obj, owners):
        await services.save_distribution(db, _result(property_obj.id, owners), *scope)
        other = await services.save_distribution(
            db,
            _result(property_obj.id, owners, period=(date(2026, 1, 1), date(2026, 6, 30))),
            *scope,
        )
        assert other.version == 1

    async def test_shares_are_stored(self, db, scope, property_obj, owners):
        saved = await services.save_distribution(
            db, _result(property_obj.id, owners), *scope
        )

        loaded = await services.get_distribution(db, saved.id, *scope)
        maria, javier = loaded.shares
        assert loaded.total_tax == Decimal("1444.00")
        assert maria.tax_country == "Portugal"
        assert maria.net_share == Decimal("5316.00")
        assert javier.tax_country == "Spain"
        assert javier.tax_amount == Decimal("760.00")

    async def test_unknown_property(self, db, scope, owners):
        with pytest.raises(NotFoundError):
            await services.save_distribution(db, _result(999, owners), *scope)

    async def test_history_newest_first(self, db, scope, property_obj, owners):
        await services.save_distribution(db, _result(property_obj.id, owners), *scope)
        await services.save_distribution(db, _result(property_obj.id, owners), *scope)
        await services.save_distribution(
            db,
            _result(property_obj.id, owners, period=(date(2026, 1, 1), date(2026, 3, 31))),
            *scope,
        )

        history = await services.get_distribution_history(db, property_obj.id, *scope)
        only_2025 = await services.get_distribution_history(
            db, property_obj.id, *scope, year=2025
        )

        assert [(d.period_start.year, d.version) for d in history] == [
            (2026, 1),
            (2025, 2),
            (2025, 1),
        ]
        assert [d.version for d in only_2025] == [2, 1]

    async def test_notify_stamps_pending_shares_once(self, db, scope, property_obj, owners):
        saved = await services.save_distribution(
            db, _result(property_obj.id, owners), *scope
        )

        assert await services.mark_shares_notified(db, saved.id, *scope) == 2
        assert all(share.notified_at is not None for share in saved.shares)
        assert await services.mark_shares_notified(db, saved.id, *scope) == 0


class TestFromLedger:
    async def test_uses_paid_invoices_expenses_and_ownership(
        self, db, scope, property_obj, tenant, owners
    ):
        invoice = await billing_services.create_invoice(
            db,
            *scope,
            InvoiceCreate(
                tenant_id=tenant.id,
                property_id=property_obj.id,
                amount=Decimal("12000"),
                issue_date=date(2025, 6, 1),
                due_date=date(2025, 6, 10),
            ),
        )
        await billing_services.mark_as_paid(db, invoice.id, *scope, paid_date=date(2025, 6, 5))
        # Unpaid income is ignored
        await billing_services.create_invoice(
            db,
            *scope,
            InvoiceCreate(
                tenant_id=tenant.id,
                property_id=property_obj.id,
                amount=Decimal("500"),
                issue_date=date(2025, 7, 1),
                due_date=date(2025, 7, 10),
            ),
        )
        await expense_services.create_expense(
            db,
            ExpenseCreate(
                property_id=property_obj.id,
                amount=Decimal("2000"),
                expense_date=date(2025, 5, 1),
            ),
            *scope,
        )

        result = await services.calculate_from_ledger(
            db, property_obj.id, *PERIOD, *scope, calculated_by=5
        )

        assert result.total_income == Decimal("12000.00")
        assert result.total_expenses == Decimal("2000.00")
        assert [share.owner_name for share in result.shares] == [
            "Maria Costa",
            "Javier Ruiz",
        ]
        assert result.total_tax == Decimal("1444.00")
        assert result.calculated_by == 5

    async def test_property_without_owners(self, db, scope, property_obj):
        with pytest.raises(OwnershipPercentageError):
            await services.calculate_from_ledger(db, property_obj.id, *PERIOD, *scope)


class TestTaxReport:
    async def test_summary_counts_latest_version_only(
        self, db, scope, property_obj, owners
    ):
        maria, _ = owners
        await services.save_distribution(
            db, _result(property_obj.id, owners, income="9000"), *scope
        )
        latest = await services.save_distribution(
            db, _result(property_obj.id, owners), *scope
        )

        summary = await services.get_annual_tax_summary(db, maria.id, 2025, *scope)

        assert summary.total_gross_income == Decimal("6000.00")
        assert summary.total_tax_paid == Decimal("684.00")
        assert summary.total_net_income == Decimal("5316.00")
        [row] = summary.distributions
        assert row.distribution_id == latest.id
        assert row.period == "2025-01 - 2025-12"

    async def test_portugal_form_uses_nif(self, db, scope, property_obj, owners):
        maria, _ = owners
        await services.save_distribution(db, _result(property_obj.id, owners), *scope)

        summary, form = await services.get_owner_tax_report(
            db, maria.id, *scope, year=2025, country="PT"
        )

        assert form.form == "Modelo 3 - Anexo F"
        assert form.fields["Campo 401"] == summary.total_gross_income
        assert form.fields["Campo 402"] == 0
        assert form.fields["Campo 404"] == Decimal("684.00")
        assert form.fields["NIF"] == "234567890"

    async def test_spain_form_placeholder_nif(self, db, scope, property_obj, owners):
        _, javier = owners
        await services.save_distribution(db, _result(property_obj.id, owners), *scope)

        _, form = await services.get_owner_tax_report(
            db, javier.id, *scope, year=2025, country="spain"
        )

        assert form.form == "Modelo 100 - IRPF"
        assert form.fields["Casilla 595"] == Decimal("760.00")
        assert form.fields["NIF"] == services.NIF_PLACEHOLDER

    async def test_unknown_country_gives_no_form(self, db, scope, owners):
        maria, _ = owners
        summary, form = await services.get_owner_tax_report(
            db, maria.id, *scope, country="FR"
        )
        assert form is None
        assert summary.year == today().year - 1
        assert summary.total_gross_income == 0

    async def test_unknown_owner(self, db, scope):
        with pytest.raises(NotFoundError):
            await services.get_owner_tax_report(db, 42, *scope)
