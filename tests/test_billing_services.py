"""Tests for invoicing, payments and the billing batch jobs."""

from datetime import date
from decimal import Decimal

import pytest

from propledger_backend.core.exceptions import (
    BusinessLogicError,
    NotFoundError,
    ValidationError,
)
from propledger_backend.core.utils import today
from propledger_backend.modules.billing import crud, services
from propledger_backend.modules.billing.late_fees import LateFeeConfig
from propledger_backend.modules.billing.models import (
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
)
from propledger_backend.modules.billing.schemas import (
    InvoiceCreate,
    InvoiceLineItem,
    InvoiceUpdate,
    PaymentCreate,
)
from propledger_backend.modules.lease_management import services as lease_services
from propledger_backend.modules.lease_management.schemas import LeaseCreate

DUE = date(2025, 3, 1)


@pytest.fixture
def new_invoice(db, scope, tenant, property_obj):
    async def create(**overrides):
        fields = dict(
            tenant_id=tenant.id,
            property_id=property_obj.id,
            amount=Decimal("1000.00"),
            issue_date=date(2025, 2, 20),
            due_date=DUE,
        )
        fields.update(overrides)
        return await services.create_invoice(db, *scope, InvoiceCreate(**fields))

    return create


@pytest.fixture
async def active_lease(db, scope, property_obj, unit, tenant):
    lease = await lease_services.create_lease(
        db,
        *scope,
        LeaseCreate(
            property_id=property_obj.id,
            unit_id=unit.id,
            tenant_id=tenant.id,
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
            monthly_rent=Decimal("950.00"),
            payment_day=8,
        ),
    )
    return await lease_services.activate_lease(db, lease.id, *scope)


class TestInvoices:
    async def test_numbered_by_issue_year(self, new_invoice):
        first = await new_invoice()
        second = await new_invoice()
        next_year = await new_invoice(issue_date=date(2026, 1, 2), due_date=date(2026, 2, 1))

        assert first.invoice_number == "INV-2025-00001"
        assert second.invoice_number == "INV-2025-00002"
        assert next_year.invoice_number == "INV-2026-00001"
        assert first.status == InvoiceStatus.PENDING

    async def test_numbering_past_five_digits(self, db, new_invoice):
        for number in ("INV-2025-99999", "INV-2025-100000"):
            invoice = await new_invoice()
            await crud.update_invoice(db, invoice, invoice_number=number)
        await db.commit()

        following = await new_invoice()
        assert following.invoice_number == "INV-2025-100001"

    async def test_amount_defaults_to_line_items(self, new_invoice):
        invoice = await new_invoice(
            amount=None,
            line_items=[
                InvoiceLineItem(description="Rent", unit_price=Decimal("900")),
                InvoiceLineItem(description="Parking", quantity=Decimal("2"),
                                unit_price=Decimal("25")),
            ],
        )
        assert invoice.amount == Decimal("950.00")
        assert invoice.original_amount == Decimal("950.00")
        assert len(invoice.line_items) == 2

    async def test_amount_must_match_line_items(self, new_invoice):
        with pytest.raises(ValidationError):
            await new_invoice(
                amount=Decimal("999"),
                line_items=[InvoiceLineItem(description="Rent", unit_price=Decimal("900"))],
            )

    async def test_unknown_tenant(self, new_invoice):
        with pytest.raises(NotFoundError):
            await new_invoice(tenant_id=404)

    async def test_update_amount(self, db, scope, new_invoice):
        invoice = await new_invoice()
        updated = await services.update_invoice(
            db, invoice.id, *scope, InvoiceUpdate(amount=Decimal("1100"))
        )
        assert updated.amount == Decimal("1100.00")
        assert updated.original_amount == Decimal("1100.00")

    async def test_paid_invoice_cannot_be_cancelled(self, db, scope, new_invoice):
        invoice = await new_invoice()
        await services.mark_as_paid(db, invoice.id, *scope, paid_date=date(2025, 2, 28))

        with pytest.raises(BusinessLogicError):
            await services.cancel_invoice(db, invoice.id, *scope)
        with pytest.raises(BusinessLogicError):
            await services.mark_as_paid(db, invoice.id, *scope)

    async def test_cancel(self, db, scope, new_invoice):
        invoice = await new_invoice()
        cancelled = await services.cancel_invoice(db, invoice.id, *scope)
        assert cancelled.status == InvoiceStatus.CANCELLED
        assert cancelled.cancelled_at is not None


class TestPayments:
    async def test_partial_then_full_payment(self, db, scope, new_invoice):
        invoice = await new_invoice()

        _, invoice = await services.record_payment(
            db, invoice.id, *scope,
            PaymentCreate(amount=Decimal("400"), payment_method=PaymentMethod.MBWAY),
        )
        assert invoice.status == InvoiceStatus.PENDING

        payment, invoice = await services.record_payment(
            db, invoice.id, *scope,
            PaymentCreate(amount=Decimal("600"), payment_method=PaymentMethod.MULTIBANCO),
        )
        assert payment.status == PaymentStatus.SUCCEEDED
        assert invoice.status == InvoiceStatus.PAID
        assert invoice.paid_date is not None
        assert len(await services.list_payments(db, invoice.id, *scope)) == 2

    async def test_payment_on_cancelled_invoice(self, db, scope, new_invoice):
        invoice = await new_invoice()
        await services.cancel_invoice(db, invoice.id, *scope)
        with pytest.raises(BusinessLogicError):
            await services.record_payment(
                db, invoice.id, *scope,
                PaymentCreate(amount=Decimal("10"), payment_method=PaymentMethod.CARD),
            )

    async def test_refund_reopens_invoice(self, db, scope, new_invoice):
        invoice = await new_invoice()
        payment, _ = await services.record_payment(
            db, invoice.id, *scope,
            PaymentCreate(amount=Decimal("1000"), payment_method=PaymentMethod.CARD),
        )

        refunded = await services.refund_payment(db, payment.id, *scope, reason="Duplicate")

        assert refunded.status == PaymentStatus.REFUNDED
        assert refunded.refunded_amount == Decimal("1000.00")
        reopened = await services.get_invoice(db, invoice.id, *scope)
        # due date is in the past
        assert reopened.status == InvoiceStatus.OVERDUE

    async def test_refund_cannot_exceed_payment(self, db, scope, new_invoice):
        invoice = await new_invoice()
        payment, _ = await services.record_payment(
            db, invoice.id, *scope,
            PaymentCreate(amount=Decimal("100"), payment_method=PaymentMethod.CARD),
        )
        with pytest.raises(ValidationError):
            await services.refund_payment(db, payment.id, *scope, amount=Decimal("150"))


class TestLateFees:
    async def test_grace_then_fee(self, db, scope, new_invoice):
        invoice = await new_invoice()

        first = await services.apply_late_fees(db, *scope, as_of=date(2025, 3, 4))
        assert first.marked_overdue == 1
        assert invoice.status == InvoiceStatus.OVERDUE

        second = await services.apply_late_fees(db, *scope, as_of=date(2025, 3, 10))
        assert second.fees_applied == 1
        assert second.total_late_fees == Decimal("50.00")
        assert invoice.late_fee == Decimal("50.00")
        assert invoice.amount == Decimal("1050.00")

        third = await services.apply_late_fees(db, *scope, as_of=date(2025, 4, 10))
        assert third.skipped == 1
        assert third.fees_applied == 0

    async def test_fee_freezes_amount(self, db, scope, new_invoice):
        invoice = await new_invoice()
        await services.apply_late_fees(db, *scope, as_of=date(2025, 4, 1))

        with pytest.raises(BusinessLogicError):
            await services.update_invoice(
                db, invoice.id, *scope, InvoiceUpdate(amount=Decimal("500"))
            )

    async def test_disabled_config(self, db, scope, new_invoice):
        await new_invoice()
        result = await services.apply_late_fees(
            db, *scope, as_of=date(2025, 4, 1), config=LateFeeConfig(enabled=False)
        )
        assert result.fees_applied == 0
        assert result.marked_overdue == 1


class TestMonthlyInvoices:
    async def test_one_invoice_per_active_lease(self, db, scope, active_lease):
        result = await services.generate_monthly_invoices(db, *scope, 2025, 5)

        assert result.skipped == 0
        [invoice] = result.created
        assert invoice.lease_id == active_lease.id
        assert invoice.amount == Decimal("950.00")
        assert invoice.due_date == date(2025, 5, 8)
        assert invoice.billing_period == date(2025, 5, 1)
        assert invoice.invoice_number == f"INV-{today().year}-00001"
        assert invoice.description == "Rent for May 2025 - Rua Augusta 10"

    async def test_rerun_skips_invoiced_leases(self, db, scope, active_lease):
        await services.generate_monthly_invoices(db, *scope, 2025, 5)
        again = await services.generate_monthly_invoices(db, *scope, 2025, 5, due_day=10)

        assert again.created == []
        assert again.skipped == 1

    async def test_month_outside_lease(self, db, scope, active_lease):
        result = await services.generate_monthly_invoices(db, *scope, 2026, 3)
        assert result.created == []


async def test_invoice_summary(db, scope, new_invoice):
    await new_invoice()
    paid = await new_invoice(amount=Decimal("500"))
    cancelled = await new_invoice(amount=Decimal("70"))
    await services.mark_as_paid(db, paid.id, *scope)
    await services.cancel_invoice(db, cancelled.id, *scope)

    summary = await services.get_invoice_summary(db, *scope)

    assert summary.pending_total == Decimal("1000.00")
    assert summary.pending_count == 1
    assert summary.paid_total == Decimal("500.00")
    assert summary.cancelled_count == 1
