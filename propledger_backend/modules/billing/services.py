"""Billing business logic services."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.exceptions import BusinessLogicError, NotFoundError, ValidationError
from ...core.logging import get_logger
from ...core.utils import month_bounds, round_money, today, utc_now
from ...database import get_next_id_for_tenant
from ..lease_management import crud as lease_crud
from ..property_management import crud as property_crud
from ..tenant_management import crud as tenant_crud
from . import crud
from .late_fees import LateFeeConfig, calculate_late_fee
from .models import Invoice, InvoiceStatus, PaymentStatus, PaymentTransaction
from .schemas import (
    InvoiceCreate,
    InvoiceLineItem,
    InvoiceResponse,
    InvoiceSummary,
    InvoiceUpdate,
    LateFeeRunResult,
    MonthlyInvoiceResult,
    PaymentCreate,
)

logger = get_logger("billing")

OPEN_STATUSES = (InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)


def _dump_line_items(items: list[InvoiceLineItem]) -> list[dict]:
    # JSON column: decimals are stored as strings
    return [item.model_dump(mode="json") for item in items]


def _line_items_total(items: list[InvoiceLineItem]) -> Decimal:
    return round_money(sum((item.amount for item in items), Decimal("0")))


def _as_date(value: datetime | date) -> date:
    return value.date() if isinstance(value, datetime) else value


async def get_invoice(
    db: AsyncSession, invoice_id: int, account_id: int, company_id: int
) -> Invoice:
    invoice = await crud.get_invoice_by_id(db, invoice_id, account_id, company_id)
    if not invoice:
        raise NotFoundError(f"Invoice with ID {invoice_id} not found")
    return invoice


async def create_invoice(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    data: InvoiceCreate,
) -> Invoice:
    """Create a PENDING invoice numbered ``INV-{year}-{seq}``.

    Raises:
        NotFoundError: If the tenant or lease does not exist
        ValidationError: If the amount disagrees with the line items
    """
    tenant = await tenant_crud.get_tenant_by_id(
        db, data.tenant_id, account_id, company_id
    )
    if not tenant:
        raise NotFoundError(f"Tenant with ID {data.tenant_id} not found")

    property_id = data.property_id
    if data.lease_id is not None:
        lease = await lease_crud.get_lease_by_id(
            db, data.lease_id, account_id, company_id
        )
        if not lease or lease.tenant_id != tenant.id:
            raise NotFoundError(
                f"Lease with ID {data.lease_id} not found for tenant {tenant.id}"
            )
        property_id = property_id or lease.property_id

    if data.line_items:
        items_total = _line_items_total(data.line_items)
        if data.amount is not None and round_money(data.amount) != items_total:
            raise ValidationError(
                f"Amount {data.amount} does not match line items total {items_total}",
                field="amount",
            )
        amount = items_total
    else:
        amount = round_money(data.amount)

    issue_date = data.issue_date or today()
    sequence = await crud.next_invoice_sequence(
        db, issue_date.year, account_id, company_id
    )
    invoice = await crud.create_invoice(
        db,
        account_id=account_id,
        company_id=company_id,
        invoice_number=crud.format_invoice_number(issue_date.year, sequence),
        tenant_id=tenant.id,
        lease_id=data.lease_id,
        property_id=property_id,
        amount=amount,
        original_amount=amount,
        late_fee=Decimal("0"),
        currency=data.currency,
        issue_date=issue_date,
        due_date=data.due_date,
        description=data.description,
        line_items=_dump_line_items(data.line_items) or None,
        notes=data.notes,
    )
    await db.commit()
    logger.info(
        "Invoice created",
        extra={"invoice_id": invoice.id, "invoice_number": invoice.invoice_number},
    )
    return invoice


async def update_invoice(
    db: AsyncSession,
    invoice_id: int,
    account_id: int,
    company_id: int,
    data: InvoiceUpdate,
) -> Invoice:
    """Edit an open invoice. Amounts are frozen once a late fee is applied."""
    invoice = await get_invoice(db, invoice_id, account_id, company_id)
    if invoice.status not in OPEN_STATUSES:
        raise ValidationError(
            f"Cannot update invoice in '{invoice.status.value}' status"
        )

    changes = data.model_dump(exclude_unset=True, exclude={"line_items", "amount"})
    amount = data.amount
    if data.line_items is not None:
        changes["line_items"] = _dump_line_items(data.line_items) or None
        if data.line_items:
            amount = _line_items_total(data.line_items)

    if amount is not None and round_money(amount) != invoice.original_amount:
        if invoice.late_fee_applied_at is not None:
            raise BusinessLogicError(
                "Cannot change the amount of an invoice with a late fee applied"
            )
        changes["amount"] = changes["original_amount"] = round_money(amount)

    updated = await crud.update_invoice(db, invoice, **changes)
    await db.commit()
    return updated


async def cancel_invoice(
    db: AsyncSession, invoice_id: int, account_id: int, company_id: int
) -> Invoice:
    invoice = await get_invoice(db, invoice_id, account_id, company_id)
    if invoice.status == InvoiceStatus.PAID:
        raise BusinessLogicError("Paid invoices cannot be cancelled")
    if invoice.status == InvoiceStatus.CANCELLED:
        return invoice

    cancelled = await crud.set_invoice_status(db, invoice, InvoiceStatus.CANCELLED)
    await db.commit()
    logger.info("Invoice cancelled", extra={"invoice_id": invoice.id})
    return cancelled


async def mark_as_paid(
    db: AsyncSession,
    invoice_id: int,
    account_id: int,
    company_id: int,
    paid_date: date | None = None,
) -> Invoice:
    """Settle an invoice outside the payment ledger (cash, offline transfer)."""
    invoice = await get_invoice(db, invoice_id, account_id, company_id)
    if invoice.status == InvoiceStatus.CANCELLED:
        raise BusinessLogicError("Cancelled invoices cannot be paid")
    if invoice.status == InvoiceStatus.PAID:
        raise BusinessLogicError(
            f"Invoice {invoice.invoice_number} is already paid"
        )

    paid = await crud.set_invoice_status(
        db, invoice, InvoiceStatus.PAID, paid_date=paid_date or today()
    )
    await db.commit()
    logger.info("Invoice marked as paid", extra={"invoice_id": invoice.id})
    return paid


# ----- Payments -----


async def record_payment(
    db: AsyncSession,
    invoice_id: int,
    account_id: int,
    company_id: int,
    data: PaymentCreate,
) -> tuple[PaymentTransaction, Invoice]:
    """Record a succeeded payment; the invoice is PAID once fully covered.

    Returns:
        Tuple of (payment, invoice)
    """
    invoice = await get_invoice(db, invoice_id, account_id, company_id)
    if invoice.status not in OPEN_STATUSES:
        raise BusinessLogicError(
            f"Cannot record a payment on a '{invoice.status.value}' invoice"
        )

    paid_at = data.paid_at or utc_now()
    payment = await crud.create_payment(
        db,
        account_id=account_id,
        company_id=company_id,
        invoice_id=invoice.id,
        amount=round_money(data.amount),
        currency=invoice.currency,
        payment_method=data.payment_method,
        status=PaymentStatus.SUCCEEDED,
        reference=data.reference,
        paid_at=paid_at,
        notes=data.notes,
    )

    total_paid = await crud.sum_succeeded_payments(
        db, invoice.id, account_id, company_id
    )
    if round_money(total_paid) >= invoice.amount:
        invoice = await crud.set_invoice_status(
            db, invoice, InvoiceStatus.PAID, paid_date=_as_date(paid_at)
        )

    await db.commit()
    logger.info(
        "Payment recorded",
        extra={
            "invoice_id": invoice.id,
            "payment_id": payment.id,
            "method": data.payment_method.value,
        },
    )
    return payment, invoice


async def refund_payment(
    db: AsyncSession,
    payment_id: int,
    account_id: int,
    company_id: int,
    amount: Decimal | None = None,
    reason: str | None = None,
) -> PaymentTransaction:
    """Refund a succeeded payment, reopening the invoice if it is no longer covered."""
    payment = await crud.get_payment_by_id(db, payment_id, account_id, company_id)
    if not payment:
        raise NotFoundError(f"Payment with ID {payment_id} not found")
    if payment.status != PaymentStatus.SUCCEEDED:
        raise BusinessLogicError(
            f"Cannot refund a payment in '{payment.status.value}' status"
        )

    refund_amount = round_money(amount) if amount is not None else payment.amount
    if refund_amount > payment.amount:
        raise ValidationError(
            f"Refund {refund_amount} exceeds the payment amount {payment.amount}",
            field="amount",
        )

    refunded = await crud.refund_payment(db, payment, refund_amount, reason)

    invoice = await crud.get_invoice_by_id(
        db, payment.invoice_id, account_id, company_id
    )
    if invoice and invoice.status == InvoiceStatus.PAID:
        remaining = await crud.sum_succeeded_payments(
            db, invoice.id, account_id, company_id
        )
        if round_money(remaining) < invoice.amount:
            reopened = (
                InvoiceStatus.OVERDUE
                if invoice.due_date < today()
                else InvoiceStatus.PENDING
            )
            await crud.set_invoice_status(db, invoice, reopened)

    await db.commit()
    logger.info(
        "Payment refunded",
        extra={"payment_id": payment.id, "amount": str(refund_amount)},
    )
    return refunded


async def list_payments(
    db: AsyncSession, invoice_id: int, account_id: int, company_id: int
) -> list[PaymentTransaction]:
    await get_invoice(db, invoice_id, account_id, company_id)
    return await crud.get_payments_by_invoice(db, invoice_id, account_id, company_id)


# ----- Batch jobs -----


async def apply_late_fees(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    as_of: date | None = None,
    config: LateFeeConfig | None = None,
) -> LateFeeRunResult:
    """Charge late fees on open invoices past their due date.

    Invoices still inside the grace period are only marked OVERDUE. An
    invoice is charged at most once.
    """
    as_of = as_of or today()
    config = config or LateFeeConfig.from_settings()
    invoices = await crud.get_open_invoices_due_before(
        db, as_of, account_id, company_id
    )

    result = LateFeeRunResult(checked=len(invoices))
    applied_at = utc_now()
    for invoice in invoices:
        if invoice.late_fee_applied_at is not None:
            result.skipped += 1
            continue

        fee = calculate_late_fee(
            invoice.original_amount, invoice.due_date, config, today=as_of
        )
        if fee.amount > 0:
            await crud.apply_late_fee(db, invoice, fee.amount, applied_at)
            result.fees_applied += 1
            result.total_late_fees += fee.amount
        elif invoice.status == InvoiceStatus.PENDING:
            await crud.set_invoice_status(db, invoice, InvoiceStatus.OVERDUE)
            result.marked_overdue += 1

    await db.commit()
    logger.info(
        "Late fees applied",
        extra={
            "checked": result.checked,
            "fees_applied": result.fees_applied,
            "marked_overdue": result.marked_overdue,
            "total_late_fees": str(result.total_late_fees),
        },
    )
    return result


async def generate_monthly_invoices(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    year: int,
    month: int,
    due_day: int | None = None,
) -> MonthlyInvoiceResult:
    """Create one rent invoice per ACTIVE lease running during the month.

    Leases already invoiced for the month are skipped, so the job can be
    re-run safely.
    """
    first_day, last_day = month_bounds(year, month)
    leases = await lease_crud.get_active_leases_overlapping(
        db, first_day, last_day, account_id, company_id
    )
    month_label = first_day.strftime("%B %Y")
    issue_date = today()

    next_id = await get_next_id_for_tenant(db, Invoice, account_id, company_id)
    sequence = await crud.next_invoice_sequence(
        db, issue_date.year, account_id, company_id
    )
    property_names: dict[int, str] = {}

    result = MonthlyInvoiceResult()
    created: list[Invoice] = []
    for lease in leases:
        existing = await crud.get_invoice_for_lease_period(
            db, lease.id, first_day, account_id, company_id
        )
        if existing:
            result.skipped += 1
            continue

        if lease.property_id not in property_names:
            property_obj = await property_crud.get_property_by_id(
                db, lease.property_id, account_id, company_id
            )
            property_names[lease.property_id] = (
                property_obj.property_name if property_obj else f"#{lease.property_id}"
            )
        property_name = property_names[lease.property_id]

        rent = round_money(lease.monthly_rent)
        line_item = InvoiceLineItem(
            description=f"Monthly Rent - {property_name}",
            quantity=Decimal("1"),
            unit_price=rent,
            amount=rent,
        )
        invoice = await crud.create_invoice(
            db,
            account_id=account_id,
            company_id=company_id,
            invoice_id=next_id,
            invoice_number=crud.format_invoice_number(issue_date.year, sequence),
            tenant_id=lease.tenant_id,
            lease_id=lease.id,
            property_id=lease.property_id,
            amount=rent,
            original_amount=rent,
            late_fee=Decimal("0"),
            currency=lease.currency,
            issue_date=issue_date,
            due_date=first_day.replace(
                day=due_day or lease.payment_day or settings.invoice_due_day
            ),
            billing_period=first_day,
            description=f"Rent for {month_label} - {property_name}",
            line_items=_dump_line_items([line_item]),
        )
        created.append(invoice)
        next_id += 1
        sequence += 1

    await db.commit()
    result.created = [InvoiceResponse.model_validate(inv) for inv in created]
    logger.info(
        "Monthly invoices generated",
        extra={
            "period": first_day.strftime("%Y-%m"),
            "created": len(created),
            "skipped": result.skipped,
        },
    )
    return result


async def get_invoice_summary(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    issued_from: date | None = None,
    issued_to: date | None = None,
) -> InvoiceSummary:
    """Totals and counts per status, plus late fees charged."""
    summary = InvoiceSummary()
    rows = await crud.get_status_totals(
        db, account_id, company_id, issued_from, issued_to
    )
    for status, count, amount_sum, late_fee_sum in rows:
        total = round_money(amount_sum or 0)
        if status == InvoiceStatus.PENDING:
            summary.pending_total, summary.pending_count = total, count
        elif status == InvoiceStatus.PAID:
            summary.paid_total, summary.paid_count = total, count
        elif status == InvoiceStatus.OVERDUE:
            summary.overdue_total, summary.overdue_count = total, count
        elif status == InvoiceStatus.CANCELLED:
            summary.cancelled_count = count
            continue
        summary.late_fees_total += round_money(late_fee_sum or 0)
    return summary
