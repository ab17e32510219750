"""CRUD operations for billing module."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Integer, and_, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import utc_now
from ...database import get_next_id_for_tenant
from .models import Invoice, InvoiceStatus, PaymentStatus, PaymentTransaction

INVOICE_PREFIX = "INV"

# ----- Invoice numbering -----


def format_invoice_number(year: int, sequence: int) -> str:
    return f"{INVOICE_PREFIX}-{year}-{sequence:05d}"


async def next_invoice_sequence(
    db: AsyncSession, year: int, account_id: int, company_id: int
) -> int:
    """Next ``INV-{year}-NNNNN`` sequence number within the tenant scope.

    Suffixes are compared as integers; past 99999 they widen.
    """
    prefix = f"{INVOICE_PREFIX}-{year}-"
    suffix = cast(func.substr(Invoice.invoice_number, len(prefix) + 1), Integer)
    result = await db.execute(
        select(func.max(suffix)).where(
            and_(
                Invoice.account_id == account_id,
                Invoice.company_id == company_id,
                Invoice.invoice_number.like(f"{prefix}%"),
            )
        )
    )
    last_sequence = result.scalar_one_or_none()
    return (last_sequence or 0) + 1


# ----- Invoice CRUD -----


async def get_invoice_by_id(
    db: AsyncSession, invoice_id: int, account_id: int, company_id: int
) -> Invoice | None:
    result = await db.execute(
        select(Invoice).where(
            and_(
                Invoice.id == invoice_id,
                Invoice.account_id == account_id,
                Invoice.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_invoices(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    skip: int = 0,
    limit: int = 100,
    status: InvoiceStatus | None = None,
    tenant_id: int | None = None,
    property_id: int | None = None,
    lease_id: int | None = None,
    due_from: date | None = None,
    due_to: date | None = None,
    search: str | None = None,
) -> tuple[list[Invoice], int]:
    """Get invoices with filtering and pagination."""
    filters = [
        Invoice.account_id == account_id,
        Invoice.company_id == company_id,
    ]
    if status:
        filters.append(Invoice.status == status)
    if tenant_id:
        filters.append(Invoice.tenant_id == tenant_id)
    if property_id:
        filters.append(Invoice.property_id == property_id)
    if lease_id:
        filters.append(Invoice.lease_id == lease_id)
    if due_from:
        filters.append(Invoice.due_date >= due_from)
    if due_to:
        filters.append(Invoice.due_date <= due_to)
    if search:
        search_filter = f"%{search}%"
        filters.append(
            (Invoice.invoice_number.ilike(search_filter))
            | (Invoice.description.ilike(search_filter))
        )

    total_result = await db.execute(
        select(func.count(Invoice.id)).where(and_(*filters))
    )
    total = total_result.scalar_one()

    result = await db.execute(
        select(Invoice)
        .where(and_(*filters))
        .order_by(Invoice.due_date.desc(), Invoice.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def get_invoices_by_tenant(
    db: AsyncSession,
    tenant_id: int,
    account_id: int,
    company_id: int,
    limit: int = 100,
) -> list[Invoice]:
    """Most recent invoices of a tenant, cancelled ones excluded."""
    result = await db.execute(
        select(Invoice)
        .where(
            and_(
                Invoice.tenant_id == tenant_id,
                Invoice.account_id == account_id,
                Invoice.company_id == company_id,
                Invoice.status != InvoiceStatus.CANCELLED,
            )
        )
        .order_by(Invoice.due_date.desc(), Invoice.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_invoice_for_lease_period(
    db: AsyncSession,
    lease_id: int,
    billing_period: date,
    account_id: int,
    company_id: int,
) -> Invoice | None:
    result = await db.execute(
        select(Invoice)
        .where(
            and_(
                Invoice.account_id == account_id,
                Invoice.company_id == company_id,
                Invoice.lease_id == lease_id,
                Invoice.billing_period == billing_period,
                Invoice.status != InvoiceStatus.CANCELLED,
            )
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_open_invoices_due_before(
    db: AsyncSession, as_of: date, account_id: int, company_id: int
) -> list[Invoice]:
    result = await db.execute(
        select(Invoice)
        .where(
            and_(
                Invoice.account_id == account_id,
                Invoice.company_id == company_id,
                Invoice.status.in_((InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)),
                Invoice.due_date < as_of,
            )
        )
        .order_by(Invoice.due_date)
    )
    return list(result.scalars().all())


async def create_invoice(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    invoice_id: int | None = None,
    **fields,
) -> Invoice:
    """Create an invoice; batch callers pass pre-allocated ids."""
    if invoice_id is None:
        invoice_id = await get_next_id_for_tenant(db, Invoice, account_id, company_id)
    invoice = Invoice(
        account_id=account_id,
        company_id=company_id,
        id=invoice_id,
        **fields,
    )
    db.add(invoice)
    await db.flush()
    await db.refresh(invoice)
    return invoice


async def update_invoice(db: AsyncSession, invoice: Invoice, **kwargs) -> Invoice:
    for key, value in kwargs.items():
        if hasattr(invoice, key):
            setattr(invoice, key, value)
    await db.flush()
    await db.refresh(invoice)
    return invoice


async def apply_late_fee(
    db: AsyncSession, invoice: Invoice, fee: Decimal, applied_at: datetime
) -> Invoice:
    invoice.late_fee = fee
    invoice.amount = invoice.original_amount + fee
    invoice.late_fee_applied_at = applied_at
    invoice.status = InvoiceStatus.OVERDUE
    await db.flush()
    await db.refresh(invoice)
    return invoice


async def set_invoice_status(
    db: AsyncSession,
    invoice: Invoice,
    status: InvoiceStatus,
    paid_date: date | None = None,
) -> Invoice:
    invoice.status = status
    invoice.paid_date = paid_date
    if status == InvoiceStatus.CANCELLED:
        invoice.cancelled_at = utc_now()
    await db.flush()
    await db.refresh(invoice)
    return invoice


async def get_status_totals(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    issued_from: date | None = None,
    issued_to: date | None = None,
) -> list[tuple[InvoiceStatus, int, Decimal | None, Decimal | None]]:
    """Rows of (status, count, sum(amount), sum(late_fee))."""
    filters = [
        Invoice.account_id == account_id,
        Invoice.company_id == company_id,
    ]
    if issued_from:
        filters.append(Invoice.issue_date >= issued_from)
    if issued_to:
        filters.append(Invoice.issue_date <= issued_to)

    result = await db.execute(
        select(
            Invoice.status,
            func.count(Invoice.id),
            func.sum(Invoice.amount),
            func.sum(Invoice.late_fee),
        )
        .where(and_(*filters))
        .group_by(Invoice.status)
    )
    return [tuple(row) for row in result.all()]


async def get_paid_income(
    db: AsyncSession,
    property_id: int,
    period_start: date,
    period_end: date,
    account_id: int,
    company_id: int,
) -> Decimal:
    """Sum of PAID invoice amounts for a property, by paid date (inclusive)."""
    result = await db.execute(
        select(func.coalesce(func.sum(Invoice.amount), 0)).where(
            and_(
                Invoice.account_id == account_id,
                Invoice.company_id == company_id,
                Invoice.property_id == property_id,
                Invoice.status == InvoiceStatus.PAID,
                Invoice.paid_date >= period_start,
                Invoice.paid_date <= period_end,
            )
        )
    )
    return Decimal(str(result.scalar_one()))


# ----- Payment transactions -----


async def get_payment_by_id(
    db: AsyncSession, payment_id: int, account_id: int, company_id: int
) -> PaymentTransaction | None:
    result = await db.execute(
        select(PaymentTransaction).where(
            and_(
                PaymentTransaction.id == payment_id,
                PaymentTransaction.account_id == account_id,
                PaymentTransaction.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_payments_by_invoice(
    db: AsyncSession, invoice_id: int, account_id: int, company_id: int
) -> list[PaymentTransaction]:
    result = await db.execute(
        select(PaymentTransaction)
        .where(
            and_(
                PaymentTransaction.invoice_id == invoice_id,
                PaymentTransaction.account_id == account_id,
                PaymentTransaction.company_id == company_id,
            )
        )
        .order_by(PaymentTransaction.paid_at, PaymentTransaction.id)
    )
    return list(result.scalars().all())


async def sum_succeeded_payments(
    db: AsyncSession, invoice_id: int, account_id: int, company_id: int
) -> Decimal:
    result = await db.execute(
        select(func.coalesce(func.sum(PaymentTransaction.amount), 0)).where(
            and_(
                PaymentTransaction.invoice_id == invoice_id,
                PaymentTransaction.account_id == account_id,
                PaymentTransaction.company_id == company_id,
                PaymentTransaction.status == PaymentStatus.SUCCEEDED,
            )
        )
    )
    return Decimal(str(result.scalar_one()))


async def create_payment(
    db: AsyncSession, account_id: int, company_id: int, **fields
) -> PaymentTransaction:
    payment = PaymentTransaction(
        account_id=account_id,
        company_id=company_id,
        id=await get_next_id_for_tenant(
            db, PaymentTransaction, account_id, company_id
        ),
        **fields,
    )
    db.add(payment)
    await db.flush()
    await db.refresh(payment)
    return payment


async def refund_payment(
    db: AsyncSession, payment: PaymentTransaction, amount: Decimal, reason: str | None
) -> PaymentTransaction:
    payment.status = PaymentStatus.REFUNDED
    payment.refunded_amount = amount
    payment.refunded_at = utc_now()
    payment.refund_reason = reason
    await db.flush()
    await db.refresh(payment)
    return payment
