"""Billing API routes: invoices and payments."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, FinanceUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import crud, services
from .models import InvoiceStatus
from .payment_methods import available_payment_methods
from .schemas import (
    InvoiceCreate,
    InvoiceMarkPaid,
    InvoiceResponse,
    InvoiceSummary,
    InvoiceUpdate,
    LateFeeRunResult,
    MonthlyInvoiceRequest,
    MonthlyInvoiceResult,
    PaymentCreate,
    PaymentMethodsResponse,
    PaymentResponse,
    RefundRequest,
)

router = APIRouter(prefix="/invoices", tags=["Invoices"])
payments_router = APIRouter(prefix="/payments", tags=["Payments"])


# ----- Invoices -----


@router.get("", response_model=BaseResponse[PaginatedResponse[InvoiceResponse]])
async def list_invoices(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    status: InvoiceStatus | None = Query(None),
    tenant_id: int | None = Query(None),
    property_id: int | None = Query(None),
    lease_id: int | None = Query(None),
    due_from: date | None = Query(None),
    due_to: date | None = Query(None),
    search: str | None = Query(None),
):
    """Get invoices with pagination and filtering."""
    invoices, total = await crud.get_invoices(
        db=db,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        status=status,
        tenant_id=tenant_id,
        property_id=property_id,
        lease_id=lease_id,
        due_from=due_from,
        due_to=due_to,
        search=search,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[InvoiceResponse.model_validate(i) for i in invoices],
            total=total,
            pagination=pagination,
        ),
    )


@router.get("/summary", response_model=BaseResponse[InvoiceSummary])
async def invoice_summary(
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    issued_from: date | None = Query(None),
    issued_to: date | None = Query(None),
):
    summary = await services.get_invoice_summary(
        db,
        current_user.account_id,
        current_user.company_id,
        issued_from=issued_from,
        issued_to=issued_to,
    )
    return BaseResponse(success=True, data=summary)


@router.post("/late-fees", response_model=BaseResponse[LateFeeRunResult])
async def apply_late_fees(
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    as_of: date | None = Query(None),
):
    """Charge late fees on overdue invoices using the configured policy."""
    result = await services.apply_late_fees(
        db, current_user.account_id, current_user.company_id, as_of=as_of
    )
    return BaseResponse(
        success=True,
        message=f"Late fees applied to {result.fees_applied} invoice(s)",
        data=result,
    )


@router.post("/generate", response_model=BaseResponse[MonthlyInvoiceResult])
async def generate_monthly_invoices(
    data: MonthlyInvoiceRequest,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Generate the month's rent invoices for every active lease."""
    result = await services.generate_monthly_invoices(
        db,
        current_user.account_id,
        current_user.company_id,
        year=data.year,
        month=data.month,
        due_day=data.due_day,
    )
    return BaseResponse(
        success=True,
        message=f"{len(result.created)} invoice(s) created, {result.skipped} skipped",
        data=result,
    )


@router.get("/{invoice_id}", response_model=BaseResponse[InvoiceResponse])
async def get_invoice(
    invoice_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    invoice = await services.get_invoice(
        db, invoice_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, data=InvoiceResponse.model_validate(invoice))


@router.post("", response_model=BaseResponse[InvoiceResponse])
async def create_invoice(
    data: InvoiceCreate,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    invoice = await services.create_invoice(
        db, current_user.account_id, current_user.company_id, data
    )
    return BaseResponse(
        success=True,
        message="Invoice created successfully",
        data=InvoiceResponse.model_validate(invoice),
    )


@router.put("/{invoice_id}", response_model=BaseResponse[InvoiceResponse])
async def update_invoice(
    invoice_id: int,
    data: InvoiceUpdate,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    invoice = await services.update_invoice(
        db, invoice_id, current_user.account_id, current_user.company_id, data
    )
    return BaseResponse(
        success=True,
        message="Invoice updated successfully",
        data=InvoiceResponse.model_validate(invoice),
    )


@router.post("/{invoice_id}/cancel", response_model=BaseResponse[InvoiceResponse])
async def cancel_invoice(
    invoice_id: int,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    invoice = await services.cancel_invoice(
        db, invoice_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Invoice cancelled",
        data=InvoiceResponse.model_validate(invoice),
    )


@router.post("/{invoice_id}/pay", response_model=BaseResponse[InvoiceResponse])
async def mark_invoice_paid(
    invoice_id: int,
    data: InvoiceMarkPaid,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    invoice = await services.mark_as_paid(
        db,
        invoice_id,
        current_user.account_id,
        current_user.company_id,
        paid_date=data.paid_date,
    )
    return BaseResponse(
        success=True,
        message="Invoice marked as paid",
        data=InvoiceResponse.model_validate(invoice),
    )


@router.get(
    "/{invoice_id}/payments", response_model=BaseResponse[list[PaymentResponse]]
)
async def list_invoice_payments(
    invoice_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    payments = await services.list_payments(
        db, invoice_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True, data=[PaymentResponse.model_validate(p) for p in payments]
    )


@router.post("/{invoice_id}/payments", response_model=BaseResponse[PaymentResponse])
async def record_payment(
    invoice_id: int,
    data: PaymentCreate,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Record a payment received for an invoice."""
    payment, invoice = await services.record_payment(
        db, invoice_id, current_user.account_id, current_user.company_id, data
    )
    return BaseResponse(
        success=True,
        message=f"Payment recorded; invoice is {invoice.status.value}",
        data=PaymentResponse.model_validate(payment),
    )


# ----- Payments -----


@payments_router.get("/methods", response_model=BaseResponse[PaymentMethodsResponse])
async def payment_methods(
    current_user: CurrentUser,
    country: str = Query("PT", description="ISO code or country name"),
):
    return BaseResponse(
        success=True,
        data=PaymentMethodsResponse(
            country=country, methods=available_payment_methods(country)
        ),
    )


@payments_router.post(
    "/{payment_id}/refund", response_model=BaseResponse[PaymentResponse]
)
async def refund_payment(
    payment_id: int,
    data: RefundRequest,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    payment = await services.refund_payment(
        db,
        payment_id,
        current_user.account_id,
        current_user.company_id,
        amount=data.amount,
        reason=data.reason,
    )
    return BaseResponse(
        success=True,
        message="Payment refunded",
        data=PaymentResponse.model_validate(payment),
    )
