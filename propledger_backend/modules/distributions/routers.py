"""Income distribution API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, FinanceUser
from ..commons import BaseResponse
from . import services
from .schemas import (
    DistributionRequest,
    DistributionResponse,
    LedgerDistributionRequest,
    NotifyResult,
    TaxSummaryResponse,
)

router = APIRouter(prefix="/distributions", tags=["Distributions"])


@router.post("", response_model=BaseResponse[DistributionResponse])
async def create_distribution(
    data: DistributionRequest,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    response: Response,
):
    """Calculate a distribution from the given figures.

    With ``save=false`` nothing is stored and the result is a preview.
    """
    result = services.calculate_from_request(data, current_user.id)
    if not data.save:
        return BaseResponse(
            success=True,
            message="Distribution preview",
            data=services.preview_response(result),
        )

    distribution = await services.save_distribution(
        db, result, current_user.account_id, current_user.company_id
    )
    response.status_code = status.HTTP_201_CREATED
    return BaseResponse(
        success=True,
        message="Distribution saved successfully",
        data=DistributionResponse.model_validate(distribution),
    )


@router.post("/from-ledger", response_model=BaseResponse[DistributionResponse])
async def create_distribution_from_ledger(
    data: LedgerDistributionRequest,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    response: Response,
):
    """Calculate a distribution from paid invoices, expenses and ownership."""
    result = await services.calculate_from_ledger(
        db,
        data.property_id,
        data.period_start,
        data.period_end,
        current_user.account_id,
        current_user.company_id,
        tax_mode=data.tax_mode,
        calculated_by=current_user.id,
        currency=data.currency,
        notes=data.notes,
    )
    if not data.save:
        return BaseResponse(
            success=True,
            message="Distribution preview",
            data=services.preview_response(result),
        )

    distribution = await services.save_distribution(
        db, result, current_user.account_id, current_user.company_id
    )
    response.status_code = status.HTTP_201_CREATED
    return BaseResponse(
        success=True,
        message="Distribution saved successfully",
        data=DistributionResponse.model_validate(distribution),
    )


@router.get("", response_model=BaseResponse[list[DistributionResponse]])
async def list_distributions(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    property_id: int = Query(...),
    year: int | None = Query(None, ge=1900, le=9999),
):
    distributions = await services.get_distribution_history(
        db,
        property_id,
        current_user.account_id,
        current_user.company_id,
        year=year,
    )
    return BaseResponse(
        success=True,
        data=[DistributionResponse.model_validate(d) for d in distributions],
    )


@router.get("/tax-summary", response_model=BaseResponse[TaxSummaryResponse])
async def tax_summary(
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner_id: int = Query(...),
    year: int | None = Query(None, ge=1900, le=9999),
    country: str | None = Query(None, description="PT/Portugal or ES/Spain"),
):
    """Annual tax summary for an owner; defaults to the previous year."""
    summary, tax_form = await services.get_owner_tax_report(
        db,
        owner_id,
        current_user.account_id,
        current_user.company_id,
        year=year,
        country=country,
    )
    return BaseResponse(
        success=True,
        data=TaxSummaryResponse(summary=summary, tax_form=tax_form),
    )


@router.get("/{distribution_id}", response_model=BaseResponse[DistributionResponse])
async def get_distribution(
    distribution_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    distribution = await services.get_distribution(
        db, distribution_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True, data=DistributionResponse.model_validate(distribution)
    )


@router.post("/{distribution_id}/notify", response_model=BaseResponse[NotifyResult])
async def notify_owners(
    distribution_id: int,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Record that owners have been sent their statements."""
    notified = await services.mark_shares_notified(
        db, distribution_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Owners notified",
        data=NotifyResult(distribution_id=distribution_id, notified=notified),
    )
