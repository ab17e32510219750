"""Report API routes."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import month_bounds, today
from ...database import get_db
from ..auth.dependencies import FinanceUser
from ..commons import BaseResponse
from . import services
from .schemas import FinancialReport, RentRoll, TaxReport

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/financial", response_model=BaseResponse[FinancialReport])
async def financial_report(
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    period_start: date | None = Query(None, description="Defaults to this month"),
    period_end: date | None = Query(None, description="Defaults to this month"),
):
    month_start, month_end = month_bounds(today().year, today().month)
    report = await services.generate_financial_report(
        db,
        current_user.account_id,
        current_user.company_id,
        period_start or month_start,
        period_end or month_end,
    )
    return BaseResponse(success=True, data=report)


@router.get("/tax", response_model=BaseResponse[TaxReport])
async def tax_report(
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    year: int | None = Query(None, ge=2000, le=2100),
):
    report = await services.generate_tax_report(
        db, current_user.account_id, current_user.company_id, year=year
    )
    return BaseResponse(success=True, data=report)


@router.get("/rent-roll", response_model=BaseResponse[RentRoll])
async def rent_roll(
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    as_of: date | None = Query(None),
):
    report = await services.generate_rent_roll(
        db, current_user.account_id, current_user.company_id, as_of=as_of
    )
    return BaseResponse(success=True, data=report)
