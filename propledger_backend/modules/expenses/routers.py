"""Expense API routes."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, FinanceUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import services
from .crud import expense_crud
from .models import ExpenseCategory
from .schemas import ExpenseCreate, ExpenseResponse, ExpenseTotals, ExpenseUpdate

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.get("", response_model=BaseResponse[PaginatedResponse[ExpenseResponse]])
async def list_expenses(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    property_id: int | None = Query(None),
    category: ExpenseCategory | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    search: str | None = Query(None),
):
    expenses, total = await expense_crud.get_multi(
        db,
        current_user.account_id,
        current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        search=search,
        filters={"property_id": property_id, "category": category},
        date_from=date_from,
        date_to=date_to,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[ExpenseResponse.model_validate(e) for e in expenses],
            total=total,
            pagination=pagination,
        ),
    )


@router.get("/totals", response_model=BaseResponse[ExpenseTotals])
async def expense_totals(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    property_id: int = Query(...),
    period_start: date = Query(...),
    period_end: date = Query(...),
):
    """Expense totals for a property, by category."""
    totals = await services.get_expense_totals(
        db,
        property_id,
        period_start,
        period_end,
        current_user.account_id,
        current_user.company_id,
    )
    return BaseResponse(success=True, data=totals)


@router.get("/{expense_id}", response_model=BaseResponse[ExpenseResponse])
async def get_expense(
    expense_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    expense = await services.get_expense(
        db, expense_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, data=ExpenseResponse.model_validate(expense))


@router.post("", response_model=BaseResponse[ExpenseResponse])
async def create_expense(
    data: ExpenseCreate,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    expense = await services.create_expense(
        db, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Expense recorded successfully",
        data=ExpenseResponse.model_validate(expense),
    )


@router.put("/{expense_id}", response_model=BaseResponse[ExpenseResponse])
async def update_expense(
    expense_id: int,
    data: ExpenseUpdate,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    expense = await services.update_expense(
        db, expense_id, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Expense updated successfully",
        data=ExpenseResponse.model_validate(expense),
    )


@router.delete("/{expense_id}", response_model=BaseResponse[None])
async def delete_expense(
    expense_id: int,
    current_user: FinanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_expense(
        db, expense_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, message="Expense deleted successfully")
