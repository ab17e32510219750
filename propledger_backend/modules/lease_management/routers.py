"""Lease management API routes."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, LeasingUser, ManagerUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import crud, services
from .models import LeaseStatus
from .schemas import (
    LeaseCreate,
    LeaseExpiryResult,
    LeaseRenewRequest,
    LeaseResponse,
    LeaseTerminateRequest,
    LeaseUpdate,
)

router = APIRouter(prefix="/leases", tags=["Leases"])


@router.get("", response_model=BaseResponse[PaginatedResponse[LeaseResponse]])
async def list_leases(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    property_id: int | None = Query(None),
    unit_id: int | None = Query(None),
    tenant_id: int | None = Query(None),
    status: LeaseStatus | None = Query(None),
    search: str | None = Query(None),
):
    """Get leases with pagination and filtering."""
    leases, total = await crud.get_leases(
        db=db,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        property_id=property_id,
        unit_id=unit_id,
        tenant_id=tenant_id,
        status=status,
        search=search,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[LeaseResponse.model_validate(lease) for lease in leases],
            total=total,
            pagination=pagination,
        ),
    )


@router.get("/expiring", response_model=BaseResponse[list[LeaseResponse]])
async def list_expiring_leases(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    within_days: int = Query(60, ge=1, le=730),
):
    """Active leases ending within the given number of days."""
    leases = await services.get_expiring_leases(
        db, current_user.account_id, current_user.company_id, within_days=within_days
    )
    return BaseResponse(
        success=True,
        data=[LeaseResponse.model_validate(lease) for lease in leases],
    )


@router.post("/expire", response_model=BaseResponse[LeaseExpiryResult])
async def expire_leases(
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    as_of: date | None = Query(None),
):
    """Expire (or auto-renew) active leases past their end date."""
    result = await services.expire_leases(
        db, current_user.account_id, current_user.company_id, as_of=as_of
    )
    return BaseResponse(
        success=True,
        message=f"{result.expired} lease(s) expired, {result.renewed} renewed",
        data=result,
    )


@router.get("/{lease_id}", response_model=BaseResponse[LeaseResponse])
async def get_lease(
    lease_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    lease = await services.get_lease(
        db, lease_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, data=LeaseResponse.model_validate(lease))


@router.post("", response_model=BaseResponse[LeaseResponse])
async def create_lease(
    data: LeaseCreate,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    lease = await services.create_lease(
        db, current_user.account_id, current_user.company_id, data
    )
    return BaseResponse(
        success=True,
        message="Lease created successfully",
        data=LeaseResponse.model_validate(lease),
    )


@router.put("/{lease_id}", response_model=BaseResponse[LeaseResponse])
async def update_lease(
    lease_id: int,
    data: LeaseUpdate,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    lease = await services.update_lease(
        db, lease_id, current_user.account_id, current_user.company_id, data
    )
    return BaseResponse(
        success=True,
        message="Lease updated successfully",
        data=LeaseResponse.model_validate(lease),
    )


@router.post("/{lease_id}/activate", response_model=BaseResponse[LeaseResponse])
async def activate_lease(
    lease_id: int,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    lease = await services.activate_lease(
        db, lease_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Lease activated successfully",
        data=LeaseResponse.model_validate(lease),
    )


@router.post("/{lease_id}/terminate", response_model=BaseResponse[LeaseResponse])
async def terminate_lease(
    lease_id: int,
    data: LeaseTerminateRequest,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    lease = await services.terminate_lease(
        db,
        lease_id,
        current_user.account_id,
        current_user.company_id,
        reason=data.reason,
        termination_date=data.termination_date,
    )
    return BaseResponse(
        success=True,
        message="Lease terminated successfully",
        data=LeaseResponse.model_validate(lease),
    )


@router.post("/{lease_id}/renew", response_model=BaseResponse[LeaseResponse])
async def renew_lease(
    lease_id: int,
    data: LeaseRenewRequest,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    lease = await services.renew_lease(
        db,
        lease_id,
        current_user.account_id,
        current_user.company_id,
        new_end_date=data.new_end_date,
        new_monthly_rent=data.new_monthly_rent,
    )
    return BaseResponse(
        success=True,
        message="Lease renewed successfully",
        data=LeaseResponse.model_validate(lease),
    )


@router.delete("/{lease_id}", response_model=BaseResponse[None])
async def delete_lease(
    lease_id: int,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_lease(
        db, lease_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, message="Lease deleted successfully")
