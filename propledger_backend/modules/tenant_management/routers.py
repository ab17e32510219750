"""Tenant management API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, LeasingUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import crud, services
from .models import TenantStatus, TenantType
from .schemas import (
    PortalTokenResponse,
    PortalView,
    TenantCreate,
    TenantResponse,
    TenantUpdate,
)

router = APIRouter(prefix="/tenants", tags=["Tenants"])
portal_router = APIRouter(prefix="/tenant-portal", tags=["Tenant Portal"])


@router.get("", response_model=BaseResponse[PaginatedResponse[TenantResponse]])
async def list_tenants(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    tenant_type: TenantType | None = Query(None),
    status: TenantStatus | None = Query(None),
    search: str | None = Query(None),
):
    tenants, total = await crud.get_tenants(
        db=db,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        tenant_type=tenant_type,
        status=status,
        search=search,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[TenantResponse.model_validate(t) for t in tenants],
            total=total,
            pagination=pagination,
        ),
    )


@router.get("/{tenant_id}", response_model=BaseResponse[TenantResponse])
async def get_tenant(
    tenant_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    tenant = await services.get_tenant(
        db, tenant_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, data=TenantResponse.model_validate(tenant))


@router.post("", response_model=BaseResponse[TenantResponse])
async def create_tenant(
    data: TenantCreate,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    tenant = await services.create_tenant(
        db, current_user.account_id, current_user.company_id, data
    )
    return BaseResponse(
        success=True,
        message="Tenant created successfully",
        data=TenantResponse.model_validate(tenant),
    )


@router.put("/{tenant_id}", response_model=BaseResponse[TenantResponse])
async def update_tenant(
    tenant_id: int,
    data: TenantUpdate,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    tenant = await services.update_tenant(
        db, tenant_id, current_user.account_id, current_user.company_id, data
    )
    return BaseResponse(
        success=True,
        message="Tenant updated successfully",
        data=TenantResponse.model_validate(tenant),
    )


@router.delete("/{tenant_id}", response_model=BaseResponse[None])
async def delete_tenant(
    tenant_id: int,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_tenant(
        db, tenant_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, message="Tenant deleted successfully")


@router.post(
    "/{tenant_id}/portal-token", response_model=BaseResponse[PortalTokenResponse]
)
async def create_portal_token(
    tenant_id: int,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Issue a portal link token. It is shown once and stored hashed."""
    token, expires_at = await services.create_portal_token(
        db, tenant_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Portal access created",
        data=PortalTokenResponse(token=token, expires_at=expires_at),
    )


@router.delete("/{tenant_id}/portal-token", response_model=BaseResponse[None])
async def revoke_portal_access(
    tenant_id: int,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    count = await services.revoke_portal_access(
        db, tenant_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, message=f"{count} portal link(s) revoked")


# ----- Portal (no bearer token) -----


@portal_router.get("/{token}", response_model=BaseResponse[PortalView])
async def view_portal(token: str, db: Annotated[AsyncSession, Depends(get_db)]):
    """Tenant-facing read-only view, authorised by the link token alone."""
    view = await services.get_portal_view(db, token)
    return BaseResponse(success=True, data=view)
