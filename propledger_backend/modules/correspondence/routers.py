"""Correspondence API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, LeasingUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import crud, services
from .crud import template_crud
from .models import CorrespondenceStatus, CorrespondenceType
from .schemas import (
    CorrespondenceFailed,
    CorrespondenceResponse,
    GenerateCorrespondenceRequest,
    TemplateCreate,
    TemplateResponse,
    TemplateUpdate,
)

router = APIRouter(prefix="/correspondence", tags=["Correspondence"])


# ----- Templates -----


@router.get(
    "/templates", response_model=BaseResponse[PaginatedResponse[TemplateResponse]]
)
async def list_templates(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    template_type: CorrespondenceType | None = Query(None),
    is_active: bool | None = Query(None),
    search: str | None = Query(None),
):
    templates, total = await template_crud.get_multi(
        db,
        current_user.account_id,
        current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        search=search,
        filters={"template_type": template_type, "is_active": is_active},
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[TemplateResponse.model_validate(t) for t in templates],
            total=total,
            pagination=pagination,
        ),
    )


@router.get("/templates/{template_id}", response_model=BaseResponse[TemplateResponse])
async def get_template(
    template_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    template = await services.get_template(
        db, template_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, data=TemplateResponse.model_validate(template))


@router.post("/templates", response_model=BaseResponse[TemplateResponse])
async def create_template(
    data: TemplateCreate,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    template = await services.create_template(
        db, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Template created successfully",
        data=TemplateResponse.model_validate(template),
    )


@router.put("/templates/{template_id}", response_model=BaseResponse[TemplateResponse])
async def update_template(
    template_id: int,
    data: TemplateUpdate,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    template = await services.update_template(
        db, template_id, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Template updated successfully",
        data=TemplateResponse.model_validate(template),
    )


@router.delete("/templates/{template_id}", response_model=BaseResponse[None])
async def delete_template(
    template_id: int,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_template(
        db, template_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, message="Template deactivated successfully")


# ----- Correspondence -----


@router.get("", response_model=BaseResponse[PaginatedResponse[CorrespondenceResponse]])
async def list_correspondence(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    tenant_id: int | None = Query(None),
    status: CorrespondenceStatus | None = Query(None),
):
    items, total = await crud.get_correspondence(
        db,
        current_user.account_id,
        current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        tenant_id=tenant_id,
        status=status,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[CorrespondenceResponse.model_validate(c) for c in items],
            total=total,
            pagination=pagination,
        ),
    )


@router.post("/generate", response_model=BaseResponse[CorrespondenceResponse])
async def generate_correspondence(
    data: GenerateCorrespondenceRequest,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Render a template for a tenant and store the result as a draft."""
    correspondence = await services.generate_correspondence(
        db,
        data.template_id,
        data.tenant_id,
        data.variables,
        current_user.account_id,
        current_user.company_id,
    )
    return BaseResponse(
        success=True,
        message="Correspondence generated successfully",
        data=CorrespondenceResponse.model_validate(correspondence),
    )


@router.get("/{correspondence_id}", response_model=BaseResponse[CorrespondenceResponse])
async def get_correspondence(
    correspondence_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    correspondence = await services.get_correspondence(
        db, correspondence_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True, data=CorrespondenceResponse.model_validate(correspondence)
    )


@router.post(
    "/{correspondence_id}/send", response_model=BaseResponse[CorrespondenceResponse]
)
async def send_correspondence(
    correspondence_id: int,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    correspondence = await services.mark_sent(
        db,
        correspondence_id,
        current_user.id,
        current_user.account_id,
        current_user.company_id,
    )
    return BaseResponse(
        success=True,
        message="Correspondence marked as sent",
        data=CorrespondenceResponse.model_validate(correspondence),
    )


@router.post(
    "/{correspondence_id}/failed", response_model=BaseResponse[CorrespondenceResponse]
)
async def fail_correspondence(
    correspondence_id: int,
    data: CorrespondenceFailed,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    correspondence = await services.mark_failed(
        db,
        correspondence_id,
        data.reason,
        current_user.account_id,
        current_user.company_id,
    )
    return BaseResponse(
        success=True,
        message="Correspondence marked as failed",
        data=CorrespondenceResponse.model_validate(correspondence),
    )


@router.delete("/{correspondence_id}", response_model=BaseResponse[None])
async def delete_correspondence(
    correspondence_id: int,
    current_user: LeasingUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_correspondence(
        db, correspondence_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, message="Correspondence deleted successfully")
