"""Owner and property-ownership API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, ManagerUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import services
from .crud import owner_crud
from .schemas import (
    OwnerCreate,
    OwnerResponse,
    OwnerUpdate,
    PropertyOwnerCreate,
    PropertyOwnerResponse,
    PropertyOwnersReplace,
    PropertyOwnerUpdate,
)

router = APIRouter(prefix="/owners", tags=["Owners"])
property_owners_router = APIRouter(
    prefix="/properties/{property_id}/owners", tags=["Owners"]
)


@router.get("", response_model=BaseResponse[PaginatedResponse[OwnerResponse]])
async def list_owners(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    search: str | None = Query(None),
    is_active: bool | None = Query(True),
):
    owners, total = await owner_crud.get_multi(
        db,
        current_user.account_id,
        current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        search=search,
        filters={"is_active": is_active},
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[OwnerResponse.model_validate(o) for o in owners],
            total=total,
            pagination=pagination,
        ),
    )


@router.get("/{owner_id}", response_model=BaseResponse[OwnerResponse])
async def get_owner(
    owner_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    owner = await services.get_owner(
        db, owner_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, data=OwnerResponse.model_validate(owner))


@router.post("", response_model=BaseResponse[OwnerResponse])
async def create_owner(
    data: OwnerCreate,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    owner = await services.create_owner(
        db, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Owner created successfully",
        data=OwnerResponse.model_validate(owner),
    )


@router.put("/{owner_id}", response_model=BaseResponse[OwnerResponse])
async def update_owner(
    owner_id: int,
    data: OwnerUpdate,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    owner = await services.update_owner(
        db, owner_id, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Owner updated successfully",
        data=OwnerResponse.model_validate(owner),
    )


@router.delete("/{owner_id}", response_model=BaseResponse[None])
async def delete_owner(
    owner_id: int,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.deactivate_owner(
        db, owner_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, message="Owner deactivated")


# ----- Property ownership -----


@property_owners_router.get(
    "", response_model=BaseResponse[list[PropertyOwnerResponse]]
)
async def list_property_owners(
    property_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    links = await services.list_property_owners(
        db, property_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        data=[PropertyOwnerResponse.model_validate(link) for link in links],
    )


@property_owners_router.post("", response_model=BaseResponse[PropertyOwnerResponse])
async def add_property_owner(
    property_id: int,
    data: PropertyOwnerCreate,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    link = await services.add_property_owner(
        db, property_id, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Owner added to property",
        data=PropertyOwnerResponse.model_validate(link),
    )


@property_owners_router.put(
    "", response_model=BaseResponse[list[PropertyOwnerResponse]]
)
async def set_property_owners(
    property_id: int,
    data: PropertyOwnersReplace,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Replace every ownership share of a property at once."""
    links = await services.set_property_owners(
        db, property_id, data.owners, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Property ownership updated",
        data=[PropertyOwnerResponse.model_validate(link) for link in links],
    )


@property_owners_router.put(
    "/{owner_id}", response_model=BaseResponse[PropertyOwnerResponse]
)
async def update_property_owner(
    property_id: int,
    owner_id: int,
    data: PropertyOwnerUpdate,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    link = await services.update_property_owner(
        db,
        property_id,
        owner_id,
        data.ownership_percentage,
        current_user.account_id,
        current_user.company_id,
    )
    return BaseResponse(
        success=True,
        message="Ownership share updated",
        data=PropertyOwnerResponse.model_validate(link),
    )


@property_owners_router.delete("/{owner_id}", response_model=BaseResponse[None])
async def remove_property_owner(
    property_id: int,
    owner_id: int,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.remove_property_owner(
        db, property_id, owner_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, message="Owner removed from property")
