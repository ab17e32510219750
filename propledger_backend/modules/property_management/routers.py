"""Property management API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, ManagerUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import crud, services
from .models import PropertyStatus, UnitStatus
from .schemas import (
    PropertyCreate,
    PropertyResponse,
    PropertyUpdate,
    PropertyWithUnitsResponse,
    UnitCreate,
    UnitResponse,
    UnitUpdate,
)

router = APIRouter(prefix="/properties", tags=["Properties"])
units_router = APIRouter(prefix="/units", tags=["Units"])


# ----- Properties -----


@router.get("", response_model=BaseResponse[PaginatedResponse[PropertyResponse]])
async def list_properties(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    status: PropertyStatus | None = Query(None),
    usage_type: str | None = Query(None),
    country: str | None = Query(None),
    search: str | None = Query(None),
):
    """Get properties with pagination and filtering."""
    properties, total = await crud.get_properties(
        db=db,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        status=status,
        usage_type=usage_type,
        country=country,
        search=search,
    )

    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[PropertyResponse.model_validate(p) for p in properties],
            total=total,
            pagination=pagination,
        ),
    )


@router.get("/{property_id}", response_model=BaseResponse[PropertyWithUnitsResponse])
async def get_property(
    property_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a property with its units."""
    property_obj = await services.get_property(
        db,
        property_id,
        current_user.account_id,
        current_user.company_id,
        include_units=True,
    )
    return BaseResponse(
        success=True,
        data=PropertyWithUnitsResponse.model_validate(property_obj),
    )


@router.post("", response_model=BaseResponse[PropertyResponse])
async def create_property(
    data: PropertyCreate,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    property_obj = await services.create_property(
        db=db,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        data=data,
    )
    return BaseResponse(
        success=True,
        message="Property created successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.put("/{property_id}", response_model=BaseResponse[PropertyResponse])
async def update_property(
    property_id: int,
    data: PropertyUpdate,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    property_obj = await services.update_property(
        db=db,
        property_id=property_id,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        data=data,
    )
    return BaseResponse(
        success=True,
        message="Property updated successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.delete("/{property_id}", response_model=BaseResponse[None])
async def delete_property(
    property_id: int,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Soft-delete a property with no active units."""
    await services.delete_property(
        db=db,
        property_id=property_id,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
    )
    return BaseResponse(success=True, message="Property deleted successfully")


@router.get(
    "/{property_id}/units",
    response_model=BaseResponse[PaginatedResponse[UnitResponse]],
)
async def list_property_units(
    property_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    status: UnitStatus | None = Query(None),
):
    await services.get_property(
        db, property_id, current_user.account_id, current_user.company_id
    )
    units, total = await crud.get_units_by_property(
        db=db,
        property_id=property_id,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        status=status,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[UnitResponse.model_validate(u) for u in units],
            total=total,
            pagination=pagination,
        ),
    )


# ----- Units -----


@units_router.get("/{unit_id}", response_model=BaseResponse[UnitResponse])
async def get_unit(
    unit_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    unit = await services.get_unit(
        db, unit_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, data=UnitResponse.model_validate(unit))


@units_router.post("", response_model=BaseResponse[UnitResponse])
async def create_unit(
    data: UnitCreate,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    unit = await services.create_unit(
        db=db,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        data=data,
    )
    return BaseResponse(
        success=True,
        message="Unit created successfully",
        data=UnitResponse.model_validate(unit),
    )


@units_router.put("/{unit_id}", response_model=BaseResponse[UnitResponse])
async def update_unit(
    unit_id: int,
    data: UnitUpdate,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    unit = await services.update_unit(
        db=db,
        unit_id=unit_id,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        data=data,
    )
    return BaseResponse(
        success=True,
        message="Unit updated successfully",
        data=UnitResponse.model_validate(unit),
    )


@units_router.delete("/{unit_id}", response_model=BaseResponse[None])
async def delete_unit(
    unit_id: int,
    current_user: ManagerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete a unit that is not occupied."""
    await services.delete_unit(
        db=db,
        unit_id=unit_id,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
    )
    return BaseResponse(success=True, message="Unit deleted successfully")
