"""Maintenance ticket API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, MaintenanceUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import crud, services
from .models import MaintenancePriority, MaintenanceStatus
from .schemas import TicketCreate, TicketResponse, TicketStatusChange, TicketUpdate

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


@router.get("", response_model=BaseResponse[PaginatedResponse[TicketResponse]])
async def list_tickets(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    status: MaintenanceStatus | None = Query(None),
    priority: MaintenancePriority | None = Query(None),
    property_id: int | None = Query(None),
    unit_id: int | None = Query(None),
    tenant_id: int | None = Query(None),
    search: str | None = Query(None),
):
    tickets, total = await crud.get_tickets(
        db=db,
        account_id=current_user.account_id,
        company_id=current_user.company_id,
        skip=pagination.offset,
        limit=pagination.page_size,
        status=status,
        priority=priority,
        property_id=property_id,
        unit_id=unit_id,
        tenant_id=tenant_id,
        search=search,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[TicketResponse.model_validate(t) for t in tickets],
            total=total,
            pagination=pagination,
        ),
    )


@router.get("/{ticket_id}", response_model=BaseResponse[TicketResponse])
async def get_ticket(
    ticket_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    ticket = await services.get_ticket(
        db, ticket_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, data=TicketResponse.model_validate(ticket))


@router.post("", response_model=BaseResponse[TicketResponse])
async def create_ticket(
    data: TicketCreate,
    current_user: MaintenanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    ticket = await services.create_ticket(
        db, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Maintenance ticket created",
        data=TicketResponse.model_validate(ticket),
    )


@router.put("/{ticket_id}", response_model=BaseResponse[TicketResponse])
async def update_ticket(
    ticket_id: int,
    data: TicketUpdate,
    current_user: MaintenanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    ticket = await services.update_ticket(
        db, ticket_id, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message="Maintenance ticket updated",
        data=TicketResponse.model_validate(ticket),
    )


@router.post("/{ticket_id}/status", response_model=BaseResponse[TicketResponse])
async def change_ticket_status(
    ticket_id: int,
    data: TicketStatusChange,
    current_user: MaintenanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    ticket = await services.change_status(
        db, ticket_id, data, current_user.account_id, current_user.company_id
    )
    return BaseResponse(
        success=True,
        message=f"Ticket is now {ticket.status.value}",
        data=TicketResponse.model_validate(ticket),
    )


@router.delete("/{ticket_id}", response_model=BaseResponse[None])
async def delete_ticket(
    ticket_id: int,
    current_user: MaintenanceUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_ticket(
        db, ticket_id, current_user.account_id, current_user.company_id
    )
    return BaseResponse(success=True, message="Maintenance ticket deleted")
