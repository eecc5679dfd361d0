from fastapi import APIRouter, Depends, Request
from app.config.permissions_config import SUPPORT_ROLES
from app.core.dependencies import Principal, get_current_principal, require_permission, require_role, client_ip
from app.database.supabase_client import get_supabase
from app.modules.activity.routes import get_activity_service
from app.modules.activity.service import ActivityService
from app.modules.tickets.schemas import (
    TicketCreate, TicketUpdate, TicketResponse, TicketMessageCreate, TicketMessageResponse
)
from app.modules.tickets.service import TicketService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/tickets", tags=["tickets"])


def get_ticket_service(
    principal: Principal = Depends(get_current_principal),
    supabase: Client = Depends(get_supabase)
) -> TicketService:
    return TicketService(supabase, principal.id, is_support=principal.has_role(SUPPORT_ROLES))


@router.post("", response_model=TicketResponse, status_code=201)
async def create_ticket(
    request: Request,
    ticket_data: TicketCreate,
    principal: Principal = Depends(require_permission("tickets.create")),
    service: TicketService = Depends(get_ticket_service),
    activity: ActivityService = Depends(get_activity_service)
):
    ticket = service.create_ticket(ticket_data)
    activity.log(principal.id, "ticket_created", {"ticket_id": ticket.id}, client_ip(request))
    return ticket


@router.get("", response_model=List[TicketResponse])
async def list_tickets(
    status: Optional[str] = None,
    assigned_to: Optional[int] = None,
    limit: int = 50,
    offset: int = 0,
    service: TicketService = Depends(get_ticket_service)
):
    """Own tickets, or every ticket for support staff"""
    return service.list_tickets(status=status, assigned_to=assigned_to, limit=limit, offset=offset)


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    return service.get_ticket(ticket_id)


@router.put("/{ticket_id}", response_model=TicketResponse)
async def update_ticket(
    ticket_id: int,
    ticket_data: TicketUpdate,
    principal: Principal = Depends(require_role(SUPPORT_ROLES)),
    service: TicketService = Depends(get_ticket_service)
):
    return service.update_ticket(ticket_id, ticket_data)


@router.post("/{ticket_id}/close", response_model=TicketResponse)
async def close_ticket(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    return service.close_ticket(ticket_id)


@router.get("/{ticket_id}/messages", response_model=List[TicketMessageResponse])
async def list_messages(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    return service.list_messages(ticket_id)


@router.post("/{ticket_id}/messages", response_model=TicketMessageResponse, status_code=201)
async def add_message(
    ticket_id: int,
    message_data: TicketMessageCreate,
    service: TicketService = Depends(get_ticket_service)
):
    return service.add_message(ticket_id, message_data)
