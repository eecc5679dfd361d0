from supabase import Client
from app.modules.auth.service import utcnow_iso
from app.modules.tickets.schemas import (
    TicketCreate, TicketUpdate, TicketResponse, TicketMessageCreate, TicketMessageResponse
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class TicketService:
    """
    Support tickets. Students see their own tickets; support staff see all of
    them, including internal messages.
    """

    def __init__(self, supabase: Client, user_id: int, is_support: bool = False):
        self.supabase = supabase
        self.user_id = user_id
        self.is_support = is_support

    def _visible_ticket(self, ticket_id: int) -> Dict[str, Any]:
        query = self.supabase.table("tickets")\
            .select("*")\
            .eq("id", ticket_id)
        if not self.is_support:
            query = query.eq("user_id", self.user_id)
        result = query.limit(1).execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return result.data[0]

    def _set_status(self, ticket_id: int, status: str) -> None:
        self.supabase.table("tickets")\
            .update({"status": status, "updated_at": utcnow_iso()})\
            .eq("id", ticket_id)\
            .execute()

    def create_ticket(self, ticket_data: TicketCreate) -> TicketResponse:
        try:
            now = utcnow_iso()
            values = ticket_data.model_dump()
            values.update({"user_id": self.user_id, "status": "open", "created_at": now, "updated_at": now})
            result = self.supabase.table("tickets").insert(values).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create ticket")
            logger.info(f"Ticket {result.data[0]['id']} opened by user {self.user_id}")
            return TicketResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating ticket for user {self.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create ticket")

    def list_tickets(
        self,
        status: Optional[str] = None,
        assigned_to: Optional[int] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[TicketResponse]:
        try:
            query = self.supabase.table("tickets").select("*")
            if not self.is_support:
                query = query.eq("user_id", self.user_id)
            if status:
                query = query.eq("status", status)
            if assigned_to is not None:
                query = query.eq("assigned_to", assigned_to)
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [TicketResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing tickets: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch tickets")

    def get_ticket(self, ticket_id: int) -> TicketResponse:
        try:
            return TicketResponse(**self._visible_ticket(ticket_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch ticket")

    def update_ticket(self, ticket_id: int, ticket_data: TicketUpdate) -> TicketResponse:
        """Support-only: change status, priority or assignee"""
        ticket = self._visible_ticket(ticket_id)
        update_data = ticket_data.model_dump(exclude_unset=True)
        if not update_data:
            return TicketResponse(**ticket)
        update_data["updated_at"] = utcnow_iso()
        try:
            result = self.supabase.table("tickets")\
                .update(update_data)\
                .eq("id", ticket_id)\
                .execute()
            return TicketResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error updating ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update ticket")

    def close_ticket(self, ticket_id: int) -> TicketResponse:
        self._visible_ticket(ticket_id)
        try:
            self._set_status(ticket_id, "closed")
            return self.get_ticket(ticket_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error closing ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to close ticket")

    def list_messages(self, ticket_id: int) -> List[TicketMessageResponse]:
        self._visible_ticket(ticket_id)
        try:
            query = self.supabase.table("ticket_messages")\
                .select("*")\
                .eq("ticket_id", ticket_id)
            if not self.is_support:
                query = query.eq("is_internal", False)
            result = query.order("created_at").execute()
            return [TicketMessageResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing messages of ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch messages")

    def add_message(self, ticket_id: int, message_data: TicketMessageCreate) -> TicketMessageResponse:
        """
        Post a message. A public support reply marks the ticket as responded; a
        reply from the owner on a responded ticket reopens it.
        """
        ticket = self._visible_ticket(ticket_id)
        if ticket["status"] == "closed":
            raise HTTPException(status_code=400, detail="Ticket is closed")
        if message_data.is_internal and not self.is_support:
            raise HTTPException(status_code=403, detail="Only support can post internal notes")
        try:
            result = self.supabase.table("ticket_messages").insert({
                "ticket_id": ticket_id,
                "user_id": self.user_id,
                "message": message_data.message,
                "is_internal": message_data.is_internal
            }).execute()

            if self.is_support and ticket["user_id"] != self.user_id:
                if not message_data.is_internal:
                    self._set_status(ticket_id, "responded")
            elif ticket["status"] == "responded":
                self._set_status(ticket_id, "open")
            return TicketMessageResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error adding message to ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to add message")
