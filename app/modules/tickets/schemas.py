from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

TicketStatus = Literal["open", "in_progress", "responded", "closed"]
TicketPriority = Literal["low", "normal", "high", "urgent"]


class TicketCreate(BaseModel):
    title: str = Field(min_length=1)
    category: str = Field(min_length=1)
    description: str = Field(min_length=1)
    priority: TicketPriority = "normal"


class TicketUpdate(BaseModel):
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    assigned_to: Optional[int] = None


class TicketResponse(BaseModel):
    id: int
    user_id: int
    title: str
    category: str
    description: str
    status: TicketStatus = "open"
    priority: TicketPriority = "normal"
    assigned_to: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TicketMessageCreate(BaseModel):
    message: str = Field(min_length=1)
    is_internal: bool = False


class TicketMessageResponse(BaseModel):
    id: int
    ticket_id: int
    user_id: int
    message: str
    is_internal: bool = False
    created_at: datetime

    class Config:
        from_attributes = True
