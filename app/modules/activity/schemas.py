from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime


class ActivityResponse(BaseModel):
    id: int
    user_id: int
    action: str
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
