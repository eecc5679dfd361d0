from supabase import Client
from app.modules.activity.schemas import ActivityResponse
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ActivityService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def log(
        self,
        user_id: int,
        action: str,
        details: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> None:
        """Append an activity row. A failed write is logged and does not fail the caller."""
        try:
            self.supabase.table("user_activity_log").insert({
                "user_id": user_id,
                "action": action,
                "details": details,
                "ip_address": ip_address,
                "user_agent": user_agent
            }).execute()
        except Exception as e:
            logger.error(f"Error writing activity '{action}' for user {user_id}: {e}")

    def list_activity(
        self,
        user_id: Optional[int] = None,
        action: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[ActivityResponse]:
        try:
            query = self.supabase.table("user_activity_log").select("*")
            if user_id is not None:
                query = query.eq("user_id", user_id)
            if action:
                query = query.eq("action", action)
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ActivityResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing activity: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch activity log")
