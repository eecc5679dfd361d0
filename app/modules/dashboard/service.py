from supabase import Client
from app.modules.dashboard.schemas import DashboardMetrics
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# Tickets still waiting on someone
OPEN_STATUSES = ["open", "in_progress", "responded"]


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _count(self, table: str, user_id: int, statuses=None) -> int:
        query = self.supabase.table(table)\
            .select("id", count="exact")\
            .eq("user_id", user_id)
        if statuses:
            query = query.in_("status", statuses)
        result = query.execute()
        return result.count if result.count is not None else len(result.data or [])

    def get_metrics(self, user: dict) -> DashboardMetrics:
        """Counters for the student dashboard of one user"""
        try:
            return DashboardMetrics(
                suppliers_count=self._count("my_suppliers", user["id"]),
                products_count=self._count("products", user["id"]),
                ai_credits=user.get("ai_credits") or 0,
                open_tickets=self._count("tickets", user["id"], OPEN_STATUSES)
            )
        except Exception as e:
            logger.error(f"Error computing dashboard metrics for user {user['id']}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch dashboard metrics")
