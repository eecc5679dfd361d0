from supabase import Client
from app.config import settings
from app.modules.credits.schemas import AiUsageRequest, AiUsageResult, AiUsageResponse
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class CreditService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_balance(self, user_id: int) -> int:
        try:
            result = self.supabase.table("users")\
                .select("ai_credits")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching credits of user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch credits")
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return result.data[0].get("ai_credits") or 0

    def deduct(self, user_id: int, amount: int) -> int:
        """
        Atomically take amount credits from the user. Raises 400 when the balance
        is lower than amount; the balance never goes negative.
        """
        try:
            result = self.supabase.rpc("deduct_ai_credits", {"p_user_id": user_id, "p_amount": amount}).execute()
        except Exception as e:
            logger.error(f"Error deducting {amount} credits from user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to deduct AI credits")
        if not result.data:
            raise HTTPException(status_code=400, detail="Insufficient AI credits")
        return result.data[0]["ai_credits"]

    def record_usage(self, user_id: int, usage: AiUsageRequest) -> AiUsageResult:
        """Charge the agent's cost, then log the usage"""
        cost = settings.ai_agent_costs.get(usage.agent_type)
        if cost is None:
            raise HTTPException(status_code=400, detail=f"Unknown agent type: {usage.agent_type}")

        remaining = self.deduct(user_id, cost)
        try:
            self.supabase.table("ai_usage_history").insert({
                "user_id": user_id,
                "agent_type": usage.agent_type,
                "credits_used": cost,
                "input_data": usage.input_data,
                "output_data": usage.output_data
            }).execute()
        except Exception as e:
            # Credits stay deducted
            logger.error(f"Error writing usage history for user {user_id}: {e}")
        logger.info(f"User {user_id} used {usage.agent_type} for {cost} credits ({remaining} left)")
        return AiUsageResult(credits_used=cost, remaining_credits=remaining)

    def list_usage(
        self,
        user_id: int,
        agent_type: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[AiUsageResponse]:
        try:
            query = self.supabase.table("ai_usage_history")\
                .select("*")\
                .eq("user_id", user_id)
            if agent_type:
                query = query.eq("agent_type", agent_type)
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [AiUsageResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing usage of user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch usage history")
