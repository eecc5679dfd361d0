from fastapi import APIRouter, Depends
from app.config import settings
from app.core.dependencies import Principal, get_current_principal, require_permission
from app.database.supabase_client import get_supabase
from app.modules.credits.schemas import CreditBalanceResponse, AiUsageRequest, AiUsageResult, AiUsageResponse
from app.modules.credits.service import CreditService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/ai", tags=["ai-credits"])


def get_credit_service(supabase: Client = Depends(get_supabase)) -> CreditService:
    return CreditService(supabase)


@router.get("/credits", response_model=CreditBalanceResponse)
async def get_credits(
    principal: Principal = Depends(get_current_principal),
    service: CreditService = Depends(get_credit_service)
):
    return CreditBalanceResponse(ai_credits=service.get_balance(principal.id), agent_costs=settings.ai_agent_costs)


@router.post("/usage", response_model=AiUsageResult)
async def record_usage(
    usage: AiUsageRequest,
    principal: Principal = Depends(require_permission("ai_agents.use")),
    service: CreditService = Depends(get_credit_service)
):
    """Charge one use of an AI agent"""
    return service.record_usage(principal.id, usage)


@router.get("/usage", response_model=List[AiUsageResponse])
async def list_usage(
    agent_type: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    principal: Principal = Depends(get_current_principal),
    service: CreditService = Depends(get_credit_service)
):
    return service.list_usage(principal.id, agent_type=agent_type, limit=limit, offset=offset)
