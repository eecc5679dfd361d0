from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime


class CreditBalanceResponse(BaseModel):
    ai_credits: int
    agent_costs: Dict[str, int]


class AiUsageRequest(BaseModel):
    agent_type: str = Field(min_length=1)
    input_data: Optional[Any] = None
    output_data: Optional[Any] = None


class AiUsageResult(BaseModel):
    credits_used: int
    remaining_credits: int


class AiUsageResponse(BaseModel):
    id: int
    user_id: int
    agent_type: str
    credits_used: int
    input_data: Optional[Any] = None
    output_data: Optional[Any] = None
    created_at: datetime

    class Config:
        from_attributes = True
