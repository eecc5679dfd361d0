from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import Principal, require_permission
from app.database.supabase_client import get_supabase
from app.modules.ai_prompts.schemas import AiPromptCreate, AiPromptUpdate, AiPromptResponse
from app.modules.ai_prompts.service import AiPromptService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/ai-prompts", tags=["ai-prompts"])


def get_ai_prompt_service(
    principal: Principal = Depends(require_permission("ai_prompts.view")),
    supabase: Client = Depends(get_supabase)
) -> AiPromptService:
    return AiPromptService(supabase, include_inactive=principal.has_permission("ai_prompts.manage"))


@router.get("", response_model=List[AiPromptResponse])
async def list_prompts(
    search: Optional[str] = None,
    category: Optional[str] = None,
    featured_only: bool = False,
    limit: int = 50,
    offset: int = 0,
    service: AiPromptService = Depends(get_ai_prompt_service)
):
    return service.list_prompts(search=search, category=category, featured_only=featured_only, limit=limit, offset=offset)


@router.post("", response_model=AiPromptResponse, status_code=201)
async def create_prompt(
    prompt_data: AiPromptCreate,
    principal: Principal = Depends(require_permission("ai_prompts.manage")),
    service: AiPromptService = Depends(get_ai_prompt_service)
):
    return service.create_prompt(prompt_data)


@router.get("/{prompt_id}", response_model=AiPromptResponse)
async def get_prompt(prompt_id: int, service: AiPromptService = Depends(get_ai_prompt_service)):
    return service.get_prompt(prompt_id)


@router.post("/{prompt_id}/use", response_model=AiPromptResponse)
async def use_prompt(prompt_id: int, service: AiPromptService = Depends(get_ai_prompt_service)):
    return service.register_use(prompt_id)


@router.put("/{prompt_id}", response_model=AiPromptResponse)
async def update_prompt(
    prompt_id: int,
    prompt_data: AiPromptUpdate,
    principal: Principal = Depends(require_permission("ai_prompts.manage")),
    service: AiPromptService = Depends(get_ai_prompt_service)
):
    return service.update_prompt(prompt_id, prompt_data)


@router.delete("/{prompt_id}", status_code=204)
async def delete_prompt(
    prompt_id: int,
    principal: Principal = Depends(require_permission("ai_prompts.manage")),
    service: AiPromptService = Depends(get_ai_prompt_service)
):
    if not service.delete_prompt(prompt_id):
        raise HTTPException(status_code=404, detail="Prompt not found")
    return None
