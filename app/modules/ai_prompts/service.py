from supabase import Client
from app.database.supabase_client import search_filter
from app.modules.auth.service import utcnow_iso
from app.modules.ai_prompts.schemas import AiPromptCreate, AiPromptUpdate, AiPromptResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class AiPromptService:
    def __init__(self, supabase: Client, include_inactive: bool = False):
        self.supabase = supabase
        self.include_inactive = include_inactive

    def _fetch_prompt(self, prompt_id: int) -> Dict[str, Any]:
        result = self.supabase.table("ai_prompts")\
            .select("*")\
            .eq("id", prompt_id)\
            .limit(1)\
            .execute()
        if not result.data or (not result.data[0].get("is_active", True) and not self.include_inactive):
            raise HTTPException(status_code=404, detail="Prompt not found")
        return result.data[0]

    def list_prompts(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        featured_only: bool = False,
        limit: int = 50,
        offset: int = 0
    ) -> List[AiPromptResponse]:
        try:
            query = self.supabase.table("ai_prompts").select("*")
            if not self.include_inactive:
                query = query.eq("is_active", True)
            if category:
                query = query.eq("category", category)
            if featured_only:
                query = query.eq("is_featured", True)
            if search:
                query = query.or_(search_filter(["title", "description"], search))
            result = query.order("is_featured", desc=True)\
                .order("use_count", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [AiPromptResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing prompts: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch prompts")

    def get_prompt(self, prompt_id: int) -> AiPromptResponse:
        try:
            return AiPromptResponse(**self._fetch_prompt(prompt_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching prompt {prompt_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch prompt")

    def register_use(self, prompt_id: int) -> AiPromptResponse:
        prompt = self._fetch_prompt(prompt_id)
        try:
            result = self.supabase.table("ai_prompts")\
                .update({"use_count": (prompt.get("use_count") or 0) + 1})\
                .eq("id", prompt_id)\
                .execute()
            return AiPromptResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error counting use of prompt {prompt_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update prompt")

    def create_prompt(self, prompt_data: AiPromptCreate) -> AiPromptResponse:
        try:
            now = utcnow_iso()
            values = prompt_data.model_dump()
            values.update({"use_count": 0, "created_at": now, "updated_at": now})
            result = self.supabase.table("ai_prompts").insert(values).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create prompt")
            return AiPromptResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating prompt: {e}")
            raise HTTPException(status_code=500, detail="Failed to create prompt")

    def update_prompt(self, prompt_id: int, prompt_data: AiPromptUpdate) -> AiPromptResponse:
        update_data = prompt_data.model_dump(exclude_unset=True)
        if not update_data:
            return self.get_prompt(prompt_id)
        update_data["updated_at"] = utcnow_iso()
        try:
            result = self.supabase.table("ai_prompts")\
                .update(update_data)\
                .eq("id", prompt_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Prompt not found")
            return AiPromptResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating prompt {prompt_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update prompt")

    def delete_prompt(self, prompt_id: int) -> bool:
        try:
            result = self.supabase.table("ai_prompts")\
                .delete()\
                .eq("id", prompt_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting prompt {prompt_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete prompt")
