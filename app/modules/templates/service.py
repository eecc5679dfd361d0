from supabase import Client
from app.database.supabase_client import search_filter
from app.modules.auth.service import utcnow_iso
from app.modules.templates.schemas import TemplateCreate, TemplateUpdate, TemplateResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class TemplateService:
    def __init__(self, supabase: Client, include_drafts: bool = False):
        self.supabase = supabase
        self.include_drafts = include_drafts

    def _fetch_template(self, template_id: int) -> Dict[str, Any]:
        result = self.supabase.table("templates")\
            .select("*")\
            .eq("id", template_id)\
            .limit(1)\
            .execute()
        if not result.data or (result.data[0].get("status") != "published" and not self.include_drafts):
            raise HTTPException(status_code=404, detail="Template not found")
        return result.data[0]

    def create_template(self, template_data: TemplateCreate) -> TemplateResponse:
        """Create a new message template"""
        try:
            now = utcnow_iso()
            values = template_data.model_dump()
            values.update({"copy_count": 0, "created_at": now, "updated_at": now})
            result = self.supabase.table("templates").insert(values).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create template")
            return TemplateResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating template: {e}")
            raise HTTPException(status_code=500, detail="Failed to create template")

    def get_template_by_id(self, template_id: int) -> TemplateResponse:
        """Get template by ID"""
        try:
            return TemplateResponse(**self._fetch_template(template_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch template")

    def list_templates(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        language: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[TemplateResponse]:
        """List templates, most copied first"""
        try:
            query = self.supabase.table("templates").select("*")
            if not self.include_drafts:
                query = query.eq("status", "published")
            if category:
                query = query.eq("category", category)
            if language:
                query = query.eq("language", language)
            if search:
                query = query.or_(search_filter(["title", "purpose", "content"], search))
            result = query.order("copy_count", desc=True)\
                .order("title")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [TemplateResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing templates: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch templates")

    def register_copy(self, template_id: int) -> TemplateResponse:
        """Count one more copy of the template"""
        template = self._fetch_template(template_id)
        try:
            result = self.supabase.table("templates")\
                .update({"copy_count": (template.get("copy_count") or 0) + 1})\
                .eq("id", template_id)\
                .execute()
            return TemplateResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error counting copy of template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update template")

    def update_template(self, template_id: int, template_data: TemplateUpdate) -> TemplateResponse:
        """Update template"""
        update_data = template_data.model_dump(exclude_unset=True)
        if not update_data:
            return self.get_template_by_id(template_id)
        update_data["updated_at"] = utcnow_iso()
        try:
            result = self.supabase.table("templates")\
                .update(update_data)\
                .eq("id", template_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Template not found")
            return TemplateResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update template")

    def delete_template(self, template_id: int) -> bool:
        """Delete template"""
        try:
            result = self.supabase.table("templates")\
                .delete()\
                .eq("id", template_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete template")
