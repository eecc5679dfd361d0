from supabase import Client
from app.database.supabase_client import search_filter
from app.modules.materials.schemas import MaterialCreate, MaterialUpdate, MaterialResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class MaterialService:
    def __init__(self, supabase: Client, can_view_restricted: bool = False, is_staff: bool = False):
        self.supabase = supabase
        self.can_view_restricted = can_view_restricted
        self.is_staff = is_staff

    def _fetch_material(self, material_id: int) -> Dict[str, Any]:
        result = self.supabase.table("materials")\
            .select("*")\
            .eq("id", material_id)\
            .limit(1)\
            .execute()
        if not result.data or (not result.data[0].get("is_active", True) and not self.is_staff):
            raise HTTPException(status_code=404, detail="Material not found")
        material = result.data[0]
        if material.get("access_level") == "Restricted" and not self.can_view_restricted:
            raise HTTPException(
                status_code=403,
                detail="Insufficient permissions. Required: materials.view_restricted"
            )
        return material

    def list_materials(
        self,
        search: Optional[str] = None,
        type: Optional[str] = None,
        category: Optional[str] = None,
        featured_only: bool = False,
        limit: int = 50,
        offset: int = 0
    ) -> List[MaterialResponse]:
        """Featured first, then newest"""
        try:
            query = self.supabase.table("materials").select("*")
            if not self.is_staff:
                query = query.eq("is_active", True)
            if not self.can_view_restricted:
                query = query.eq("access_level", "Public")
            if type:
                query = query.eq("type", type)
            if category:
                query = query.eq("category", category)
            if featured_only:
                query = query.eq("is_featured", True)
            if search:
                query = query.or_(search_filter(["title", "description"], search))
            result = query.order("is_featured", desc=True)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [MaterialResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing materials: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch materials")

    def get_material(self, material_id: int) -> MaterialResponse:
        try:
            return MaterialResponse(**self._fetch_material(material_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching material {material_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch material")

    def _increment(self, material_id: int, counter: str) -> MaterialResponse:
        material = self._fetch_material(material_id)
        try:
            result = self.supabase.table("materials")\
                .update({counter: (material.get(counter) or 0) + 1})\
                .eq("id", material_id)\
                .execute()
            return MaterialResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error incrementing {counter} of material {material_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update material")

    def register_view(self, material_id: int) -> MaterialResponse:
        return self._increment(material_id, "view_count")

    def register_download(self, material_id: int) -> MaterialResponse:
        return self._increment(material_id, "download_count")

    def create_material(self, material_data: MaterialCreate) -> MaterialResponse:
        try:
            values = material_data.model_dump()
            values.update({"view_count": 0, "download_count": 0})
            result = self.supabase.table("materials").insert(values).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create material")
            return MaterialResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating material: {e}")
            raise HTTPException(status_code=500, detail="Failed to create material")

    def update_material(self, material_id: int, material_data: MaterialUpdate) -> MaterialResponse:
        update_data = material_data.model_dump(exclude_unset=True)
        if not update_data:
            return self.get_material(material_id)
        try:
            result = self.supabase.table("materials")\
                .update(update_data)\
                .eq("id", material_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Material not found")
            return MaterialResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating material {material_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update material")

    def delete_material(self, material_id: int) -> bool:
        try:
            result = self.supabase.table("materials")\
                .delete()\
                .eq("id", material_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting material {material_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete material")
