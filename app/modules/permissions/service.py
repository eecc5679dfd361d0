from supabase import Client
from app.database.supabase_client import is_unique_violation
from app.modules.permissions.schemas import PermissionCreate, PermissionUpdate, PermissionResponse
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class PermissionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_permission(self, permission_data: PermissionCreate) -> PermissionResponse:
        """Create a new permission"""
        try:
            result = self.supabase.table("permissions").insert(permission_data.model_dump()).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create permission")
            return PermissionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Permission key already exists")
            logger.error(f"Error creating permission: {e}")
            raise HTTPException(status_code=500, detail="Failed to create permission")

    def get_permission_by_id(self, permission_id: int) -> PermissionResponse:
        """Get permission by ID"""
        try:
            result = self.supabase.table("permissions")\
                .select("*")\
                .eq("id", permission_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Permission not found")
            return PermissionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching permission {permission_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch permission")

    def update_permission(self, permission_id: int, permission_data: PermissionUpdate) -> PermissionResponse:
        """Update permission (the key is immutable)"""
        update_data = permission_data.model_dump(exclude_unset=True)
        if not update_data:
            return self.get_permission_by_id(permission_id)
        try:
            result = self.supabase.table("permissions")\
                .update(update_data)\
                .eq("id", permission_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Permission not found")
            return PermissionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating permission {permission_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update permission")

    def list_permissions(
        self,
        module: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 200,
        offset: int = 0
    ) -> List[PermissionResponse]:
        """List permissions, optionally filtered by module or category"""
        try:
            query = self.supabase.table("permissions").select("*")
            if module:
                query = query.eq("module", module)
            if category:
                query = query.eq("category", category)
            result = query.order("key")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [PermissionResponse(**permission) for permission in result.data]
        except Exception as e:
            logger.error(f"Error listing permissions: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch permissions")

    def delete_permission(self, permission_id: int) -> bool:
        """Delete permission"""
        try:
            # Remove from group_permissions first
            self.supabase.table("group_permissions")\
                .delete()\
                .eq("permission_id", permission_id)\
                .execute()

            result = self.supabase.table("permissions")\
                .delete()\
                .eq("id", permission_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting permission {permission_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete permission")
