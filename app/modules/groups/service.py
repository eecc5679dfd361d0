from supabase import Client
from app.database.supabase_client import is_unique_violation
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupWithPermissionsResponse,
    GroupPermissionsUpdate, GroupPermissionsResult
)
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def get_group_id_by_name(supabase: Client, name: str) -> Optional[int]:
    """Return the id of the group with this name, or None"""
    result = supabase.table("user_groups")\
        .select("id")\
        .eq("name", name)\
        .limit(1)\
        .execute()
    return result.data[0]["id"] if result.data else None


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_group(self, group_data: GroupCreate) -> GroupResponse:
        """Create a new user group"""
        try:
            result = self.supabase.table("user_groups").insert(group_data.model_dump()).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create group")
            return GroupResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Group name already exists")
            logger.error(f"Error creating group: {e}")
            raise HTTPException(status_code=500, detail="Failed to create group")

    def get_group_by_id(self, group_id: int) -> GroupResponse:
        """Get group by ID"""
        try:
            result = self.supabase.table("user_groups")\
                .select("*")\
                .eq("id", group_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Group not found")
            return GroupResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch group")

    def update_group(self, group_id: int, group_data: GroupUpdate) -> GroupResponse:
        """Update group"""
        update_data = group_data.model_dump(exclude_unset=True)
        if not update_data:
            return self.get_group_by_id(group_id)
        try:
            result = self.supabase.table("user_groups")\
                .update(update_data)\
                .eq("id", group_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Group not found")
            return GroupResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Group name already exists")
            logger.error(f"Error updating group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update group")

    def list_groups(self, include_inactive: bool = True, limit: int = 100, offset: int = 0) -> List[GroupResponse]:
        """List groups ordered by name"""
        try:
            query = self.supabase.table("user_groups").select("*")
            if not include_inactive:
                query = query.eq("is_active", True)
            result = query.order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [GroupResponse(**group) for group in result.data]
        except Exception as e:
            logger.error(f"Error listing groups: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch groups")

    def delete_group(self, group_id: int) -> bool:
        """Delete a group that no user belongs to"""
        self.get_group_by_id(group_id)
        try:
            members = self.supabase.table("users")\
                .select("id")\
                .eq("group_id", group_id)\
                .limit(1)\
                .execute()
            if members.data:
                raise HTTPException(status_code=409, detail="Group still has users")

            self.supabase.table("group_permissions")\
                .delete()\
                .eq("group_id", group_id)\
                .execute()

            result = self.supabase.table("user_groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete group")

    def get_group_permission_ids(self, group_id: int) -> List[int]:
        result = self.supabase.table("group_permissions")\
            .select("permission_id")\
            .eq("group_id", group_id)\
            .execute()
        return [row["permission_id"] for row in result.data] if result.data else []

    def get_group_with_permissions(self, group_id: int) -> GroupWithPermissionsResponse:
        """Get group with all assigned permissions"""
        group = self.get_group_by_id(group_id)
        try:
            permission_ids = self.get_group_permission_ids(group_id)
            permissions = []
            if permission_ids:
                result = self.supabase.table("permissions")\
                    .select("*")\
                    .in_("id", permission_ids)\
                    .order("key")\
                    .execute()
                permissions = result.data or []
            return GroupWithPermissionsResponse(**group.model_dump(), permissions=permissions)
        except Exception as e:
            logger.error(f"Error fetching permissions for group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch group permissions")

    def _existing_permission_ids(self, permission_ids: List[int]) -> List[int]:
        if not permission_ids:
            return []
        result = self.supabase.table("permissions")\
            .select("id")\
            .in_("id", permission_ids)\
            .execute()
        return [row["id"] for row in result.data] if result.data else []

    def set_group_permissions(self, group_id: int, data: GroupPermissionsUpdate) -> GroupPermissionsResult:
        """Replace the permission set of a group with the given ids"""
        self.get_group_by_id(group_id)
        wanted = set(data.permission_ids)
        found = set(self._existing_permission_ids(list(wanted)))
        missing = wanted - found
        if missing:
            raise HTTPException(status_code=404, detail=f"Permissions not found: {sorted(missing)}")
        try:
            current = set(self.get_group_permission_ids(group_id))
            to_add = sorted(wanted - current)
            to_remove = sorted(current - wanted)
            if to_add:
                self.supabase.table("group_permissions").insert([
                    {"group_id": group_id, "permission_id": pid} for pid in to_add
                ]).execute()
            if to_remove:
                self.supabase.table("group_permissions")\
                    .delete()\
                    .eq("group_id", group_id)\
                    .in_("permission_id", to_remove)\
                    .execute()
            logger.info(f"Group {group_id} permissions updated: +{len(to_add)} -{len(to_remove)}")
            return GroupPermissionsResult(
                group_id=group_id,
                added_count=len(to_add),
                removed_count=len(to_remove),
                permission_ids=sorted(wanted)
            )
        except Exception as e:
            logger.error(f"Error updating permissions for group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update group permissions")

    def add_group_permission(self, group_id: int, permission_id: int) -> None:
        self.get_group_by_id(group_id)
        if not self._existing_permission_ids([permission_id]):
            raise HTTPException(status_code=404, detail="Permission not found")
        if permission_id in self.get_group_permission_ids(group_id):
            raise HTTPException(status_code=409, detail="Permission already assigned to this group")
        try:
            self.supabase.table("group_permissions").insert({
                "group_id": group_id,
                "permission_id": permission_id
            }).execute()
        except Exception as e:
            logger.error(f"Error assigning permission {permission_id} to group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to assign permission")

    def remove_group_permission(self, group_id: int, permission_id: int) -> bool:
        try:
            result = self.supabase.table("group_permissions")\
                .delete()\
                .eq("group_id", group_id)\
                .eq("permission_id", permission_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error removing permission {permission_id} from group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove permission")
