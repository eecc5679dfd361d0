from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupWithPermissionsResponse,
    GroupPermissionAssign, GroupPermissionsUpdate, GroupPermissionsResult
)
from app.modules.groups.service import GroupService
from app.core.dependencies import Principal, require_permission
from supabase import Client
from typing import List

router = APIRouter(prefix="/admin/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    include_inactive: bool = True,
    limit: int = 100,
    offset: int = 0,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: GroupService = Depends(get_group_service)
):
    return service.list_groups(include_inactive=include_inactive, limit=limit, offset=offset)


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group"""
    return service.create_group(group_data)


@router.get("/{group_id}", response_model=GroupWithPermissionsResponse)
async def get_group(
    group_id: int,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: GroupService = Depends(get_group_service)
):
    """Get group with its permissions"""
    return service.get_group_with_permissions(group_id)


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: int,
    group_data: GroupUpdate,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: GroupService = Depends(get_group_service)
):
    return service.update_group(group_id, group_data)


@router.delete("/{group_id}", status_code=204)
async def delete_group(
    group_id: int,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: GroupService = Depends(get_group_service)
):
    """Delete group (only when no user belongs to it)"""
    service.delete_group(group_id)
    return None


@router.put("/{group_id}/permissions", response_model=GroupPermissionsResult)
async def set_group_permissions(
    group_id: int,
    data: GroupPermissionsUpdate,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: GroupService = Depends(get_group_service)
):
    """Replace the group's permission set"""
    return service.set_group_permissions(group_id, data)


@router.post("/{group_id}/permissions", status_code=201)
async def add_group_permission(
    group_id: int,
    data: GroupPermissionAssign,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: GroupService = Depends(get_group_service)
):
    service.add_group_permission(group_id, data.permission_id)
    return {"group_id": group_id, "permission_id": data.permission_id}


@router.delete("/{group_id}/permissions/{permission_id}", status_code=204)
async def remove_group_permission(
    group_id: int,
    permission_id: int,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: GroupService = Depends(get_group_service)
):
    if not service.remove_group_permission(group_id, permission_id):
        raise HTTPException(status_code=404, detail="Permission not assigned to this group")
    return None
