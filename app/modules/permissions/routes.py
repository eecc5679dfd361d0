from fastapi import APIRouter, Depends, HTTPException
from app.config.permissions_config import get_permission_matrix
from app.database.supabase_client import get_supabase
from app.modules.permissions.schemas import (
    PermissionCreate, PermissionUpdate, PermissionResponse, PermissionMatrixResponse
)
from app.modules.permissions.service import PermissionService
from app.core.dependencies import Principal, require_permission
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/admin/permissions", tags=["permissions"])


def get_permission_service(supabase: Client = Depends(get_supabase)) -> PermissionService:
    return PermissionService(supabase)


@router.get("", response_model=List[PermissionResponse])
async def list_permissions(
    module: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = 200,
    offset: int = 0,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: PermissionService = Depends(get_permission_service)
):
    return service.list_permissions(module=module, category=category, limit=limit, offset=offset)


@router.get("/matrix", response_model=PermissionMatrixResponse)
async def permission_matrix(principal: Principal = Depends(require_permission("admin.manage_groups"))):
    """Default permission catalogue and group assignments shipped with the app"""
    return get_permission_matrix()


@router.post("", response_model=PermissionResponse, status_code=201)
async def create_permission(
    permission_data: PermissionCreate,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: PermissionService = Depends(get_permission_service)
):
    return service.create_permission(permission_data)


@router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(
    permission_id: int,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: PermissionService = Depends(get_permission_service)
):
    return service.get_permission_by_id(permission_id)


@router.put("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: int,
    permission_data: PermissionUpdate,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: PermissionService = Depends(get_permission_service)
):
    return service.update_permission(permission_id, permission_data)


@router.delete("/{permission_id}", status_code=204)
async def delete_permission(
    permission_id: int,
    principal: Principal = Depends(require_permission("admin.manage_groups")),
    service: PermissionService = Depends(get_permission_service)
):
    if not service.delete_permission(permission_id):
        raise HTTPException(status_code=404, detail="Permission not found")
    return None
