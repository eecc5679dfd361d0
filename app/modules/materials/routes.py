from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import Principal, require_permission
from app.database.supabase_client import get_supabase
from app.modules.materials.schemas import MaterialCreate, MaterialUpdate, MaterialResponse
from app.modules.materials.service import MaterialService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/materials", tags=["materials"])


def get_material_service(
    principal: Principal = Depends(require_permission("materials.view")),
    supabase: Client = Depends(get_supabase)
) -> MaterialService:
    return MaterialService(
        supabase,
        can_view_restricted=principal.has_permission("materials.view_restricted"),
        is_staff=principal.has_permission("materials.manage")
    )


@router.get("", response_model=List[MaterialResponse])
async def list_materials(
    search: Optional[str] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    featured_only: bool = False,
    limit: int = 50,
    offset: int = 0,
    service: MaterialService = Depends(get_material_service)
):
    """Materials the caller may open; restricted ones need materials.view_restricted"""
    return service.list_materials(
        search=search, type=type, category=category, featured_only=featured_only, limit=limit, offset=offset
    )


@router.post("", response_model=MaterialResponse, status_code=201)
async def create_material(
    material_data: MaterialCreate,
    principal: Principal = Depends(require_permission("materials.manage")),
    service: MaterialService = Depends(get_material_service)
):
    return service.create_material(material_data)


@router.get("/{material_id}", response_model=MaterialResponse)
async def get_material(material_id: int, service: MaterialService = Depends(get_material_service)):
    return service.get_material(material_id)


@router.post("/{material_id}/view", response_model=MaterialResponse)
async def register_view(material_id: int, service: MaterialService = Depends(get_material_service)):
    return service.register_view(material_id)


@router.post("/{material_id}/download", response_model=MaterialResponse)
async def register_download(material_id: int, service: MaterialService = Depends(get_material_service)):
    return service.register_download(material_id)


@router.put("/{material_id}", response_model=MaterialResponse)
async def update_material(
    material_id: int,
    material_data: MaterialUpdate,
    principal: Principal = Depends(require_permission("materials.manage")),
    service: MaterialService = Depends(get_material_service)
):
    return service.update_material(material_id, material_data)


@router.delete("/{material_id}", status_code=204)
async def delete_material(
    material_id: int,
    principal: Principal = Depends(require_permission("materials.manage")),
    service: MaterialService = Depends(get_material_service)
):
    if not service.delete_material(material_id):
        raise HTTPException(status_code=404, detail="Material not found")
    return None
