from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import Principal, require_permission
from app.database.supabase_client import get_supabase
from app.modules.templates.schemas import TemplateCreate, TemplateUpdate, TemplateResponse
from app.modules.templates.service import TemplateService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/templates", tags=["templates"])


def get_template_service(
    principal: Principal = Depends(require_permission("templates.view")),
    supabase: Client = Depends(get_supabase)
) -> TemplateService:
    return TemplateService(supabase, include_drafts=principal.has_permission("templates.manage"))


@router.get("", response_model=List[TemplateResponse])
async def list_templates(
    search: Optional[str] = None,
    category: Optional[str] = None,
    language: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    service: TemplateService = Depends(get_template_service)
):
    """Published templates; staff also see drafts"""
    return service.list_templates(search=search, category=category, language=language, limit=limit, offset=offset)


@router.post("", response_model=TemplateResponse, status_code=201)
async def create_template(
    template_data: TemplateCreate,
    principal: Principal = Depends(require_permission("templates.manage")),
    service: TemplateService = Depends(get_template_service)
):
    return service.create_template(template_data)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(template_id: int, service: TemplateService = Depends(get_template_service)):
    return service.get_template_by_id(template_id)


@router.post("/{template_id}/copy", response_model=TemplateResponse)
async def copy_template(template_id: int, service: TemplateService = Depends(get_template_service)):
    """Record that the caller copied the template"""
    return service.register_copy(template_id)


@router.put("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: int,
    template_data: TemplateUpdate,
    principal: Principal = Depends(require_permission("templates.manage")),
    service: TemplateService = Depends(get_template_service)
):
    return service.update_template(template_id, template_data)


@router.delete("/{template_id}", status_code=204)
async def delete_template(
    template_id: int,
    principal: Principal = Depends(require_permission("templates.manage")),
    service: TemplateService = Depends(get_template_service)
):
    if not service.delete_template(template_id):
        raise HTTPException(status_code=404, detail="Template not found")
    return None
