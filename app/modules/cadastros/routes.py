from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import Principal, get_current_principal, require_permission
from app.database.supabase_client import get_supabase
from app.modules.cadastros.schemas import CadastroCreate, CadastroUpdate, CadastroResponse
from app.modules.cadastros.service import CadastroService
from supabase import Client
from typing import List

router = APIRouter(tags=["cadastros"])


def get_cadastro_service(kind: str, supabase: Client = Depends(get_supabase)) -> CadastroService:
    return CadastroService(supabase, kind)


@router.get("/cadastros/{kind}", response_model=List[CadastroResponse], response_model_exclude_none=True)
async def list_cadastros(
    include_inactive: bool = False,
    limit: int = 200,
    offset: int = 0,
    principal: Principal = Depends(get_current_principal),
    service: CadastroService = Depends(get_cadastro_service)
):
    return service.list_items(include_inactive=include_inactive, limit=limit, offset=offset)


@router.post("/admin/cadastros/{kind}", response_model=CadastroResponse, response_model_exclude_none=True, status_code=201)
async def create_cadastro(
    data: CadastroCreate,
    principal: Principal = Depends(require_permission("admin.manage_cadastros")),
    service: CadastroService = Depends(get_cadastro_service)
):
    return service.create_item(data)


@router.put("/admin/cadastros/{kind}/{item_id}", response_model=CadastroResponse, response_model_exclude_none=True)
async def update_cadastro(
    item_id: int,
    data: CadastroUpdate,
    principal: Principal = Depends(require_permission("admin.manage_cadastros")),
    service: CadastroService = Depends(get_cadastro_service)
):
    return service.update_item(item_id, data)


@router.delete("/admin/cadastros/{kind}/{item_id}", status_code=204)
async def delete_cadastro(
    item_id: int,
    principal: Principal = Depends(require_permission("admin.manage_cadastros")),
    service: CadastroService = Depends(get_cadastro_service)
):
    if not service.delete_item(item_id):
        raise HTTPException(status_code=404, detail="Entry not found")
    return None
