from fastapi import APIRouter, Depends
from app.core.dependencies import Principal, require_permission
from app.database.supabase_client import get_supabase
from app.modules.my_suppliers.schemas import (
    MySupplierCreate, MySupplierUpdate, MySupplierResponse, MySupplierDetailResponse,
    BranchCreate, BranchUpdate, BranchResponse,
    ContactCreate, ContactUpdate, ContactResponse
)
from app.modules.my_suppliers.service import MySupplierService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/my-suppliers", tags=["my-suppliers"])


def get_my_supplier_service(
    principal: Principal = Depends(require_permission("my_suppliers.manage")),
    supabase: Client = Depends(get_supabase)
) -> MySupplierService:
    return MySupplierService(supabase, principal.id)


@router.get("", response_model=List[MySupplierResponse])
async def list_my_suppliers(
    search: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    service: MySupplierService = Depends(get_my_supplier_service)
):
    return service.list_suppliers(search=search, limit=limit, offset=offset)


@router.post("", response_model=MySupplierResponse, status_code=201)
async def create_my_supplier(
    supplier_data: MySupplierCreate,
    service: MySupplierService = Depends(get_my_supplier_service)
):
    return service.create_supplier(supplier_data)


@router.get("/{supplier_id}", response_model=MySupplierDetailResponse)
async def get_my_supplier(supplier_id: int, service: MySupplierService = Depends(get_my_supplier_service)):
    return service.get_supplier(supplier_id)


@router.put("/{supplier_id}", response_model=MySupplierResponse)
async def update_my_supplier(
    supplier_id: int,
    supplier_data: MySupplierUpdate,
    service: MySupplierService = Depends(get_my_supplier_service)
):
    return service.update_supplier(supplier_id, supplier_data)


@router.delete("/{supplier_id}", status_code=204)
async def delete_my_supplier(supplier_id: int, service: MySupplierService = Depends(get_my_supplier_service)):
    """Delete supplier with its branches and contacts"""
    service.delete_supplier(supplier_id)
    return None


@router.get("/{supplier_id}/branches", response_model=List[BranchResponse])
async def list_branches(supplier_id: int, service: MySupplierService = Depends(get_my_supplier_service)):
    return service.list_branches(supplier_id)


@router.post("/{supplier_id}/branches", response_model=BranchResponse, status_code=201)
async def create_branch(
    supplier_id: int,
    branch_data: BranchCreate,
    service: MySupplierService = Depends(get_my_supplier_service)
):
    return service.create_branch(supplier_id, branch_data)


@router.put("/{supplier_id}/branches/{branch_id}", response_model=BranchResponse)
async def update_branch(
    supplier_id: int,
    branch_id: int,
    branch_data: BranchUpdate,
    service: MySupplierService = Depends(get_my_supplier_service)
):
    return service.update_branch(supplier_id, branch_id, branch_data)


@router.delete("/{supplier_id}/branches/{branch_id}", status_code=204)
async def delete_branch(
    supplier_id: int,
    branch_id: int,
    service: MySupplierService = Depends(get_my_supplier_service)
):
    service.delete_branch(supplier_id, branch_id)
    return None


@router.get("/{supplier_id}/contacts", response_model=List[ContactResponse])
async def list_contacts(supplier_id: int, service: MySupplierService = Depends(get_my_supplier_service)):
    return service.list_contacts(supplier_id)


@router.post("/{supplier_id}/contacts", response_model=ContactResponse, status_code=201)
async def create_contact(
    supplier_id: int,
    contact_data: ContactCreate,
    service: MySupplierService = Depends(get_my_supplier_service)
):
    return service.create_contact(supplier_id, contact_data)


@router.put("/{supplier_id}/contacts/{contact_id}", response_model=ContactResponse)
async def update_contact(
    supplier_id: int,
    contact_id: int,
    contact_data: ContactUpdate,
    service: MySupplierService = Depends(get_my_supplier_service)
):
    return service.update_contact(supplier_id, contact_id, contact_data)


@router.delete("/{supplier_id}/contacts/{contact_id}", status_code=204)
async def delete_contact(
    supplier_id: int,
    contact_id: int,
    service: MySupplierService = Depends(get_my_supplier_service)
):
    service.delete_contact(supplier_id, contact_id)
    return None
