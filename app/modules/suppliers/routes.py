from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import Principal, require_permission
from app.database.supabase_client import get_supabase
from app.modules.suppliers.schemas import SupplierCreate, SupplierUpdate, SupplierResponse
from app.modules.suppliers.service import SupplierService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


def get_supplier_service(supabase: Client = Depends(get_supabase)) -> SupplierService:
    return SupplierService(supabase)


@router.get("", response_model=List[SupplierResponse])
async def list_suppliers(
    search: Optional[str] = None,
    country: Optional[str] = None,
    product_type: Optional[str] = None,
    verified_only: bool = False,
    limit: int = 50,
    offset: int = 0,
    service: SupplierService = Depends(get_supplier_service)
):
    """Public supplier directory"""
    return service.list_suppliers(
        search=search, country=country, product_type=product_type,
        verified_only=verified_only, limit=limit, offset=offset
    )


@router.post("", response_model=SupplierResponse, status_code=201)
async def create_supplier(
    supplier_data: SupplierCreate,
    principal: Principal = Depends(require_permission("suppliers.manage")),
    service: SupplierService = Depends(get_supplier_service)
):
    return service.create_supplier(supplier_data)


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(supplier_id: int, service: SupplierService = Depends(get_supplier_service)):
    return service.get_supplier(supplier_id)


@router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int,
    supplier_data: SupplierUpdate,
    principal: Principal = Depends(require_permission("suppliers.manage")),
    service: SupplierService = Depends(get_supplier_service)
):
    return service.update_supplier(supplier_id, supplier_data)


@router.delete("/{supplier_id}", status_code=204)
async def delete_supplier(
    supplier_id: int,
    principal: Principal = Depends(require_permission("suppliers.manage")),
    service: SupplierService = Depends(get_supplier_service)
):
    if not service.delete_supplier(supplier_id):
        raise HTTPException(status_code=404, detail="Supplier not found")
    return None
