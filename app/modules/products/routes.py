from fastapi import APIRouter, Depends
from app.core.dependencies import Principal, require_permission
from app.database.supabase_client import get_supabase
from app.modules.products.schemas import ProductCreate, ProductUpdate, ProductResponse
from app.modules.products.service import ProductService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/products", tags=["products"])


def get_product_service(
    principal: Principal = Depends(require_permission("products.manage")),
    supabase: Client = Depends(get_supabase)
) -> ProductService:
    return ProductService(supabase, principal.id)


@router.get("", response_model=List[ProductResponse])
async def list_products(
    search: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    service: ProductService = Depends(get_product_service)
):
    """The caller's products with computed profitability"""
    return service.list_products(search=search, limit=limit, offset=offset)


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(product_data: ProductCreate, service: ProductService = Depends(get_product_service)):
    return service.create_product(product_data)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    return service.get_product(product_id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_data: ProductUpdate,
    service: ProductService = Depends(get_product_service)
):
    return service.update_product(product_id, product_data)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    service.delete_product(product_id)
    return None
