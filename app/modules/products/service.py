from supabase import Client
from app.database.supabase_client import search_filter
from app.modules.products.schemas import ProductCreate, ProductUpdate, ProductResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

COST_FIELDS = ("cost_price", "fba_fee", "commission", "taxes", "prep_center_fee")


def compute_profitability(product: Dict[str, Any]) -> Dict[str, Optional[float]]:
    """total_cost, profit and margin (percent of sale price); all None without both prices"""
    sale = product.get("sale_price")
    if sale is None or product.get("cost_price") is None:
        return {"total_cost": None, "profit": None, "margin": None}
    sale = float(sale)
    total = sum(float(product.get(field) or 0) for field in COST_FIELDS)
    for cost in product.get("custom_costs") or []:
        if cost.get("type") == "percentage":
            total += sale * float(cost["value"]) / 100
        else:
            total += float(cost["value"])
    profit = sale - total
    margin = profit / sale * 100 if sale > 0 else 0.0
    return {"total_cost": round(total, 2), "profit": round(profit, 2), "margin": round(margin, 2)}


def to_product_response(row: Dict[str, Any]) -> ProductResponse:
    return ProductResponse(**row, **compute_profitability(row))


class ProductService:
    def __init__(self, supabase: Client, user_id: int):
        self.supabase = supabase
        self.user_id = user_id

    def _owned_product(self, product_id: int) -> Dict[str, Any]:
        result = self.supabase.table("products")\
            .select("*")\
            .eq("id", product_id)\
            .eq("user_id", self.user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Product not found")
        return result.data[0]

    def list_products(self, search: Optional[str] = None, limit: int = 50, offset: int = 0) -> List[ProductResponse]:
        try:
            query = self.supabase.table("products")\
                .select("*")\
                .eq("user_id", self.user_id)
            if search:
                query = query.or_(search_filter(["name", "sku", "asin"], search))
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [to_product_response(row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing products of user {self.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch products")

    def get_product(self, product_id: int) -> ProductResponse:
        try:
            return to_product_response(self._owned_product(product_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching product {product_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch product")

    def create_product(self, product_data: ProductCreate) -> ProductResponse:
        try:
            values = product_data.model_dump()
            values["user_id"] = self.user_id
            result = self.supabase.table("products").insert(values).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create product")
            return to_product_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating product for user {self.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create product")

    def update_product(self, product_id: int, product_data: ProductUpdate) -> ProductResponse:
        product = self._owned_product(product_id)
        update_data = product_data.model_dump(exclude_unset=True)
        if not update_data:
            return to_product_response(product)
        try:
            result = self.supabase.table("products")\
                .update(update_data)\
                .eq("id", product_id)\
                .eq("user_id", self.user_id)\
                .execute()
            return to_product_response(result.data[0])
        except Exception as e:
            logger.error(f"Error updating product {product_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update product")

    def delete_product(self, product_id: int) -> None:
        self._owned_product(product_id)
        try:
            self.supabase.table("products")\
                .delete()\
                .eq("id", product_id)\
                .eq("user_id", self.user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting product {product_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete product")
