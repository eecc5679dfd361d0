from supabase import Client
from app.database.supabase_client import search_filter
from app.modules.suppliers.schemas import SupplierCreate, SupplierUpdate, SupplierResponse
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class SupplierService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_supplier(self, supplier_data: SupplierCreate) -> SupplierResponse:
        try:
            result = self.supabase.table("suppliers").insert(supplier_data.model_dump()).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create supplier")
            return SupplierResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating supplier: {e}")
            raise HTTPException(status_code=500, detail="Failed to create supplier")

    def get_supplier(self, supplier_id: int) -> SupplierResponse:
        try:
            result = self.supabase.table("suppliers")\
                .select("*")\
                .eq("id", supplier_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Supplier not found")
            return SupplierResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching supplier {supplier_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch supplier")

    def list_suppliers(
        self,
        search: Optional[str] = None,
        country: Optional[str] = None,
        product_type: Optional[str] = None,
        verified_only: bool = False,
        limit: int = 50,
        offset: int = 0
    ) -> List[SupplierResponse]:
        try:
            query = self.supabase.table("suppliers").select("*")
            if country:
                query = query.eq("country", country)
            if product_type:
                query = query.eq("product_type", product_type)
            if verified_only:
                query = query.eq("is_verified", True)
            if search:
                query = query.or_(search_filter(["name", "description"], search))
            result = query.order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [SupplierResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing suppliers: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch suppliers")

    def update_supplier(self, supplier_id: int, supplier_data: SupplierUpdate) -> SupplierResponse:
        update_data = supplier_data.model_dump(exclude_unset=True)
        if not update_data:
            return self.get_supplier(supplier_id)
        try:
            result = self.supabase.table("suppliers")\
                .update(update_data)\
                .eq("id", supplier_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Supplier not found")
            return SupplierResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating supplier {supplier_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update supplier")

    def delete_supplier(self, supplier_id: int) -> bool:
        try:
            result = self.supabase.table("suppliers")\
                .delete()\
                .eq("id", supplier_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting supplier {supplier_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete supplier")
