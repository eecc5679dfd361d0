from supabase import Client
from app.modules.my_suppliers.schemas import (
    MySupplierCreate, MySupplierUpdate, MySupplierResponse, MySupplierDetailResponse,
    BranchCreate, BranchUpdate, BranchResponse,
    ContactCreate, ContactUpdate, ContactResponse
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class MySupplierService:
    """Personal supplier CRM. Every method is scoped to the owning user; other users' rows are 404."""

    def __init__(self, supabase: Client, user_id: int):
        self.supabase = supabase
        self.user_id = user_id

    def _owned_supplier(self, supplier_id: int) -> Dict[str, Any]:
        result = self.supabase.table("my_suppliers")\
            .select("*")\
            .eq("id", supplier_id)\
            .eq("user_id", self.user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Supplier not found")
        return result.data[0]

    def list_suppliers(self, search: Optional[str] = None, limit: int = 50, offset: int = 0) -> List[MySupplierResponse]:
        try:
            query = self.supabase.table("my_suppliers")\
                .select("*")\
                .eq("user_id", self.user_id)
            if search:
                query = query.ilike("name", f"%{search}%")
            result = query.order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [MySupplierResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing suppliers of user {self.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch suppliers")

    def get_supplier(self, supplier_id: int) -> MySupplierDetailResponse:
        """Supplier with its branches and contacts"""
        try:
            supplier = self._owned_supplier(supplier_id)
            return MySupplierDetailResponse(
                **supplier,
                branches=self._rows("my_supplier_branches", supplier_id),
                contacts=self._rows("my_supplier_contacts", supplier_id)
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching supplier {supplier_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch supplier")

    def create_supplier(self, supplier_data: MySupplierCreate) -> MySupplierResponse:
        try:
            values = supplier_data.model_dump()
            values["user_id"] = self.user_id
            result = self.supabase.table("my_suppliers").insert(values).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create supplier")
            return MySupplierResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating supplier for user {self.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create supplier")

    def update_supplier(self, supplier_id: int, supplier_data: MySupplierUpdate) -> MySupplierResponse:
        supplier = self._owned_supplier(supplier_id)
        update_data = supplier_data.model_dump(exclude_unset=True)
        if not update_data:
            return MySupplierResponse(**supplier)
        try:
            result = self.supabase.table("my_suppliers")\
                .update(update_data)\
                .eq("id", supplier_id)\
                .eq("user_id", self.user_id)\
                .execute()
            return MySupplierResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error updating supplier {supplier_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update supplier")

    def delete_supplier(self, supplier_id: int) -> None:
        self._owned_supplier(supplier_id)
        try:
            self.supabase.table("my_supplier_contacts").delete().eq("my_supplier_id", supplier_id).execute()
            self.supabase.table("my_supplier_branches").delete().eq("my_supplier_id", supplier_id).execute()
            self.supabase.table("my_suppliers")\
                .delete()\
                .eq("id", supplier_id)\
                .eq("user_id", self.user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting supplier {supplier_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete supplier")

    # Branches and contacts

    def _rows(self, table: str, supplier_id: int) -> List[Dict[str, Any]]:
        result = self.supabase.table(table)\
            .select("*")\
            .eq("my_supplier_id", supplier_id)\
            .order("name")\
            .execute()
        return result.data or []

    def _child(self, table: str, supplier_id: int, child_id: int, label: str) -> Dict[str, Any]:
        result = self.supabase.table(table)\
            .select("*")\
            .eq("id", child_id)\
            .eq("my_supplier_id", supplier_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return result.data[0]

    def list_branches(self, supplier_id: int) -> List[BranchResponse]:
        self._owned_supplier(supplier_id)
        return [BranchResponse(**row) for row in self._rows("my_supplier_branches", supplier_id)]

    def create_branch(self, supplier_id: int, branch_data: BranchCreate) -> BranchResponse:
        self._owned_supplier(supplier_id)
        try:
            values = branch_data.model_dump()
            values["my_supplier_id"] = supplier_id
            result = self.supabase.table("my_supplier_branches").insert(values).execute()
            return BranchResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error creating branch for supplier {supplier_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create branch")

    def update_branch(self, supplier_id: int, branch_id: int, branch_data: BranchUpdate) -> BranchResponse:
        self._owned_supplier(supplier_id)
        branch = self._child("my_supplier_branches", supplier_id, branch_id, "Branch")
        update_data = branch_data.model_dump(exclude_unset=True)
        if not update_data:
            return BranchResponse(**branch)
        try:
            result = self.supabase.table("my_supplier_branches")\
                .update(update_data)\
                .eq("id", branch_id)\
                .execute()
            return BranchResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error updating branch {branch_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update branch")

    def delete_branch(self, supplier_id: int, branch_id: int) -> None:
        self._owned_supplier(supplier_id)
        self._child("my_supplier_branches", supplier_id, branch_id, "Branch")
        try:
            # Contacts of the branch stay with the supplier
            self.supabase.table("my_supplier_contacts")\
                .update({"branch_id": None})\
                .eq("branch_id", branch_id)\
                .execute()
            self.supabase.table("my_supplier_branches").delete().eq("id", branch_id).execute()
        except Exception as e:
            logger.error(f"Error deleting branch {branch_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete branch")

    def list_contacts(self, supplier_id: int) -> List[ContactResponse]:
        self._owned_supplier(supplier_id)
        return [ContactResponse(**row) for row in self._rows("my_supplier_contacts", supplier_id)]

    def create_contact(self, supplier_id: int, contact_data: ContactCreate) -> ContactResponse:
        self._owned_supplier(supplier_id)
        if contact_data.branch_id is not None:
            self._child("my_supplier_branches", supplier_id, contact_data.branch_id, "Branch")
        try:
            values = contact_data.model_dump()
            values["my_supplier_id"] = supplier_id
            result = self.supabase.table("my_supplier_contacts").insert(values).execute()
            return ContactResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error creating contact for supplier {supplier_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create contact")

    def update_contact(self, supplier_id: int, contact_id: int, contact_data: ContactUpdate) -> ContactResponse:
        self._owned_supplier(supplier_id)
        contact = self._child("my_supplier_contacts", supplier_id, contact_id, "Contact")
        update_data = contact_data.model_dump(exclude_unset=True)
        if update_data.get("branch_id") is not None:
            self._child("my_supplier_branches", supplier_id, update_data["branch_id"], "Branch")
        if not update_data:
            return ContactResponse(**contact)
        try:
            result = self.supabase.table("my_supplier_contacts")\
                .update(update_data)\
                .eq("id", contact_id)\
                .execute()
            return ContactResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error updating contact {contact_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update contact")

    def delete_contact(self, supplier_id: int, contact_id: int) -> None:
        self._owned_supplier(supplier_id)
        self._child("my_supplier_contacts", supplier_id, contact_id, "Contact")
        try:
            self.supabase.table("my_supplier_contacts").delete().eq("id", contact_id).execute()
        except Exception as e:
            logger.error(f"Error deleting contact {contact_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete contact")
