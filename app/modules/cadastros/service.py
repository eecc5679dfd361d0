from supabase import Client
from app.database.supabase_client import is_unique_violation
from app.modules.cadastros.models import CADASTRO_KINDS
from app.modules.cadastros.schemas import CadastroCreate, CadastroUpdate, CadastroResponse
from typing import Any, Dict, List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

BASE_FIELDS = ("name", "description", "is_active")


class CadastroService:
    """CRUD over the lookup tables. The table is chosen by kind, never taken verbatim from the URL."""

    def __init__(self, supabase: Client, kind: str):
        if kind not in CADASTRO_KINDS:
            raise HTTPException(status_code=404, detail=f"Unknown cadastro type: {kind}")
        self.supabase = supabase
        self.kind = kind
        self.fields = BASE_FIELDS + CADASTRO_KINDS[kind]

    def _columns(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in data.items() if k in self.fields}

    def list_items(self, include_inactive: bool = False, limit: int = 200, offset: int = 0) -> List[CadastroResponse]:
        try:
            query = self.supabase.table(self.kind).select("*")
            if not include_inactive:
                query = query.eq("is_active", True)
            result = query.order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [CadastroResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing {self.kind}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to fetch {self.kind}")

    def create_item(self, data: CadastroCreate) -> CadastroResponse:
        values = self._columns(data.model_dump(exclude_none=True))
        try:
            result = self.supabase.table(self.kind).insert(values).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail=f"Failed to create {self.kind} entry")
            return CadastroResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Name already exists")
            logger.error(f"Error creating {self.kind} entry: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create {self.kind} entry")

    def update_item(self, item_id: int, data: CadastroUpdate) -> CadastroResponse:
        values = self._columns(data.model_dump(exclude_unset=True))
        try:
            if not values:
                result = self.supabase.table(self.kind).select("*").eq("id", item_id).limit(1).execute()
            else:
                result = self.supabase.table(self.kind)\
                    .update(values)\
                    .eq("id", item_id)\
                    .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Entry not found")
            return CadastroResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Name already exists")
            logger.error(f"Error updating {self.kind} entry {item_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update {self.kind} entry")

    def delete_item(self, item_id: int) -> bool:
        try:
            result = self.supabase.table(self.kind)\
                .delete()\
                .eq("id", item_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting {self.kind} entry {item_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to delete {self.kind} entry")
