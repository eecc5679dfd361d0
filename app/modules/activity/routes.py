from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.activity.schemas import ActivityResponse
from app.modules.activity.service import ActivityService
from app.core.dependencies import Principal, require_permission
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/admin/activity-log", tags=["activity"])


def get_activity_service(supabase: Client = Depends(get_supabase)) -> ActivityService:
    return ActivityService(supabase)


@router.get("", response_model=List[ActivityResponse])
async def list_activity(
    user_id: Optional[int] = None,
    action: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    principal: Principal = Depends(require_permission("admin.view_activity")),
    service: ActivityService = Depends(get_activity_service)
):
    """Activity log, newest first"""
    return service.list_activity(user_id=user_id, action=action, limit=limit, offset=offset)
