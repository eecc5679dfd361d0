from fastapi import APIRouter, Depends
from app.core.dependencies import Principal, require_permission
from app.database.supabase_client import get_supabase
from app.modules.dashboard.schemas import DashboardMetrics
from app.modules.dashboard.service import DashboardService
from supabase import Client

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(supabase: Client = Depends(get_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(
    principal: Principal = Depends(require_permission("dashboard.view")),
    service: DashboardService = Depends(get_dashboard_service)
):
    return service.get_metrics(principal.user)
