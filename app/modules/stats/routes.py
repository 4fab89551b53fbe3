from fastapi import APIRouter, Depends, Response
from app.database.supabase_client import get_service_supabase
from app.modules.stats.schemas import AdminStats, StudentStats
from app.modules.stats.service import StatsService
from app.core.dependencies import require_permission
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/stats", tags=["stats"])


def get_stats_service(supabase: Client = Depends(get_service_supabase)) -> StatsService:
    return StatsService(supabase)


@router.get("/admin", response_model=AdminStats)
async def admin_stats(
    response: Response,
    user_data: Dict = Depends(require_permission("stats:read_all")),
    service: StatsService = Depends(get_stats_service)
):
    """Program-wide counts for the admin dashboard"""
    response.headers["Cache-Control"] = "no-cache, no-store, max-age=0, must-revalidate"
    return service.admin_stats()


@router.get("/student", response_model=StudentStats)
async def student_stats(
    user_data: Dict = Depends(require_permission("stats:read_own")),
    service: StatsService = Depends(get_stats_service)
):
    """Counts for the caller's dashboard"""
    return service.student_stats(user_data["id"])
