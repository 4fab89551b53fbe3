from fastapi import APIRouter, Depends, UploadFile, File, Form
from app.database.supabase_client import get_service_supabase
from app.modules.weeks.schemas import (
    WeekUpdate, WeekListResponse, WeekCreateResponse, WeekResponse
)
from app.modules.weeks.service import WeekService
from app.core.dependencies import require_permission
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/weeks", tags=["weeks"])


def get_week_service(supabase: Client = Depends(get_service_supabase)) -> WeekService:
    return WeekService(supabase)


@router.get("", response_model=WeekListResponse)
async def list_weeks(service: WeekService = Depends(get_week_service)):
    """List weeks with their files, ordered by week number (public)"""
    return WeekListResponse(weeks=service.list_weeks())


@router.get("/{week_id}", response_model=Dict[str, WeekResponse])
async def get_week(week_id: str, service: WeekService = Depends(get_week_service)):
    return {"week": service.get_week(week_id)}


@router.post("", response_model=WeekCreateResponse)
async def create_week(
    week_number: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    user_data: Dict = Depends(require_permission("weeks:create")),
    service: WeekService = Depends(get_week_service)
):
    """
    Create a week from multipart form data.
    Requires at least one photo and one PDF among the files. Files that fail
    to upload are reported under "skipped" while the week is still created.
    """
    return await service.create_week(week_number, title, description, files or [], user_data["id"])


@router.put("/{week_id}", response_model=Dict[str, WeekResponse])
async def update_week(
    week_id: str,
    week_data: WeekUpdate,
    user_data: Dict = Depends(require_permission("weeks:update")),
    service: WeekService = Depends(get_week_service)
):
    """Update week title and description"""
    return {"week": service.update_week(week_id, week_data)}


@router.delete("/{week_id}")
async def delete_week(
    week_id: str,
    user_data: Dict = Depends(require_permission("weeks:delete")),
    service: WeekService = Depends(get_week_service)
):
    """Delete week and associated files"""
    service.delete_week(week_id)
    return {"success": True}


@router.delete("/{week_id}/files/{file_id}")
async def delete_week_file(
    week_id: str,
    file_id: str,
    user_data: Dict = Depends(require_permission("week_files:delete")),
    service: WeekService = Depends(get_week_service)
):
    service.delete_week_file(week_id, file_id)
    return {"success": True}
