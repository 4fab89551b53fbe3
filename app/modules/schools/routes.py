from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase
from app.modules.schools.schemas import SchoolCreate, SchoolUpdate, SchoolResponse
from app.modules.schools.service import SchoolService
from app.core.dependencies import require_permission
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/schools", tags=["schools"])


def get_school_service(supabase: Client = Depends(get_service_supabase)) -> SchoolService:
    return SchoolService(supabase)


@router.get("", response_model=List[SchoolResponse])
async def list_schools(service: SchoolService = Depends(get_school_service)):
    """Schools visited by the program (public)"""
    return service.list_schools()


@router.get("/{school_id}", response_model=SchoolResponse)
async def get_school(school_id: str, service: SchoolService = Depends(get_school_service)):
    return service.get_school(school_id)


@router.post("", response_model=Dict[str, SchoolResponse], status_code=201)
async def create_school(
    school_data: SchoolCreate,
    user_data: Dict = Depends(require_permission("schools:manage")),
    service: SchoolService = Depends(get_school_service)
):
    return {"school": service.create_school(school_data)}


@router.put("/{school_id}", response_model=Dict[str, SchoolResponse])
async def update_school(
    school_id: str,
    school_data: SchoolUpdate,
    user_data: Dict = Depends(require_permission("schools:manage")),
    service: SchoolService = Depends(get_school_service)
):
    return {"school": service.update_school(school_id, school_data)}


@router.delete("/{school_id}")
async def delete_school(
    school_id: str,
    user_data: Dict = Depends(require_permission("schools:manage")),
    service: SchoolService = Depends(get_school_service)
):
    service.delete_school(school_id)
    return {"success": True}
