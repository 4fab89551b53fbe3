from fastapi import APIRouter, Depends, UploadFile, File, Form
from app.database.supabase_client import get_service_supabase
from app.modules.career_resources.schemas import (
    CareerResourceCreate, CareerResourceUpdate, CareerResourceResponse,
    CareerResourceFilesResponse
)
from app.modules.career_resources.service import CareerResourceService
from app.core.dependencies import require_permission
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/career-resources", tags=["career-resources"])


def get_career_resource_service(supabase: Client = Depends(get_service_supabase)) -> CareerResourceService:
    return CareerResourceService(supabase)


@router.get("", response_model=Dict[str, List[CareerResourceResponse]])
async def list_career_resources(service: CareerResourceService = Depends(get_career_resource_service)):
    """Career resources with their files (public)"""
    return {"careerResources": service.list_resources()}


@router.post("/files", response_model=CareerResourceFilesResponse)
async def upload_career_resource_files(
    career_resource_id: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    user_data: Dict = Depends(require_permission("career_resources:manage")),
    service: CareerResourceService = Depends(get_career_resource_service)
):
    """
    Attach files to a resource from multipart form data.
    Images, PDFs and presentations go to their own buckets; anything else,
    or a file that fails to store, is reported under "skipped".
    """
    return await service.upload_files(career_resource_id, files or [], user_data["id"])


@router.get("/{resource_id}", response_model=Dict[str, CareerResourceResponse])
async def get_career_resource(
    resource_id: str,
    service: CareerResourceService = Depends(get_career_resource_service)
):
    return {"careerResource": service.get_resource(resource_id)}


@router.post("", response_model=Dict[str, CareerResourceResponse], status_code=201)
async def create_career_resource(
    resource_data: CareerResourceCreate,
    user_data: Dict = Depends(require_permission("career_resources:manage")),
    service: CareerResourceService = Depends(get_career_resource_service)
):
    return {"careerResource": service.create_resource(resource_data, user_data["id"])}


@router.put("/{resource_id}", response_model=Dict[str, CareerResourceResponse])
async def update_career_resource(
    resource_id: str,
    resource_data: CareerResourceUpdate,
    user_data: Dict = Depends(require_permission("career_resources:manage")),
    service: CareerResourceService = Depends(get_career_resource_service)
):
    return {"careerResource": service.update_resource(resource_id, resource_data, user_data["id"])}


@router.delete("/{resource_id}")
async def delete_career_resource(
    resource_id: str,
    user_data: Dict = Depends(require_permission("career_resources:manage")),
    service: CareerResourceService = Depends(get_career_resource_service)
):
    """Delete the resource and its stored files"""
    service.delete_resource(resource_id)
    return {"success": True}
