from fastapi import APIRouter, Depends, HTTPException, status
from app.database.supabase_client import get_service_supabase
from app.modules.profiles.schemas import ProfileResponse, RoleUpdate
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_current_user, require_permission
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_service_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Profile of the caller"""
    return service.get_profile(user_data["id"])


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    role: Optional[str] = None,
    user_data: Dict = Depends(require_permission("profiles:manage")),
    service: ProfileService = Depends(get_profile_service)
):
    """List all profiles (admin only)"""
    return service.list_profiles(role=role)


@router.put("/{user_id}/role", response_model=ProfileResponse)
async def update_role(
    user_id: str,
    body: RoleUpdate,
    user_data: Dict = Depends(require_permission("profiles:manage")),
    service: ProfileService = Depends(get_profile_service)
):
    """Set a user's role (admin only); admins cannot demote themselves"""
    if user_id == user_data["id"] and body.role != user_data["role"]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot change your own role")
    return service.update_role(user_id, body.role)
