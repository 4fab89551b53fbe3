from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase
from app.modules.admin_requests.schemas import (
    AdminRequestCreate, AdminRequestReview, AdminRequestListResponse,
    AdminRequestResponse, AdminRequestReviewResponse
)
from app.modules.admin_requests.service import AdminRequestService
from app.core.dependencies import require_permission, is_admin
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/admin/requests", tags=["admin-requests"])


def get_admin_request_service(supabase: Client = Depends(get_service_supabase)) -> AdminRequestService:
    return AdminRequestService(supabase)


@router.get("", response_model=AdminRequestListResponse)
async def list_requests(
    user_data: Dict = Depends(require_permission("admin_requests:read")),
    service: AdminRequestService = Depends(get_admin_request_service)
):
    """Admins see every request; everyone else sees their own"""
    user_id = None if is_admin(user_data) else user_data["id"]
    return AdminRequestListResponse(requests=service.list_requests(user_id=user_id))


@router.post("", response_model=Dict[str, AdminRequestResponse], status_code=201)
async def create_request(
    body: AdminRequestCreate,
    user_data: Dict = Depends(require_permission("admin_requests:create")),
    service: AdminRequestService = Depends(get_admin_request_service)
):
    """Ask for admin privileges"""
    return {"request": service.create_request(user_data, body.reason)}


@router.patch("/{request_id}", response_model=AdminRequestReviewResponse)
async def review_request(
    request_id: str,
    body: AdminRequestReview,
    user_data: Dict = Depends(require_permission("admin_requests:review")),
    service: AdminRequestService = Depends(get_admin_request_service)
):
    """Approve or deny a pending request (admin only)"""
    return service.review_request(request_id, body.action, user_data["id"])
