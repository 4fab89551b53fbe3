from supabase import Client
from app.modules.admin_requests.schemas import (
    AdminRequestResponse, AdminRequestReviewResponse,
    STATUS_PENDING, ACTION_APPROVE, TRANSITIONS
)
from app.config.permissions_config import ROLE_ADMIN, ROLE_PENDING_ADMIN, ROLE_STUDENT
from typing import List, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

REQUEST_SELECT = (
    "*, "
    "profiles!admin_requests_user_id_fkey(full_name, email), "
    "reviewer:profiles!admin_requests_reviewed_by_fkey(full_name, email)"
)


class AdminRequestService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_requests(self, user_id: Optional[str] = None) -> List[AdminRequestResponse]:
        """All requests newest first; restricted to one requester when user_id is given"""
        try:
            query = self.supabase.table("admin_requests")\
                .select(REQUEST_SELECT)\
                .order("created_at", desc=True)
            if user_id is not None:
                query = query.eq("user_id", user_id)
            result = query.execute()
            return [AdminRequestResponse(**r) for r in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching admin requests: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch requests")

    def has_pending_request(self, user_id: str) -> bool:
        try:
            result = self.supabase.table("admin_requests")\
                .select("id")\
                .eq("user_id", user_id)\
                .eq("status", STATUS_PENDING)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error checking existing requests: {e}")
            raise HTTPException(status_code=500, detail="Failed to check existing requests")
        return bool(result.data)

    def create_request(self, user_data: dict, reason: Optional[str]) -> AdminRequestResponse:
        """Submit a request; the requester's profile moves from student to pending_admin"""
        if not reason or not reason.strip():
            raise HTTPException(status_code=400, detail="Reason is required")
        if user_data.get("role") == ROLE_ADMIN:
            raise HTTPException(status_code=400, detail="You already have admin privileges")

        user_id = user_data["id"]
        if self.has_pending_request(user_id):
            raise HTTPException(status_code=400, detail="You already have a pending admin request")

        try:
            result = self.supabase.table("admin_requests").insert({
                "user_id": user_id,
                "reason": reason.strip(),
                "status": STATUS_PENDING
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create request")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating admin request: {e}")
            raise HTTPException(status_code=500, detail="Failed to create request")

        try:
            self.supabase.table("profiles")\
                .update({"role": ROLE_PENDING_ADMIN})\
                .eq("id", user_id)\
                .eq("role", ROLE_STUDENT)\
                .execute()
        except Exception as e:
            # A database trigger sets pending_admin as well
            logger.error(f"Error updating user role to pending_admin for {user_id}: {e}")

        return AdminRequestResponse(**result.data[0])

    def _get_request(self, request_id: str) -> dict:
        try:
            result = self.supabase.table("admin_requests")\
                .select("*")\
                .eq("id", request_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching admin request {request_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch request")
        if not result.data:
            raise HTTPException(status_code=404, detail="Request not found")
        return result.data[0]

    def review_request(self, request_id: str, action: Optional[str], reviewer_id: str) -> AdminRequestReviewResponse:
        """Move a pending request to approved or denied. Approval promotes the requester to admin."""
        if action not in TRANSITIONS:
            raise HTTPException(status_code=400, detail='Invalid action. Must be "approve" or "deny"')

        admin_request = self._get_request(request_id)
        if admin_request["status"] != STATUS_PENDING:
            raise HTTPException(status_code=400, detail="Request has already been processed")

        try:
            # status filter makes the transition happen at most once
            result = self.supabase.table("admin_requests")\
                .update({
                    "status": TRANSITIONS[action],
                    "reviewed_by": reviewer_id,
                    "reviewed_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", request_id)\
                .eq("status", STATUS_PENDING)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating admin request {request_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update request")
        if not result.data:
            raise HTTPException(status_code=400, detail="Request has already been processed")
        updated = result.data[0]

        requester_id = admin_request["user_id"]
        if action == ACTION_APPROVE:
            if not self._update_role(requester_id, ROLE_ADMIN):
                self._revert_to_pending(request_id)
                raise HTTPException(status_code=500, detail="Failed to update user role")
        elif self._update_role(requester_id, ROLE_STUDENT, only_from=ROLE_PENDING_ADMIN) is None:
            logger.warning(f"Could not reset {requester_id} from pending_admin after denial")

        logger.info(f"Admin request {request_id} {TRANSITIONS[action]} by {reviewer_id}")
        return AdminRequestReviewResponse(
            success=True,
            message=f"Request {TRANSITIONS[action]} successfully",
            request=AdminRequestResponse(**updated)
        )

    def _update_role(self, user_id: str, role: str, only_from: Optional[str] = None) -> Optional[list]:
        """Updated profile rows, or None when the update failed"""
        try:
            query = self.supabase.table("profiles")\
                .update({"role": role})\
                .eq("id", user_id)
            if only_from is not None:
                query = query.eq("role", only_from)
            return query.execute().data or []
        except Exception as e:
            logger.error(f"Error updating role of {user_id} to {role}: {e}")
            return None

    def _revert_to_pending(self, request_id: str):
        try:
            self.supabase.table("admin_requests")\
                .update({
                    "status": STATUS_PENDING,
                    "reviewed_by": None,
                    "reviewed_at": None
                })\
                .eq("id", request_id)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to revert admin request {request_id} to pending: {e}")
