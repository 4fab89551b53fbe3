from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_DENIED = "denied"

ACTION_APPROVE = "approve"
ACTION_DENY = "deny"

# action -> terminal status
TRANSITIONS = {
    ACTION_APPROVE: STATUS_APPROVED,
    ACTION_DENY: STATUS_DENIED,
}


class AdminRequestCreate(BaseModel):
    reason: Optional[str] = None


class AdminRequestReview(BaseModel):
    action: Optional[str] = None


class ProfileSummary(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None


class AdminRequestResponse(BaseModel):
    id: str
    user_id: str
    reason: str
    status: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    profiles: Optional[ProfileSummary] = None
    reviewer: Optional[ProfileSummary] = None

    class Config:
        from_attributes = True


class AdminRequestListResponse(BaseModel):
    requests: List[AdminRequestResponse]


class AdminRequestReviewResponse(BaseModel):
    success: bool
    message: str
    request: AdminRequestResponse
