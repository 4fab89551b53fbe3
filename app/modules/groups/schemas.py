from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class GroupCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    is_member: Optional[bool] = None

    class Config:
        from_attributes = True


class GroupMemberResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DefaultGroupJoinResult(BaseModel):
    """Outcome of adding a user to the default group. reason explains why nothing was joined."""
    joined: bool
    group_id: Optional[str] = None
    reason: Optional[str] = None


class MessageCreate(BaseModel):
    message: Optional[str] = None


class MessageSender(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None


class MessageResponse(BaseModel):
    id: str
    group_id: str
    sender_id: str
    message: str
    created_at: datetime
    profiles: Optional[MessageSender] = None

    class Config:
        from_attributes = True
