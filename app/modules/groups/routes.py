from fastapi import APIRouter, Depends, HTTPException, status
from app.database.supabase_client import get_service_supabase
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupMemberResponse,
    MessageCreate, MessageResponse
)
from app.modules.groups.service import GroupService, MessageService
from app.core.dependencies import (
    require_permission, require_admin, check_group_member, is_group_member, has_permission
)
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_service_supabase)) -> GroupService:
    return GroupService(supabase)


def get_message_service(supabase: Client = Depends(get_service_supabase)) -> MessageService:
    return MessageService(supabase)


@router.get("", response_model=Dict[str, List[GroupResponse]])
async def list_groups(
    user_data: Dict = Depends(require_permission("groups:read")),
    service: GroupService = Depends(get_group_service)
):
    """List all groups, flagging the ones the caller belongs to"""
    return {"groups": service.list_groups(user_id=user_data["id"])}


@router.post("", response_model=Dict[str, GroupResponse], status_code=201)
async def create_group(
    group_data: GroupCreate,
    user_data: Dict = Depends(require_admin),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group (admin only)"""
    return {"group": service.create_group(group_data, user_data["id"])}


@router.get("/{group_id}", response_model=Dict[str, GroupResponse])
async def get_group(
    group_id: str,
    user_data: Dict = Depends(require_permission("groups:read")),
    service: GroupService = Depends(get_group_service)
):
    """Get group by ID"""
    return {"group": service.get_group_by_id(group_id)}


@router.put("/{group_id}", response_model=Dict[str, GroupResponse])
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    user_data: Dict = Depends(require_admin),
    service: GroupService = Depends(get_group_service)
):
    """Update group name and description (admin only)"""
    return {"group": service.update_group(group_id, group_data)}


@router.delete("/{group_id}")
async def delete_group(
    group_id: str,
    user_data: Dict = Depends(require_admin),
    service: GroupService = Depends(get_group_service)
):
    """Delete group together with its members and messages (admin only)"""
    name = service.delete_group(group_id)
    return {"success": True, "message": f'Group "{name}" deleted successfully'}


@router.post("/{group_id}/join")
async def join_group(
    group_id: str,
    user_data: Dict = Depends(require_permission("groups:join")),
    service: GroupService = Depends(get_group_service)
):
    return service.join_group(group_id, user_data["id"])


@router.post("/{group_id}/leave")
async def leave_group(
    group_id: str,
    user_data: Dict = Depends(require_permission("groups:join")),
    service: GroupService = Depends(get_group_service)
):
    return service.leave_group(group_id, user_data["id"])


@router.get("/{group_id}/members", response_model=List[GroupMemberResponse])
async def list_members(
    group_id: str,
    user_data: Dict = Depends(require_permission("groups:read")),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_service_supabase)
):
    """List all members of a group (members and admins only)"""
    check_group_member(group_id, user_data, supabase)
    return service.list_members(group_id)


@router.get("/{group_id}/messages", response_model=Dict[str, List[MessageResponse]])
async def list_messages(
    group_id: str,
    user_data: Dict = Depends(require_permission("messages:read")),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_service_supabase)
):
    """Messages of a group, oldest first (members and admins only)"""
    check_group_member(group_id, user_data, supabase)
    return {"messages": service.list_messages(group_id)}


@router.post("/{group_id}/messages", response_model=Dict[str, MessageResponse])
async def send_message(
    group_id: str,
    body: MessageCreate,
    user_data: Dict = Depends(require_permission("messages:create")),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_service_supabase)
):
    """Post a message; the sender must be a member of the group"""
    if not body.message or not body.message.strip():
        raise HTTPException(status_code=400, detail="Message content is required")
    if not is_group_member(group_id, user_data["id"], supabase):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return {"message": service.send_message(group_id, user_data["id"], body.message)}


@router.delete("/{group_id}/messages/{message_id}")
async def delete_message(
    group_id: str,
    message_id: str,
    user_data: Dict = Depends(require_permission("messages:read")),
    service: MessageService = Depends(get_message_service)
):
    """Delete a message (its sender, or a user who may moderate messages)"""
    message = service.get_message(group_id, message_id)
    if message["sender_id"] != user_data["id"] and not has_permission(user_data, "messages:moderate"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own messages"
        )
    service.delete_message(group_id, message_id)
    return {"success": True}
