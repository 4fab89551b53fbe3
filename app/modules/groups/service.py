from supabase import Client
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupMemberResponse,
    DefaultGroupJoinResult, MessageResponse
)
from app.config.settings import settings
from typing import List, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

MESSAGE_SELECT = "*, profiles:sender_id(full_name, email)"


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch_group(self, group_id: str) -> dict:
        result = self.supabase.table("groups")\
            .select("*")\
            .eq("id", group_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Group not found")
        return result.data[0]

    def create_group(self, group_data: GroupCreate, user_id: str) -> GroupResponse:
        """Create a new group"""
        if not group_data.name or not group_data.name.strip():
            raise HTTPException(status_code=400, detail="Group name is required")
        try:
            result = self.supabase.table("groups").insert({
                "name": group_data.name.strip(),
                "description": group_data.description,
                "created_by": user_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create group")

            return GroupResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating group: {e}")
            raise HTTPException(status_code=500, detail="Failed to create group")

    def get_group_by_id(self, group_id: str) -> GroupResponse:
        """Get group by ID"""
        try:
            return GroupResponse(**self._fetch_group(group_id))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_group(self, group_id: str, group_data: GroupUpdate) -> GroupResponse:
        """Update group; both name and description are required"""
        if not group_data.name or not group_data.name.strip():
            raise HTTPException(status_code=400, detail="Group name is required")
        if not group_data.description or not group_data.description.strip():
            raise HTTPException(status_code=400, detail="Group description is required")
        try:
            self._fetch_group(group_id)
            result = self.supabase.table("groups")\
                .update({
                    "name": group_data.name.strip(),
                    "description": group_data.description.strip(),
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", group_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to update group")

            return GroupResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update group")

    def list_groups(self, user_id: Optional[str] = None) -> List[GroupResponse]:
        """List all groups, newest first. With user_id, flag the ones that user belongs to."""
        try:
            result = self.supabase.table("groups")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            groups = [GroupResponse(**group) for group in result.data or []]
            if user_id is not None:
                members_result = self.supabase.table("group_members")\
                    .select("group_id")\
                    .eq("user_id", user_id)\
                    .execute()
                member_of = {m["group_id"] for m in members_result.data or []}
                for group in groups:
                    group.is_member = group.id in member_of
            return groups
        except Exception as e:
            logger.error(f"Error fetching groups: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch groups")

    def delete_group(self, group_id: str) -> str:
        """Delete group with its members and messages; returns the deleted group's name"""
        try:
            group = self._fetch_group(group_id)

            self.supabase.table("group_members")\
                .delete()\
                .eq("group_id", group_id)\
                .execute()

            self.supabase.table("group_messages")\
                .delete()\
                .eq("group_id", group_id)\
                .execute()

            self.supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()

            return group["name"]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete group")

    def join_group(self, group_id: str, user_id: str) -> dict:
        """Add user to the group; joining twice is not an error"""
        try:
            group = self._fetch_group(group_id)

            existing = self.supabase.table("group_members")\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            if existing.data:
                return {"message": "Already a member of this group", "group": group}

            self.supabase.table("group_members").insert({
                "group_id": group_id,
                "user_id": user_id
            }).execute()

            return {"message": f"Successfully joined {group['name']}", "group": group}
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error joining group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to join group")

    def leave_group(self, group_id: str, user_id: str) -> dict:
        """Remove user from the group"""
        try:
            group = self._fetch_group(group_id)

            result = self.supabase.table("group_members")\
                .delete()\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=400, detail="You are not a member of this group")

            return {"success": True, "message": f"Successfully left {group['name']}"}
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error leaving group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to leave group")

    def list_members(self, group_id: str) -> List[GroupMemberResponse]:
        """List all members of a group"""
        try:
            result = self.supabase.table("group_members")\
                .select("*")\
                .eq("group_id", group_id)\
                .execute()

            return [GroupMemberResponse(**member) for member in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def join_default_group(self, user_id: str) -> DefaultGroupJoinResult:
        """Add a new user to the default group. Failures are reported, not raised."""
        group_name = settings.default_group_name
        try:
            group_result = self.supabase.table("groups")\
                .select("id")\
                .eq("name", group_name)\
                .limit(1)\
                .execute()
            if not group_result.data:
                logger.warning(f"Default group '{group_name}' not found; {user_id} not auto-joined")
                return DefaultGroupJoinResult(joined=False, reason="Default group not found")

            group_id = group_result.data[0]["id"]
            existing = self.supabase.table("group_members")\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            if not existing.data:
                self.supabase.table("group_members").insert({
                    "group_id": group_id,
                    "user_id": user_id
                }).execute()
            return DefaultGroupJoinResult(joined=True, group_id=group_id)
        except Exception as e:
            logger.error(f"Error adding {user_id} to default group: {e}")
            return DefaultGroupJoinResult(joined=False, reason=str(e))


class MessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_messages(self, group_id: str) -> List[MessageResponse]:
        """Messages of a group, oldest first, with sender name and email"""
        try:
            result = self.supabase.table("group_messages")\
                .select(MESSAGE_SELECT)\
                .eq("group_id", group_id)\
                .order("created_at", desc=False)\
                .execute()
            return [MessageResponse(**message) for message in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching messages for {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch messages")

    def send_message(self, group_id: str, sender_id: str, message: Optional[str]) -> MessageResponse:
        if not message or not message.strip():
            raise HTTPException(status_code=400, detail="Message content is required")
        try:
            result = self.supabase.table("group_messages").insert({
                "group_id": group_id,
                "sender_id": sender_id,
                "message": message.strip()
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send message")

            # Re-read so the sender profile is embedded like in list_messages
            message_id = result.data[0]["id"]
            full = self.supabase.table("group_messages")\
                .select(MESSAGE_SELECT)\
                .eq("id", message_id)\
                .limit(1)\
                .execute()
            return MessageResponse(**(full.data[0] if full.data else result.data[0]))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error sending message to {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to send message")

    def get_message(self, group_id: str, message_id: str) -> dict:
        try:
            result = self.supabase.table("group_messages")\
                .select("*")\
                .eq("id", message_id)\
                .eq("group_id", group_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Message not found")
        return result.data[0]

    def delete_message(self, group_id: str, message_id: str) -> bool:
        try:
            result = self.supabase.table("group_messages")\
                .delete()\
                .eq("id", message_id)\
                .eq("group_id", group_id)\
                .execute()
            return len(result.data or []) > 0
        except Exception as e:
            logger.error(f"Error deleting message {message_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete message")
