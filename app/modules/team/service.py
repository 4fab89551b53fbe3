from supabase import Client
from app.modules.team.schemas import TeamMemberCreate, TeamMemberUpdate, TeamMemberResponse
from typing import List, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

OPTIONAL_FIELDS = ("position", "bio", "image_url")


def _clean(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


class TeamService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_members(self) -> List[TeamMemberResponse]:
        try:
            result = self.supabase.table("team_members")\
                .select("*")\
                .order("created_at", desc=False)\
                .execute()
            return [TeamMemberResponse(**member) for member in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching team members: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch team members")

    def get_member(self, member_id: str) -> TeamMemberResponse:
        try:
            result = self.supabase.table("team_members").select("*").eq("id", member_id).limit(1).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Team member not found")
        return TeamMemberResponse(**result.data[0])

    def create_member(self, member_data: TeamMemberCreate) -> TeamMemberResponse:
        if not member_data.name or not member_data.name.strip():
            raise HTTPException(status_code=400, detail="Team member name is required")
        row = {"name": member_data.name.strip()}
        for field in OPTIONAL_FIELDS:
            row[field] = _clean(getattr(member_data, field))
        try:
            result = self.supabase.table("team_members").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create team member")
            return TeamMemberResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating team member: {e}")
            raise HTTPException(status_code=500, detail="Failed to create team member")

    def update_member(self, member_id: str, member_data: TeamMemberUpdate) -> TeamMemberResponse:
        """Update name; optional fields change only when sent"""
        if not member_data.name or not member_data.name.strip():
            raise HTTPException(status_code=400, detail="Team member name is required")
        update_data = {
            "name": member_data.name.strip(),
            "updated_at": datetime.now(timezone.utc).isoformat()
        }
        for field in OPTIONAL_FIELDS:
            if field in member_data.model_fields_set:
                update_data[field] = _clean(getattr(member_data, field))
        try:
            result = self.supabase.table("team_members").update(update_data).eq("id", member_id).execute()
        except Exception as e:
            logger.error(f"Error updating team member {member_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update team member")
        if not result.data:
            raise HTTPException(status_code=404, detail="Team member not found")
        return TeamMemberResponse(**result.data[0])

    def delete_member(self, member_id: str) -> bool:
        self.get_member(member_id)
        try:
            self.supabase.table("team_members").delete().eq("id", member_id).execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting team member {member_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete team member")
