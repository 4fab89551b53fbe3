from supabase import Client
from app.modules.profiles.schemas import ProfileResponse
from app.config.permissions_config import ROLES
from typing import List, Optional
from datetime import datetime, timezone
from fastapi import HTTPException


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get profile by user ID"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

    def list_profiles(self, role: Optional[str] = None) -> List[ProfileResponse]:
        """List profiles newest first, optionally for one role"""
        try:
            query = self.supabase.table("profiles").select("*")
            if role:
                query = query.eq("role", role)
            result = query.order("created_at", desc=True).execute()
            return [ProfileResponse(**profile) for profile in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_role(self, user_id: str, role: str) -> ProfileResponse:
        if role not in ROLES:
            raise HTTPException(status_code=400, detail=f"Role must be one of: {', '.join(ROLES)}")
        try:
            result = self.supabase.table("profiles")\
                .update({"role": role, "updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])
