from supabase import Client
from app.modules.schools.schemas import SchoolCreate, SchoolUpdate, SchoolResponse
from typing import List
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class SchoolService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_schools(self) -> List[SchoolResponse]:
        """Schools, most recent visit first"""
        try:
            result = self.supabase.table("schools")\
                .select("*")\
                .order("visit_date", desc=True)\
                .execute()
            return [SchoolResponse(**school) for school in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching schools: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch schools")

    def get_school(self, school_id: str) -> SchoolResponse:
        try:
            result = self.supabase.table("schools").select("*").eq("id", school_id).limit(1).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="School not found")
        return SchoolResponse(**result.data[0])

    def create_school(self, school_data: SchoolCreate) -> SchoolResponse:
        if not school_data.name or not school_data.name.strip():
            raise HTTPException(status_code=400, detail="School name is required")
        try:
            result = self.supabase.table("schools").insert({
                "name": school_data.name.strip(),
                "location": (school_data.location or "").strip() or None,
                "visit_date": school_data.visit_date.isoformat() if school_data.visit_date else None
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create school")
            return SchoolResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating school: {e}")
            raise HTTPException(status_code=500, detail="Failed to create school")

    def update_school(self, school_id: str, school_data: SchoolUpdate) -> SchoolResponse:
        if not school_data.name or not school_data.name.strip():
            raise HTTPException(status_code=400, detail="School name is required")
        update_data = {
            "name": school_data.name.strip(),
            "updated_at": datetime.now(timezone.utc).isoformat()
        }
        if school_data.location is not None:
            update_data["location"] = school_data.location.strip() or None
        if school_data.visit_date is not None:
            update_data["visit_date"] = school_data.visit_date.isoformat()
        try:
            result = self.supabase.table("schools").update(update_data).eq("id", school_id).execute()
        except Exception as e:
            logger.error(f"Error updating school {school_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update school")
        if not result.data:
            raise HTTPException(status_code=404, detail="School not found")
        return SchoolResponse(**result.data[0])

    def delete_school(self, school_id: str) -> bool:
        self.get_school(school_id)
        try:
            self.supabase.table("schools").delete().eq("id", school_id).execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting school {school_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete school")
