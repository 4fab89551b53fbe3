from supabase import Client
from app.modules.stats.schemas import AdminStats, StudentStats
from app.config.permissions_config import ROLE_ADMIN, ROLE_STUDENT
from typing import Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class StatsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _count(self, table: str, *filters: Tuple[str, str]) -> int:
        query = self.supabase.table(table).select("id", count="exact")
        for column, value in filters:
            query = query.eq(column, value)
        result = query.execute()
        if result.count is not None:
            return result.count
        return len(result.data or [])

    def _distinct_group_members(self) -> int:
        result = self.supabase.table("group_members").select("user_id").execute()
        return len({m["user_id"] for m in result.data or []})

    def admin_stats(self) -> AdminStats:
        try:
            return AdminStats(
                total_users=self._count("profiles"),
                total_students=self._count("profiles", ("role", ROLE_STUDENT)),
                total_admins=self._count("profiles", ("role", ROLE_ADMIN)),
                total_groups=self._count("groups"),
                total_schools=self._count("schools"),
                total_weeks=self._count("weeks"),
                students_in_groups=self._distinct_group_members()
            )
        except Exception as e:
            logger.error(f"Error fetching admin stats: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch statistics")

    def student_stats(self, user_id: str) -> StudentStats:
        try:
            return StudentStats(
                groups_joined=self._count("group_members", ("user_id", user_id)),
                total_groups=self._count("groups"),
                total_weeks=self._count("weeks"),
                total_schools=self._count("schools"),
                messages_posted=self._count("group_messages", ("sender_id", user_id))
            )
        except Exception as e:
            logger.error(f"Error fetching student stats for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch statistics")
