from supabase import Client
from app.modules.weeks.schemas import (
    WeekUpdate, WeekResponse, WeekFileResponse, FileUploadOutcome,
    SkippedFile, WeekCreateResponse
)
from app.modules.weeks.file_types import (
    FILE_TYPE_PHOTO, FILE_TYPE_PDF, categorize, resolve_content_type
)
from app.modules.weeks.storage import WeekFileStorage
from typing import List, Optional, Tuple
from datetime import datetime, timezone
from fastapi import HTTPException, UploadFile
import logging
import os
import re
import time
import uuid

logger = logging.getLogger(__name__)

WEEK_SELECT = "*, week_files(*)"
WEEK_NUMBER_PATTERN = re.compile(r"[0-9]+")


def parse_week_number(raw: Optional[str]) -> int:
    value = str(raw).strip() if raw is not None else ""
    if not WEEK_NUMBER_PATTERN.fullmatch(value):
        raise HTTPException(status_code=400, detail="Week number must be a positive number")
    week_number = int(value)
    if week_number < 1:
        raise HTTPException(status_code=400, detail="Week number must be a positive number")
    return week_number


def storage_path(week_number: int, file_name: str) -> str:
    """week-{n}/{epoch_ms}-{random8}-{name}"""
    return f"week-{week_number}/{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{file_name}"


class WeekService:
    def __init__(self, supabase: Client, storage: Optional[WeekFileStorage] = None):
        self.supabase = supabase
        self.storage = storage or WeekFileStorage(supabase)

    def list_weeks(self) -> List[WeekResponse]:
        """All weeks with their files, ascending by week number"""
        try:
            result = self.supabase.table("weeks")\
                .select(WEEK_SELECT)\
                .order("week_number", desc=False)\
                .execute()
            return [WeekResponse(**week) for week in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching weeks: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch weeks")

    def get_week(self, week_id: str) -> WeekResponse:
        try:
            result = self.supabase.table("weeks")\
                .select(WEEK_SELECT)\
                .eq("id", week_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching week {week_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch week")
        if not result.data:
            raise HTTPException(status_code=404, detail="Week not found")
        return WeekResponse(**result.data[0])

    def week_number_exists(self, week_number: int) -> bool:
        try:
            existing = self.supabase.table("weeks")\
                .select("id")\
                .eq("week_number", week_number)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error checking week number {week_number}: {e}")
            raise HTTPException(status_code=500, detail="Failed to check existing weeks")
        return bool(existing.data)

    @staticmethod
    def categorize_files(files: List[UploadFile]) -> Tuple[List[Tuple[UploadFile, str]], List[SkippedFile]]:
        """Split uploads into (file, file_type) pairs and unsupported files"""
        accepted = []
        skipped = []
        for upload in files:
            file_type = categorize(upload.content_type, upload.filename)
            if file_type is None:
                skipped.append(SkippedFile(
                    file_name=upload.filename or "",
                    reason="Unsupported file type"
                ))
                continue
            accepted.append((upload, file_type))
        return accepted, skipped

    async def create_week(
        self,
        week_number_raw: Optional[str],
        title: Optional[str],
        description: Optional[str],
        files: List[UploadFile],
        user_id: str
    ) -> WeekCreateResponse:
        """Validate, insert the week, then store each file; failed files are skipped, not fatal"""
        if not (week_number_raw or "").strip() or not (title or "").strip() or not (description or "").strip():
            raise HTTPException(
                status_code=400,
                detail="Week number, title, and description are required"
            )
        week_number = parse_week_number(week_number_raw)

        if self.week_number_exists(week_number):
            raise HTTPException(status_code=400, detail="Week number already exists")

        accepted, skipped = self.categorize_files(files)
        file_types = {file_type for _, file_type in accepted}
        if FILE_TYPE_PHOTO not in file_types:
            raise HTTPException(status_code=400, detail="At least one photo is required")
        if FILE_TYPE_PDF not in file_types:
            raise HTTPException(status_code=400, detail="At least one PDF file is required")

        try:
            result = self.supabase.table("weeks").insert({
                "week_number": week_number,
                "title": title.strip(),
                "description": description.strip(),
                "created_by": user_id
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create week")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Week creation error: {e}")
            raise HTTPException(status_code=500, detail="Failed to create week")
        week = result.data[0]

        outcomes = []
        for upload, file_type in accepted:
            outcomes.append(await self.store_file(week, upload, file_type, user_id))

        stored = [o.record for o in outcomes if o.stored]
        skipped.extend(
            SkippedFile(file_name=o.file_name, reason=o.reason)
            for o in outcomes if not o.stored
        )
        if skipped:
            logger.warning(
                f"Week {week_number} created with {len(skipped)} skipped file(s): "
                + ", ".join(f"{s.file_name} ({s.reason})" for s in skipped)
            )

        week["week_files"] = [r.model_dump() for r in stored]
        return WeekCreateResponse(
            message="Week created successfully",
            week=WeekResponse(**week),
            files=stored,
            skipped=skipped
        )

    async def store_file(self, week: dict, upload: UploadFile, file_type: str, user_id: str) -> FileUploadOutcome:
        """Upload one file and insert its week_files row"""
        file_name = os.path.basename(upload.filename or "") or "file"
        try:
            content = await upload.read()
        except Exception as e:
            logger.error(f"Failed to read upload {file_name}: {e}")
            return FileUploadOutcome(file_name=file_name, file_type=file_type, reason=f"Failed to read file: {e}")

        path = storage_path(week["week_number"], file_name)
        try:
            file_url = self.storage.upload_file(
                content, path, resolve_content_type(upload.content_type, upload.filename)
            )
        except Exception as e:
            logger.error(f"File upload error for {file_name}: {e}")
            return FileUploadOutcome(file_name=file_name, file_type=file_type, reason=f"Upload failed: {e}")

        try:
            result = self.supabase.table("week_files").insert({
                "week_id": week["id"],
                "file_name": file_name,
                "file_type": file_type,
                "file_url": file_url,
                "file_size": len(content),
                "uploaded_by": user_id
            }).execute()
        except Exception as e:
            logger.error(f"File record error for {file_name}: {e}")
            self.storage.delete_files([path])
            return FileUploadOutcome(file_name=file_name, file_type=file_type, reason=f"Failed to save file record: {e}")
        if not result.data:
            self.storage.delete_files([path])
            return FileUploadOutcome(file_name=file_name, file_type=file_type, reason="Failed to save file record")

        return FileUploadOutcome(
            file_name=file_name,
            file_type=file_type,
            record=WeekFileResponse(**result.data[0])
        )

    def update_week(self, week_id: str, week_data: WeekUpdate) -> WeekResponse:
        if not week_data.title or not week_data.title.strip():
            raise HTTPException(status_code=400, detail="Title is required")
        self.get_week(week_id)
        try:
            result = self.supabase.table("weeks")\
                .update({
                    "title": week_data.title.strip(),
                    "description": (week_data.description or "").strip() or None,
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", week_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to update week")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating week {week_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update week")
        return self.get_week(week_id)

    def _remove_stored_objects(self, file_rows: List[dict]):
        paths = [p for p in (self.storage.path_from_public_url(f.get("file_url")) for f in file_rows) if p]
        if paths and not self.storage.delete_files(paths):
            # Rows are removed regardless; orphaned objects can be cleaned from the bucket
            logger.warning(f"Storage cleanup failed for: {', '.join(paths)}")

    def delete_week(self, week_id: str) -> bool:
        """Delete the week, its file rows and their storage objects"""
        self.get_week(week_id)
        try:
            files_result = self.supabase.table("week_files")\
                .select("id, file_url")\
                .eq("week_id", week_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching week files for {week_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch week files")

        self._remove_stored_objects(files_result.data or [])

        try:
            self.supabase.table("week_files")\
                .delete()\
                .eq("week_id", week_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting week files records: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete week files")

        try:
            self.supabase.table("weeks")\
                .delete()\
                .eq("id", week_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting week {week_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete week")
        return True

    def delete_week_file(self, week_id: str, file_id: str) -> bool:
        try:
            result = self.supabase.table("week_files")\
                .select("id, file_url")\
                .eq("id", file_id)\
                .eq("week_id", week_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="File not found")

        self._remove_stored_objects(result.data)
        try:
            self.supabase.table("week_files").delete().eq("id", file_id).execute()
        except Exception as e:
            logger.error(f"Error deleting week file {file_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete file")
        return True
