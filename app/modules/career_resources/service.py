from supabase import Client
from app.config.settings import settings
from app.modules.career_resources.schemas import (
    CareerResourceCreate, CareerResourceUpdate, CareerResourceResponse,
    CareerResourceFileResponse, CareerResourceFilesResponse, SkippedResourceFile,
    RESOURCE_TYPES
)
from app.modules.weeks.file_types import resolve_content_type
from app.modules.weeks.storage import WeekFileStorage
from typing import Dict, List, Optional, Tuple
from datetime import datetime, timezone
from fastapi import HTTPException, UploadFile
import logging
import os
import uuid

logger = logging.getLogger(__name__)

RESOURCE_SELECT = "*, career_resource_files(*)"

FILE_TYPE_PHOTO = "photo"
FILE_TYPE_PDF = "pdf"
FILE_TYPE_PPT = "ppt"

PRESENTATION_EXTENSIONS = (".ppt", ".pptx")


def categorize_resource_file(content_type: Optional[str], filename: Optional[str]) -> Optional[str]:
    """Map an upload to photo/pdf/ppt. None means the file is not supported."""
    mime = resolve_content_type(content_type, filename)
    if mime.startswith("image/"):
        return FILE_TYPE_PHOTO
    if mime == "application/pdf":
        return FILE_TYPE_PDF
    if "presentation" in mime or "powerpoint" in mime or (filename or "").lower().endswith(PRESENTATION_EXTENSIONS):
        return FILE_TYPE_PPT
    return None


def bucket_for(file_type: str) -> Optional[str]:
    return {
        FILE_TYPE_PHOTO: settings.career_photos_bucket,
        FILE_TYPE_PDF: settings.career_pdfs_bucket,
        FILE_TYPE_PPT: settings.career_ppts_bucket,
    }.get(file_type)


def object_name(file_name: str) -> str:
    """{uuid}.{extension}"""
    extension = file_name.rsplit(".", 1)[-1] if "." in file_name else ""
    return f"{uuid.uuid4()}.{extension}"


def _clean(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


class CareerResourceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def storage(self, file_type: str) -> WeekFileStorage:
        return WeekFileStorage(self.supabase, bucket_name=bucket_for(file_type))

    def list_resources(self) -> List[CareerResourceResponse]:
        """Resources with their files; by display_order, newest first within an order"""
        try:
            result = self.supabase.table("career_resources")\
                .select(RESOURCE_SELECT)\
                .order("display_order", desc=False)\
                .order("created_at", desc=True)\
                .execute()
            return [CareerResourceResponse(**r) for r in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching career resources: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch career resources")

    def get_resource(self, resource_id: str) -> CareerResourceResponse:
        try:
            result = self.supabase.table("career_resources")\
                .select(RESOURCE_SELECT)\
                .eq("id", resource_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching career resource {resource_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch career resource")
        if not result.data:
            raise HTTPException(status_code=404, detail="Career resource not found")
        return CareerResourceResponse(**result.data[0])

    @staticmethod
    def _check_resource_type(resource_type: str):
        if resource_type not in RESOURCE_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"Resource type must be one of: {', '.join(RESOURCE_TYPES)}"
            )

    def create_resource(self, resource_data: CareerResourceCreate, user_id: str) -> CareerResourceResponse:
        if not _clean(resource_data.title) or not resource_data.resource_type:
            raise HTTPException(status_code=400, detail="Title and resource type are required")
        self._check_resource_type(resource_data.resource_type)
        try:
            result = self.supabase.table("career_resources").insert({
                "title": resource_data.title.strip(),
                "description": _clean(resource_data.description),
                "resource_type": resource_data.resource_type,
                "content_text": _clean(resource_data.content_text),
                "display_order": resource_data.display_order or 0,
                "is_featured": bool(resource_data.is_featured),
                "created_by": user_id,
                "updated_by": user_id
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create career resource")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating career resource: {e}")
            raise HTTPException(status_code=500, detail="Failed to create career resource")
        return CareerResourceResponse(**result.data[0])

    def update_resource(
        self, resource_id: str, resource_data: CareerResourceUpdate, user_id: str
    ) -> CareerResourceResponse:
        """Title is required; other fields change only when present in the request"""
        if not _clean(resource_data.title):
            raise HTTPException(status_code=400, detail="Title is required")
        sent = resource_data.model_fields_set
        update_data = {
            "title": resource_data.title.strip(),
            "updated_by": user_id,
            "updated_at": datetime.now(timezone.utc).isoformat()
        }
        if "description" in sent:
            update_data["description"] = _clean(resource_data.description)
        if "content_text" in sent:
            update_data["content_text"] = _clean(resource_data.content_text)
        if "resource_type" in sent and resource_data.resource_type is not None:
            self._check_resource_type(resource_data.resource_type)
            update_data["resource_type"] = resource_data.resource_type
        if "display_order" in sent and resource_data.display_order is not None:
            update_data["display_order"] = resource_data.display_order
        if "is_featured" in sent and resource_data.is_featured is not None:
            update_data["is_featured"] = resource_data.is_featured

        self.get_resource(resource_id)
        try:
            self.supabase.table("career_resources")\
                .update(update_data)\
                .eq("id", resource_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating career resource {resource_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update career resource")
        return self.get_resource(resource_id)

    def _remove_stored_objects(self, files: List[CareerResourceFileResponse]):
        by_type: Dict[str, List[str]] = {}
        for f in files:
            if bucket_for(f.file_type) is None:
                continue
            path = self.storage(f.file_type).path_from_public_url(f.file_url)
            if path:
                by_type.setdefault(f.file_type, []).append(path)
        for file_type, paths in by_type.items():
            if not self.storage(file_type).delete_files(paths):
                logger.warning(f"Storage cleanup failed for: {', '.join(paths)}")

    def delete_resource(self, resource_id: str) -> bool:
        """Delete the resource, its file rows and their storage objects"""
        resource = self.get_resource(resource_id)
        self._remove_stored_objects(resource.career_resource_files)

        try:
            self.supabase.table("career_resource_files")\
                .delete()\
                .eq("career_resource_id", resource_id)\
                .execute()
            self.supabase.table("career_resources")\
                .delete()\
                .eq("id", resource_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting career resource {resource_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete career resource")
        return True

    async def upload_files(
        self, resource_id: Optional[str], files: List[UploadFile], user_id: str
    ) -> CareerResourceFilesResponse:
        """Store each file in the bucket for its type; failed files are skipped, not fatal"""
        if not (resource_id or "").strip():
            raise HTTPException(status_code=400, detail="Career resource ID is required")
        if not files:
            raise HTTPException(status_code=400, detail="At least one file is required")
        self.get_resource(resource_id)

        stored = []
        skipped = []
        for upload in files:
            file_name = os.path.basename(upload.filename or "") or "file"
            file_type = categorize_resource_file(upload.content_type, upload.filename)
            if file_type is None:
                skipped.append(SkippedResourceFile(file_name=file_name, reason="Unsupported file type"))
                continue
            record, reason = await self._store_file(resource_id, upload, file_name, file_type, user_id)
            if record is None:
                skipped.append(SkippedResourceFile(file_name=file_name, reason=reason))
            else:
                stored.append(record)

        if skipped:
            logger.warning(
                f"Career resource {resource_id}: {len(skipped)} file(s) skipped: "
                + ", ".join(f"{s.file_name} ({s.reason})" for s in skipped)
            )
        return CareerResourceFilesResponse(files=stored, skipped=skipped)

    async def _store_file(
        self, resource_id: str, upload: UploadFile, file_name: str, file_type: str, user_id: str
    ) -> Tuple[Optional[CareerResourceFileResponse], Optional[str]]:
        """Upload one file and insert its row; returns (record, None) or (None, reason)"""
        try:
            content = await upload.read()
        except Exception as e:
            logger.error(f"Failed to read upload {file_name}: {e}")
            return None, f"Failed to read file: {e}"

        storage = self.storage(file_type)
        path = object_name(file_name)
        try:
            file_url = storage.upload_file(
                content, path, resolve_content_type(upload.content_type, upload.filename)
            )
        except Exception as e:
            logger.error(f"Career resource upload error for {file_name}: {e}")
            return None, f"Upload failed: {e}"

        try:
            result = self.supabase.table("career_resource_files").insert({
                "career_resource_id": resource_id,
                "file_name": file_name,
                "file_type": file_type,
                "file_url": file_url,
                "file_size": len(content),
                "uploaded_by": user_id
            }).execute()
        except Exception as e:
            logger.error(f"Career resource file record error for {file_name}: {e}")
            storage.delete_files([path])
            return None, f"Failed to save file record: {e}"
        if not result.data:
            storage.delete_files([path])
            return None, "Failed to save file record"
        return CareerResourceFileResponse(**result.data[0]), None
