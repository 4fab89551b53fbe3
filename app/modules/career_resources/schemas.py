from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

RESOURCE_TYPES = ("photo", "pdf", "ppt", "text")


class CareerResourceCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    resource_type: Optional[str] = None
    content_text: Optional[str] = None
    display_order: Optional[int] = None
    is_featured: Optional[bool] = None


class CareerResourceUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    resource_type: Optional[str] = None
    content_text: Optional[str] = None
    display_order: Optional[int] = None
    is_featured: Optional[bool] = None


class CareerResourceFileResponse(BaseModel):
    id: str
    career_resource_id: str
    file_name: str
    file_type: str
    file_url: str
    file_size: Optional[int] = None
    uploaded_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CareerResourceResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    resource_type: str
    content_text: Optional[str] = None
    display_order: int = 0
    is_featured: bool = False
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    career_resource_files: List[CareerResourceFileResponse] = []

    class Config:
        from_attributes = True


class SkippedResourceFile(BaseModel):
    file_name: str
    reason: str


class CareerResourceFilesResponse(BaseModel):
    files: List[CareerResourceFileResponse]
    skipped: List[SkippedResourceFile] = []
