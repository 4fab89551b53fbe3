from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class WeekUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class WeekFileResponse(BaseModel):
    id: str
    week_id: str
    file_name: str
    file_type: str
    file_url: str
    file_size: Optional[int] = None
    uploaded_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WeekResponse(BaseModel):
    id: str
    week_number: int
    title: str
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    week_files: List[WeekFileResponse] = []

    class Config:
        from_attributes = True


class FileUploadOutcome(BaseModel):
    """Result of storing one uploaded file: either a record or the reason it was skipped."""
    file_name: str
    file_type: Optional[str] = None
    record: Optional[WeekFileResponse] = None
    reason: Optional[str] = None

    @property
    def stored(self) -> bool:
        return self.record is not None


class SkippedFile(BaseModel):
    file_name: str
    reason: str


class WeekCreateResponse(BaseModel):
    message: str
    week: WeekResponse
    files: List[WeekFileResponse]
    skipped: List[SkippedFile] = []


class WeekListResponse(BaseModel):
    weeks: List[WeekResponse]
