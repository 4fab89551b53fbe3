from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime


class SchoolCreate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    visit_date: Optional[date] = None


class SchoolUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    visit_date: Optional[date] = None


class SchoolResponse(BaseModel):
    id: str
    name: str
    location: Optional[str] = None
    visit_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
