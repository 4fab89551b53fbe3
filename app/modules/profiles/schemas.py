from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class RoleUpdate(BaseModel):
    role: str


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
