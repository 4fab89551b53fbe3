from pydantic import BaseModel, EmailStr
from typing import Optional
from app.modules.groups.schemas import DefaultGroupJoinResult


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AuthUser
    role: str
    is_admin: bool


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    role: str
    default_group: DefaultGroupJoinResult
    message: str


class MeResponse(BaseModel):
    user: AuthUser
    role: str
    is_admin: bool
    is_seeded_admin: bool = False
