from fastapi import APIRouter, Depends, HTTPException
from app.modules.auth.schemas import (
    LoginRequest, LoginResponse, RegisterRequest, RegisterResponse,
    MeResponse, AuthUser
)
from app.modules.auth.service import AuthService
from app.core.dependencies import get_auth_service, get_current_token, get_current_user, is_admin
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new student and add them to the default group"""
    return service.register(register_data)


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    if not service.logout(token):
        raise HTTPException(status_code=500, detail="Sign out failed")
    return {"message": "Signed out successfully"}


@router.get("/me", response_model=MeResponse)
async def me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user and their role"""
    return MeResponse(
        user=AuthUser(
            id=current_user["id"],
            email=current_user.get("email"),
            full_name=current_user.get("user_metadata", {}).get("full_name")
        ),
        role=current_user["role"],
        is_admin=is_admin(current_user),
        is_seeded_admin=current_user.get("is_seeded_admin", False)
    )
