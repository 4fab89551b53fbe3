"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.auth.service import AuthService
from app.config.permissions_config import ROLE_ADMIN, get_role_permissions
from supabase import Client
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for the resolved user and role."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    db: Client = Depends(get_service_supabase)
) -> AuthService:
    return AuthService(supabase, db)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    return credentials.credentials


def get_current_user(
    request: Request,
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the bearer token to a user dict carrying its profile role"""
    cache = _get_request_cache(request)
    if "user" in cache:
        return cache["user"]
    user_data = auth_service.get_current_user(token)
    role, is_seeded_admin = auth_service.resolve_role(user_data)
    user_data["role"] = role
    user_data["is_seeded_admin"] = is_seeded_admin
    cache["user"] = user_data
    return user_data


def is_admin(user_data: dict) -> bool:
    return user_data.get("role") == ROLE_ADMIN


def has_permission(user_data: dict, permission: str) -> bool:
    return permission in get_role_permissions(user_data.get("role"))


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    def check_permission(user_data: dict = Depends(get_current_user)) -> dict:
        """Dependency to check if the user's role grants the required permission"""
        if not has_permission(user_data, required_permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {required_permission}"
            )
        return user_data
    return check_permission


def require_admin(user_data: dict = Depends(get_current_user)) -> dict:
    if not is_admin(user_data):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )
    return user_data


def is_group_member(group_id: str, user_id: str, supabase: Client) -> bool:
    try:
        member_result = supabase.table("group_members")\
            .select("id")\
            .eq("group_id", group_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
    except Exception as e:
        logger.error(f"Error checking membership of {user_id} in {group_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to verify group membership")
    return bool(member_result.data)


def check_group_member(group_id: str, user_data: dict, supabase: Client) -> dict:
    """Check if user is a member of a group; admins bypass the check"""
    if is_admin(user_data):
        return user_data
    if is_group_member(group_id, user_data["id"], supabase):
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Access denied"
    )
