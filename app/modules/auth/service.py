import hashlib
import logging
import time
from supabase import Client
from app.modules.auth.schemas import (
    LoginRequest, LoginResponse, RegisterRequest, RegisterResponse, AuthUser
)
from app.modules.groups.service import GroupService
from app.config.permissions_config import ROLE_ADMIN, ROLE_STUDENT
from app.config.settings import settings
from fastapi import HTTPException
from typing import Dict, Any, Optional, Tuple

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client, db: Optional[Client] = None):
        # supabase talks to Auth; db reads/writes tables (service-role when configured)
        self.supabase = supabase
        self.db = db or supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user, create their student profile and join the default group"""
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

        user_id = auth_response.user.id
        email = auth_response.user.email or register_data.email
        try:
            self.db.table("profiles").upsert({
                "id": user_id,
                "email": email,
                "full_name": register_data.full_name,
                "role": ROLE_STUDENT
            }).execute()
        except Exception as e:
            # The auth.users trigger creates the profile as well
            logger.warning(f"Profile upsert failed for {user_id}: {e}")

        default_group = GroupService(self.db).join_default_group(user_id)
        return RegisterResponse(
            user_id=user_id,
            email=email,
            role=ROLE_STUDENT,
            default_group=default_group,
            message="User registered successfully"
        )

    def login(self, login_data: LoginRequest) -> LoginResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid email or password")
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

        user = auth_response.user
        user_data = {"id": user.id, "email": user.email or login_data.email}
        role, _ = self.resolve_role(user_data)
        return LoginResponse(
            access_token=auth_response.session.access_token,
            token_type="bearer",
            user=AuthUser(id=user.id, email=user_data["email"]),
            role=role,
            is_admin=role == ROLE_ADMIN
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return dict(user_data)
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return dict(user_data)
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def resolve_role(self, user_data: Dict[str, Any]) -> Tuple[str, bool]:
        """Return (role, is_seeded_admin). Seeded admin emails win over the profile row."""
        email = (user_data.get("email") or "").lower()
        if email and email in settings.get_seeded_admin_emails():
            return ROLE_ADMIN, True
        try:
            result = self.db.table("profiles")\
                .select("role")\
                .eq("id", user_data["id"])\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting role for {user_data['id']}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load user profile")
        if not result.data:
            return ROLE_STUDENT, False
        return result.data[0].get("role") or ROLE_STUDENT, False

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Supabase tokens are stateless JWTs; sign_out only ends the SDK session
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
