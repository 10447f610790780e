import hashlib
import logging
import time
from supabase import Client
from palace.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, ChurchMembership
from fastapi import HTTPException
from typing import Dict, Any, List

logger = logging.getLogger(__name__)

# Short-lived token -> user cache; the narration client and study pages fire many parallel calls per token
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Sign up with Supabase Auth and create the matching profile row"""
        metadata = {}
        if register_data.display_name:
            metadata["display_name"] = register_data.display_name
        if register_data.username:
            metadata["username"] = register_data.username
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {"data": metadata},
            })
        except Exception as e:
            message = str(e).lower()
            if "already registered" in message or "already exists" in message:
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {e}")

        if not auth_response.user:
            raise HTTPException(status_code=400, detail="Failed to register user")

        user_id = auth_response.user.id
        try:
            self.supabase.table("profiles").upsert({
                "id": user_id,
                "display_name": register_data.display_name or register_data.email.split("@")[0],
                "username": register_data.username,
            }).execute()
        except Exception as e:
            # Profiles are also created by a database trigger; a failure here is not fatal
            logger.warning(f"Profile upsert failed for {user_id}: {e}")

        return RegisterResponse(
            user_id=user_id,
            email=auth_response.user.email or register_data.email,
            message="User registered successfully",
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password,
            })
        except Exception as e:
            message = str(e).lower()
            if "invalid" in message or "credentials" in message:
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {e}")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=getattr(auth_response.session, "refresh_token", None),
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email,
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to user data, served from the TTL cache when possible."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        cached = _AUTH_USER_CACHE.get(cache_key)
        if cached is not None:
            user_data, expiry = cached
            if now < expiry:
                return user_data
            _AUTH_USER_CACHE.pop(cache_key, None)

        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.debug(f"Token validation failed: {e}")
            raise HTTPException(status_code=401, detail="Invalid or expired token")
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
        return user_data

    def logout(self, token: str) -> bool:
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.debug(f"Sign out failed: {e}")
            return False

    def list_memberships(self, user_id: str) -> List[ChurchMembership]:
        result = self.supabase.table("church_members")\
            .select("church_id, role, churches(name)")\
            .eq("user_id", user_id)\
            .execute()
        memberships = []
        for row in result.data or []:
            church = row.get("churches") or {}
            memberships.append(ChurchMembership(
                church_id=row["church_id"],
                role=row["role"],
                church_name=church.get("name"),
            ))
        return memberships
