"""
Core dependencies for route protection and church role checks
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from palace.database.supabase_client import get_supabase
from palace.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()

# Church roles ordered by privilege
ROLE_RANK = {"member": 1, "leader": 2, "admin": 3}


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Request-scoped cache of church roles, keyed by church_id."""
    if not hasattr(request.state, "church_roles"):
        request.state.church_roles = {}
    return request.state.church_roles


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def is_super_user(user_data: dict) -> bool:
    """Super users carry type=super_user in app_metadata, which only the service role can set"""
    app_metadata = user_data.get("app_metadata") or {}
    return app_metadata.get("type") == "super_user"


def get_church_role(
    user_id: str,
    church_id: str,
    supabase: Client,
    cache: Optional[Dict[str, Any]] = None
) -> Optional[str]:
    """Return the user's role in a church, or None when not a member."""
    if cache is not None and church_id in cache:
        return cache[church_id]
    try:
        result = supabase.table("church_members")\
            .select("role")\
            .eq("church_id", church_id)\
            .eq("user_id", user_id)\
            .execute()
    except Exception as e:
        logger.error(f"Error getting church role: {e}")
        return None
    role = result.data[0]["role"] if result.data else None
    if cache is not None:
        cache[church_id] = role
    return role


def require_church_role(minimum_role: str):
    """Factory for a dependency that requires at least `minimum_role` in the path's church"""
    required_rank = ROLE_RANK[minimum_role]

    def check_church_role(
        church_id: str,
        request: Request,
        user_data: dict = Depends(get_current_user_id),
        supabase: Client = Depends(get_supabase)
    ) -> dict:
        if is_super_user(user_data):
            return user_data
        role = get_church_role(user_data["id"], church_id, supabase, _get_request_cache(request))
        if role is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You must be a member of this church"
            )
        if ROLE_RANK.get(role, 0) < required_rank:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient church role. Required: {minimum_role}"
            )
        return user_data
    return check_church_role


def check_ministry_admin(
    church_id: str,
    request: Request,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Church admins and active site_admin ministry leaders may manage ministry leadership"""
    if is_super_user(user_data):
        return user_data
    user_id = user_data["id"]
    if get_church_role(user_id, church_id, supabase, _get_request_cache(request)) == "admin":
        return user_data
    result = supabase.table("ministry_leaders")\
        .select("id")\
        .eq("church_id", church_id)\
        .eq("user_id", user_id)\
        .eq("role", "site_admin")\
        .eq("is_active", True)\
        .execute()
    if result.data:
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must be a church admin or site admin to manage ministry leaders"
    )
