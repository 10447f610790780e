from fastapi import APIRouter, Depends
from palace.database.supabase_client import get_supabase
from palace.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, MeResponse
)
from palace.modules.auth.service import AuthService
from palace.core.dependencies import get_current_user_id, get_current_token, is_super_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
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
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
):
    """Current user with church memberships (drives which admin screens the client shows)."""
    return MeResponse(
        **current_user,
        is_super_user=is_super_user(current_user),
        churches=service.list_memberships(current_user["id"]),
    )
