from pydantic import BaseModel, EmailStr
from typing import Optional, List


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    display_name: Optional[str] = None
    username: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str


class ChurchMembership(BaseModel):
    church_id: str
    role: str
    church_name: Optional[str] = None


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: dict = {}
    app_metadata: dict = {}
    is_super_user: bool = False
    churches: List[ChurchMembership] = []
