from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional, List
from datetime import datetime
from palace.config.roles_config import CHURCH_ROLES, INVITABLE_ROLES


class ChurchResponse(BaseModel):
    id: str
    name: str
    seat_limit: int
    created_at: Optional[datetime] = None


class SeatUsageResponse(BaseModel):
    seat_limit: int
    members: int
    pending_invitations: int
    available_seats: int


class MemberProfile(BaseModel):
    display_name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None


class MemberResponse(BaseModel):
    id: str
    user_id: str
    role: str
    joined_at: Optional[datetime] = None
    profile: Optional[MemberProfile] = None


class MemberRoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v not in CHURCH_ROLES:
            raise ValueError(f"Role must be one of: {', '.join(CHURCH_ROLES)}")
        return v


class InvitationCreate(BaseModel):
    invited_email: EmailStr
    role: str = "member"

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v not in INVITABLE_ROLES:
            raise ValueError(f"Role must be one of: {', '.join(INVITABLE_ROLES)}")
        return v


class InvitationRoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v not in INVITABLE_ROLES:
            raise ValueError(f"Role must be one of: {', '.join(INVITABLE_ROLES)}")
        return v


class InvitationResponse(BaseModel):
    id: str
    church_id: str
    invited_email: str
    invitation_code: str
    role: str
    status: str
    invited_by: Optional[str] = None
    created_at: Optional[datetime] = None
    expires_at: datetime


class InvitationAccept(BaseModel):
    invitation_code: str


class RoleCatalogEntry(BaseModel):
    name: str
    label: str
    description: str
    requires_group: bool = False


class RoleCatalogResponse(BaseModel):
    church_roles: List[RoleCatalogEntry]
    invitable_roles: List[str]
    ministry_roles: List[RoleCatalogEntry]
