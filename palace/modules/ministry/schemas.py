from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from palace.config.roles_config import MINISTRY_ROLES


class LeaderCreate(BaseModel):
    user_id: str
    role: str
    assigned_group_id: Optional[str] = None

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v not in MINISTRY_ROLES:
            raise ValueError(f"Role must be one of: {', '.join(MINISTRY_ROLES)}")
        return v


class LeaderProfile(BaseModel):
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class LeaderResponse(BaseModel):
    id: str
    church_id: str
    user_id: str
    role: str
    is_active: bool = True
    assigned_group_id: Optional[str] = None
    assigned_by: Optional[str] = None
    created_at: Optional[datetime] = None
    profile: Optional[LeaderProfile] = None
    group_name: Optional[str] = None


class SmallGroupResponse(BaseModel):
    id: str
    name: str
