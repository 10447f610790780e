from fastapi import APIRouter, Depends
from palace.database.supabase_client import get_supabase
from palace.modules.churches.schemas import (
    ChurchResponse, SeatUsageResponse, MemberResponse, MemberRoleUpdate,
    InvitationCreate, InvitationRoleUpdate, InvitationResponse, InvitationAccept,
    RoleCatalogResponse
)
from palace.modules.churches.service import ChurchService
from palace.core.dependencies import require_church_role, get_current_user_id
from palace.config.roles_config import get_role_catalog
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/churches", tags=["churches"])


def get_church_service(supabase: Client = Depends(get_supabase)) -> ChurchService:
    return ChurchService(supabase)


@router.get("/roles", response_model=RoleCatalogResponse)
async def list_roles():
    """Church and ministry role catalog"""
    return get_role_catalog()


@router.post("/invitations/accept", response_model=MemberResponse, status_code=201)
async def accept_invitation(
    accept_data: InvitationAccept,
    current_user: Dict = Depends(get_current_user_id),
    service: ChurchService = Depends(get_church_service)
):
    """Join a church with an invitation code sent to the caller's email"""
    return service.accept_invitation(accept_data.invitation_code, current_user["id"], current_user.get("email"))


@router.get("/{church_id}", response_model=ChurchResponse)
async def get_church(
    church_id: str,
    user_data: Dict = Depends(require_church_role("member")),
    service: ChurchService = Depends(get_church_service)
):
    return service.get_church(church_id)


@router.get("/{church_id}/seats", response_model=SeatUsageResponse)
async def get_seat_usage(
    church_id: str,
    user_data: Dict = Depends(require_church_role("admin")),
    service: ChurchService = Depends(get_church_service)
):
    return service.get_seat_usage(church_id)


@router.get("/{church_id}/members", response_model=List[MemberResponse])
async def list_members(
    church_id: str,
    user_data: Dict = Depends(require_church_role("member")),
    service: ChurchService = Depends(get_church_service)
):
    """List church members, newest first"""
    return service.list_members(church_id)


@router.put("/{church_id}/members/{member_id}", response_model=MemberResponse)
async def update_member_role(
    church_id: str,
    member_id: str,
    role_data: MemberRoleUpdate,
    user_data: Dict = Depends(require_church_role("admin")),
    service: ChurchService = Depends(get_church_service)
):
    return service.update_member_role(church_id, member_id, role_data.role)


@router.delete("/{church_id}/members/{member_id}", status_code=204)
async def remove_member(
    church_id: str,
    member_id: str,
    user_data: Dict = Depends(require_church_role("admin")),
    service: ChurchService = Depends(get_church_service)
):
    service.remove_member(church_id, member_id)
    return None


@router.get("/{church_id}/invitations", response_model=List[InvitationResponse])
async def list_invitations(
    church_id: str,
    user_data: Dict = Depends(require_church_role("admin")),
    service: ChurchService = Depends(get_church_service)
):
    return service.list_invitations(church_id)


@router.post("/{church_id}/invitations", response_model=InvitationResponse, status_code=201)
async def create_invitation(
    church_id: str,
    invitation: InvitationCreate,
    user_data: Dict = Depends(require_church_role("admin")),
    service: ChurchService = Depends(get_church_service)
):
    """Create an invitation (consumes a seat until accepted or expired)"""
    return service.create_invitation(church_id, invitation, user_data["id"])


@router.put("/{church_id}/invitations/{invitation_id}", response_model=InvitationResponse)
async def update_invitation_role(
    church_id: str,
    invitation_id: str,
    role_data: InvitationRoleUpdate,
    user_data: Dict = Depends(require_church_role("admin")),
    service: ChurchService = Depends(get_church_service)
):
    return service.update_invitation_role(church_id, invitation_id, role_data.role)


@router.delete("/{church_id}/invitations/{invitation_id}", status_code=204)
async def delete_invitation(
    church_id: str,
    invitation_id: str,
    user_data: Dict = Depends(require_church_role("admin")),
    service: ChurchService = Depends(get_church_service)
):
    service.delete_invitation(church_id, invitation_id)
    return None
