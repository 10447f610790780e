from fastapi import APIRouter, Depends
from palace.database.supabase_client import get_supabase
from palace.modules.ministry.schemas import LeaderCreate, LeaderResponse, SmallGroupResponse
from palace.modules.ministry.service import MinistryService
from palace.core.dependencies import require_church_role, check_ministry_admin
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/churches/{church_id}/ministry", tags=["ministry"])


def get_ministry_service(supabase: Client = Depends(get_supabase)) -> MinistryService:
    return MinistryService(supabase)


@router.get("/leaders", response_model=List[LeaderResponse])
async def list_leaders(
    church_id: str,
    user_data: Dict = Depends(require_church_role("member")),
    service: MinistryService = Depends(get_ministry_service)
):
    return service.list_leaders(church_id)


@router.post("/leaders", response_model=LeaderResponse, status_code=201)
async def add_leader(
    church_id: str,
    leader_data: LeaderCreate,
    user_data: Dict = Depends(check_ministry_admin),
    service: MinistryService = Depends(get_ministry_service)
):
    """Assign a ministry role to a church member"""
    return service.add_leader(church_id, leader_data, user_data["id"])


@router.delete("/leaders/{leader_id}", status_code=204)
async def remove_leader(
    church_id: str,
    leader_id: str,
    user_data: Dict = Depends(check_ministry_admin),
    service: MinistryService = Depends(get_ministry_service)
):
    service.remove_leader(church_id, leader_id)
    return None


@router.post("/leaders/{leader_id}/toggle", response_model=LeaderResponse)
async def toggle_leader(
    church_id: str,
    leader_id: str,
    user_data: Dict = Depends(check_ministry_admin),
    service: MinistryService = Depends(get_ministry_service)
):
    """Activate or deactivate a leader"""
    return service.toggle_active(church_id, leader_id)


@router.get("/groups", response_model=List[SmallGroupResponse])
async def list_small_groups(
    church_id: str,
    user_data: Dict = Depends(require_church_role("member")),
    service: MinistryService = Depends(get_ministry_service)
):
    return service.list_small_groups(church_id)
