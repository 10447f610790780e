import logging
from supabase import Client
from palace.config.roles_config import role_requires_group
from palace.modules.ministry.schemas import LeaderCreate, LeaderResponse, LeaderProfile, SmallGroupResponse
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class MinistryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_leaders(self, church_id: str) -> List[LeaderResponse]:
        """Leaders ordered by role, with profile and assigned group name"""
        try:
            result = self.supabase.table("ministry_leaders")\
                .select("*, profiles:user_id (display_name, avatar_url)")\
                .eq("church_id", church_id)\
                .order("role")\
                .execute()
            rows = result.data or []
            group_ids = list({row["assigned_group_id"] for row in rows if row.get("assigned_group_id")})
            group_names = {}
            if group_ids:
                groups = self.supabase.table("small_groups")\
                    .select("id, name")\
                    .in_("id", group_ids)\
                    .execute()
                group_names = {g["id"]: g["name"] for g in groups.data or []}

            leaders = []
            for row in rows:
                profile = row.pop("profiles", None)
                leaders.append(LeaderResponse(
                    **row,
                    profile=LeaderProfile(**profile) if profile else None,
                    group_name=group_names.get(row.get("assigned_group_id")),
                ))
            return leaders
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def add_leader(self, church_id: str, leader_data: LeaderCreate, assigned_by: str) -> LeaderResponse:
        if role_requires_group(leader_data.role) and not leader_data.assigned_group_id:
            raise HTTPException(status_code=400, detail="Please select a group for the small group leader")

        member = self.supabase.table("church_members")\
            .select("id")\
            .eq("church_id", church_id)\
            .eq("user_id", leader_data.user_id)\
            .execute()
        if not member.data:
            raise HTTPException(status_code=400, detail="Leaders must be members of the church")

        existing = self.supabase.table("ministry_leaders")\
            .select("id")\
            .eq("church_id", church_id)\
            .eq("user_id", leader_data.user_id)\
            .eq("role", leader_data.role)\
            .execute()
        if existing.data:
            raise HTTPException(status_code=409, detail="This member already has this role")

        try:
            result = self.supabase.table("ministry_leaders").insert({
                "church_id": church_id,
                "user_id": leader_data.user_id,
                "role": leader_data.role,
                "assigned_group_id": leader_data.assigned_group_id if role_requires_group(leader_data.role) else None,
                "assigned_by": assigned_by,
                "is_active": True,
            }).execute()
        except Exception as e:
            # 23505 is the Postgres unique violation code
            if "23505" in str(e) or "duplicate" in str(e).lower():
                raise HTTPException(status_code=409, detail="This member already has this role")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to add leader")
        logger.info(f"Assigned {leader_data.role} to {leader_data.user_id} in church {church_id}")
        return LeaderResponse(**result.data[0])

    def remove_leader(self, church_id: str, leader_id: str) -> bool:
        try:
            result = self.supabase.table("ministry_leaders")\
                .delete()\
                .eq("id", leader_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Leader not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def toggle_active(self, church_id: str, leader_id: str) -> LeaderResponse:
        """Flip is_active for a leader"""
        try:
            current = self.supabase.table("ministry_leaders")\
                .select("is_active")\
                .eq("id", leader_id)\
                .eq("church_id", church_id)\
                .execute()
            if not current.data:
                raise HTTPException(status_code=404, detail="Leader not found")
            result = self.supabase.table("ministry_leaders")\
                .update({"is_active": not current.data[0]["is_active"]})\
                .eq("id", leader_id)\
                .execute()
            return LeaderResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_small_groups(self, church_id: str) -> List[SmallGroupResponse]:
        try:
            result = self.supabase.table("small_groups")\
                .select("id, name")\
                .eq("church_id", church_id)\
                .eq("is_active", True)\
                .execute()
            return [SmallGroupResponse(**row) for row in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
