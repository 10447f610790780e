import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from supabase import Client
from palace.config import settings
from palace.modules.churches.schemas import (
    ChurchResponse, SeatUsageResponse, MemberResponse, MemberProfile,
    InvitationCreate, InvitationResponse
)
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

INVITATION_CODE_PREFIX = "CHURCH-"
INVITATION_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_invitation_code() -> str:
    return INVITATION_CODE_PREFIX + "".join(secrets.choice(INVITATION_CODE_ALPHABET) for _ in range(8))


def parse_timestamp(value) -> datetime:
    """Supabase returns ISO strings; older rows may use a trailing Z"""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ChurchService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_church(self, church_id: str) -> ChurchResponse:
        try:
            result = self.supabase.table("churches")\
                .select("*")\
                .eq("id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Church not found")
            return ChurchResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_seat_usage(self, church_id: str) -> SeatUsageResponse:
        """Members and pending invitations both occupy a seat"""
        church = self.get_church(church_id)
        try:
            members = self.supabase.table("church_members")\
                .select("id")\
                .eq("church_id", church_id)\
                .execute()
            pending = self.supabase.table("church_invitations")\
                .select("id")\
                .eq("church_id", church_id)\
                .eq("status", "pending")\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        used_members = len(members.data or [])
        used_pending = len(pending.data or [])
        return SeatUsageResponse(
            seat_limit=church.seat_limit,
            members=used_members,
            pending_invitations=used_pending,
            available_seats=max(church.seat_limit - used_members - used_pending, 0),
        )

    # Members

    def list_members(self, church_id: str) -> List[MemberResponse]:
        """List members newest first, joined with their profiles"""
        try:
            result = self.supabase.table("church_members")\
                .select("id, user_id, role, joined_at")\
                .eq("church_id", church_id)\
                .order("joined_at", desc=True)\
                .execute()
            rows = result.data or []
            if not rows:
                return []
            user_ids = [row["user_id"] for row in rows]
            profiles_result = self.supabase.table("profiles")\
                .select("id, display_name, username, avatar_url")\
                .in_("id", user_ids)\
                .execute()
            profiles = {p["id"]: p for p in profiles_result.data or []}
            members = []
            for row in rows:
                profile = profiles.get(row["user_id"])
                members.append(MemberResponse(
                    **row,
                    profile=MemberProfile(**{k: v for k, v in profile.items() if k != "id"}) if profile else None,
                ))
            return members
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_member_role(self, church_id: str, member_id: str, role: str) -> MemberResponse:
        try:
            result = self.supabase.table("church_members")\
                .update({"role": role})\
                .eq("id", member_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Member not found")
            logger.info(f"Member {member_id} in church {church_id} is now {role}")
            return MemberResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_member(self, church_id: str, member_id: str) -> bool:
        try:
            result = self.supabase.table("church_members")\
                .delete()\
                .eq("id", member_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Member not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Invitations

    def list_invitations(self, church_id: str) -> List[InvitationResponse]:
        try:
            result = self.supabase.table("church_invitations")\
                .select("*")\
                .eq("church_id", church_id)\
                .order("created_at", desc=True)\
                .execute()
            return [InvitationResponse(**row) for row in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_invitation(self, church_id: str, invitation: InvitationCreate, invited_by: str) -> InvitationResponse:
        """Create a pending invitation with a fresh code, if a seat is free"""
        usage = self.get_seat_usage(church_id)
        if usage.available_seats <= 0:
            raise HTTPException(status_code=400, detail="No available seats. Please upgrade your plan.")

        email = invitation.invited_email.lower()
        existing = self.supabase.table("church_invitations")\
            .select("id")\
            .eq("church_id", church_id)\
            .eq("invited_email", email)\
            .execute()
        if existing.data:
            raise HTTPException(status_code=409, detail="This email has already been invited")

        expires_at = datetime.now(timezone.utc) + timedelta(days=settings.invitation_ttl_days)
        try:
            result = self.supabase.table("church_invitations").insert({
                "church_id": church_id,
                "invited_email": email,
                "invitation_code": generate_invitation_code(),
                "role": invitation.role,
                "invited_by": invited_by,
                "status": "pending",
                "expires_at": expires_at.isoformat(),
            }).execute()
        except Exception as e:
            if "duplicate" in str(e).lower():
                raise HTTPException(status_code=409, detail="This email has already been invited")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create invitation")
        logger.info(f"Invitation created for church {church_id} ({invitation.role})")
        return InvitationResponse(**result.data[0])

    def update_invitation_role(self, church_id: str, invitation_id: str, role: str) -> InvitationResponse:
        try:
            result = self.supabase.table("church_invitations")\
                .update({"role": role})\
                .eq("id", invitation_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Invitation not found")
            return InvitationResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_invitation(self, church_id: str, invitation_id: str) -> bool:
        try:
            result = self.supabase.table("church_invitations")\
                .delete()\
                .eq("id", invitation_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Invitation not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def accept_invitation(self, invitation_code: str, user_id: str, email: Optional[str]) -> MemberResponse:
        """Redeem an invitation code for the signed-in user"""
        result = self.supabase.table("church_invitations")\
            .select("*")\
            .eq("invitation_code", invitation_code.strip().upper())\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Invitation not found")
        invitation = result.data[0]

        if invitation["status"] != "pending":
            raise HTTPException(status_code=400, detail=f"Invitation is {invitation['status']}")
        if parse_timestamp(invitation["expires_at"]) <= datetime.now(timezone.utc):
            self.mark_expired([invitation["id"]])
            raise HTTPException(status_code=400, detail="Invitation has expired")
        if not email or email.lower() != invitation["invited_email"].lower():
            raise HTTPException(status_code=403, detail="This invitation was sent to a different email address")

        church_id = invitation["church_id"]
        existing = self.supabase.table("church_members")\
            .select("id")\
            .eq("church_id", church_id)\
            .eq("user_id", user_id)\
            .execute()
        if existing.data:
            raise HTTPException(status_code=409, detail="You are already a member of this church")

        try:
            member = self.supabase.table("church_members").insert({
                "church_id": church_id,
                "user_id": user_id,
                "role": invitation["role"],
            }).execute()
            self.supabase.table("church_invitations")\
                .update({"status": "accepted"})\
                .eq("id", invitation["id"])\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not member.data:
            raise HTTPException(status_code=500, detail="Failed to join church")
        logger.info(f"User {user_id} joined church {church_id} as {invitation['role']}")
        return MemberResponse(**member.data[0])

    def get_expired_invitations(self) -> List[InvitationResponse]:
        """Pending invitations whose expiry has passed"""
        now = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("church_invitations")\
                .select("*")\
                .eq("status", "pending")\
                .lt("expires_at", now)\
                .execute()
            return [InvitationResponse(**row) for row in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def mark_expired(self, invitation_ids: List[str]) -> int:
        if not invitation_ids:
            return 0
        result = self.supabase.table("church_invitations")\
            .update({"status": "expired"})\
            .in_("id", invitation_ids)\
            .execute()
        return len(result.data or [])
