import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from fakes import ADMIN_TOKEN, MEMBER_TOKEN, OUTSIDER_TOKEN, auth
from palace.modules.churches import expiry_scheduler
from palace.modules.churches.service import generate_invitation_code, parse_timestamp


def _iso(days):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _invitation(db, church, email="outsider@gracechurch.org", status="pending", days=7, role="member"):
    return db.seed("church_invitations", {
        "church_id": church["id"],
        "invited_email": email,
        "invitation_code": generate_invitation_code(),
        "role": role,
        "status": status,
        "invited_by": "user-admin",
        "expires_at": _iso(days),
    })


def test_generate_invitation_code_format():
    code = generate_invitation_code()
    assert code.startswith("CHURCH-")
    assert len(code) == 15
    assert code[7:].isalnum() and code[7:].upper() == code[7:]


def test_parse_timestamp_accepts_trailing_z():
    parsed = parse_timestamp("2025-03-01T10:00:00Z")
    assert parsed.tzinfo is not None
    assert parsed == datetime(2025, 3, 1, 10, tzinfo=timezone.utc)


def test_member_can_read_church(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}", headers=auth(MEMBER_TOKEN))
    assert response.status_code == 200
    assert response.json()["name"] == "Grace Fellowship"


def test_non_member_is_rejected(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}", headers=auth(OUTSIDER_TOKEN))
    assert response.status_code == 403
    assert response.json()["detail"] == "You must be a member of this church"


def test_missing_token_is_rejected(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}")
    assert response.status_code in (401, 403)


def test_invalid_token_is_unauthorized(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}", headers=auth("bogus"))
    assert response.status_code == 401


def test_super_user_bypasses_membership(client, db, church):
    db.auth.add_user("super-token", "user-super", "ops@palace.test", super_user=True)
    response = client.get(f"/api/v1/churches/{church['id']}/seats", headers=auth("super-token"))
    assert response.status_code == 200


def test_member_cannot_see_seats(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}/seats", headers=auth(MEMBER_TOKEN))
    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient church role. Required: admin"


def test_seat_usage_counts_pending_invitations(client, db, church):
    _invitation(db, church)
    _invitation(db, church, email="gone@gracechurch.org", status="expired")
    response = client.get(f"/api/v1/churches/{church['id']}/seats", headers=auth(ADMIN_TOKEN))
    assert response.json() == {
        "seat_limit": 3,
        "members": 2,
        "pending_invitations": 1,
        "available_seats": 0,
    }


def test_list_members_newest_first_with_profiles(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}/members", headers=auth(MEMBER_TOKEN))
    assert response.status_code == 200
    members = response.json()
    assert [m["user_id"] for m in members] == ["user-member", "user-admin"]
    assert members[0]["profile"]["display_name"] == "Ben"


def test_update_member_role(client, db, church):
    member = db.rows("church_members")[1]
    response = client.put(
        f"/api/v1/churches/{church['id']}/members/{member['id']}",
        json={"role": "leader"},
        headers=auth(ADMIN_TOKEN),
    )
    assert response.status_code == 200
    assert response.json()["role"] == "leader"
    assert db.rows("church_members")[1]["role"] == "leader"


def test_update_member_role_rejects_unknown_role(client, db, church):
    member = db.rows("church_members")[1]
    response = client.put(
        f"/api/v1/churches/{church['id']}/members/{member['id']}",
        json={"role": "bishop"},
        headers=auth(ADMIN_TOKEN),
    )
    assert response.status_code == 422


def test_remove_member(client, db, church):
    member = db.rows("church_members")[1]
    response = client.delete(f"/api/v1/churches/{church['id']}/members/{member['id']}", headers=auth(ADMIN_TOKEN))
    assert response.status_code == 204
    assert len(db.rows("church_members")) == 1

    missing = client.delete(f"/api/v1/churches/{church['id']}/members/{member['id']}", headers=auth(ADMIN_TOKEN))
    assert missing.status_code == 404


def test_create_invitation(client, db, church):
    response = client.post(
        f"/api/v1/churches/{church['id']}/invitations",
        json={"invited_email": "New.Person@GraceChurch.org", "role": "leader"},
        headers=auth(ADMIN_TOKEN),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["invited_email"] == "new.person@gracechurch.org"
    assert body["status"] == "pending"
    assert body["role"] == "leader"
    assert body["invitation_code"].startswith("CHURCH-")
    assert body["invited_by"] == "user-admin"
    expires = parse_timestamp(body["expires_at"])
    assert timedelta(days=29) < expires - datetime.now(timezone.utc) <= timedelta(days=30)


def test_create_invitation_defaults_to_member(client, church):
    response = client.post(
        f"/api/v1/churches/{church['id']}/invitations",
        json={"invited_email": "someone@gracechurch.org"},
        headers=auth(ADMIN_TOKEN),
    )
    assert response.json()["role"] == "member"


def test_create_invitation_rejects_admin_role(client, church):
    response = client.post(
        f"/api/v1/churches/{church['id']}/invitations",
        json={"invited_email": "someone@gracechurch.org", "role": "admin"},
        headers=auth(ADMIN_TOKEN),
    )
    assert response.status_code == 422


def test_create_invitation_without_seats(client, db, church):
    _invitation(db, church)
    response = client.post(
        f"/api/v1/churches/{church['id']}/invitations",
        json={"invited_email": "late@gracechurch.org"},
        headers=auth(ADMIN_TOKEN),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "No available seats. Please upgrade your plan."


def test_create_invitation_twice_for_same_email(client, db, church):
    db.rows("churches")[0]["seat_limit"] = 10
    _invitation(db, church, email="twice@gracechurch.org")
    response = client.post(
        f"/api/v1/churches/{church['id']}/invitations",
        json={"invited_email": "Twice@gracechurch.org"},
        headers=auth(ADMIN_TOKEN),
    )
    assert response.status_code == 409


def test_member_cannot_invite(client, church):
    response = client.post(
        f"/api/v1/churches/{church['id']}/invitations",
        json={"invited_email": "someone@gracechurch.org"},
        headers=auth(MEMBER_TOKEN),
    )
    assert response.status_code == 403


def test_update_and_delete_invitation(client, db, church):
    invitation = _invitation(db, church)
    url = f"/api/v1/churches/{church['id']}/invitations/{invitation['id']}"

    updated = client.put(url, json={"role": "leader"}, headers=auth(ADMIN_TOKEN))
    assert updated.json()["role"] == "leader"

    assert client.delete(url, headers=auth(ADMIN_TOKEN)).status_code == 204
    assert client.delete(url, headers=auth(ADMIN_TOKEN)).status_code == 404


def test_list_invitations(client, db, church):
    _invitation(db, church)
    response = client.get(f"/api/v1/churches/{church['id']}/invitations", headers=auth(ADMIN_TOKEN))
    assert response.status_code == 200
    assert [i["invited_email"] for i in response.json()] == ["outsider@gracechurch.org"]


def test_accept_invitation(client, db, church):
    invitation = _invitation(db, church, role="leader")
    response = client.post(
        "/api/v1/churches/invitations/accept",
        json={"invitation_code": invitation["invitation_code"].lower()},
        headers=auth(OUTSIDER_TOKEN),
    )
    assert response.status_code == 201
    assert response.json()["user_id"] == "user-outsider"
    assert response.json()["role"] == "leader"
    assert db.rows("church_invitations")[0]["status"] == "accepted"
    assert len(db.rows("church_members")) == 3


def test_accept_expired_invitation_marks_it_expired(client, db, church):
    invitation = _invitation(db, church, days=-1)
    response = client.post(
        "/api/v1/churches/invitations/accept",
        json={"invitation_code": invitation["invitation_code"]},
        headers=auth(OUTSIDER_TOKEN),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invitation has expired"
    assert db.rows("church_invitations")[0]["status"] == "expired"


def test_accept_invitation_for_another_email(client, db, church):
    invitation = _invitation(db, church, email="someone-else@gracechurch.org")
    response = client.post(
        "/api/v1/churches/invitations/accept",
        json={"invitation_code": invitation["invitation_code"]},
        headers=auth(OUTSIDER_TOKEN),
    )
    assert response.status_code == 403


@pytest.mark.parametrize("status", ["accepted", "expired"])
def test_accept_non_pending_invitation(client, db, church, status):
    invitation = _invitation(db, church, status=status)
    response = client.post(
        "/api/v1/churches/invitations/accept",
        json={"invitation_code": invitation["invitation_code"]},
        headers=auth(OUTSIDER_TOKEN),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == f"Invitation is {status}"


def test_accept_unknown_code(client, church):
    response = client.post(
        "/api/v1/churches/invitations/accept",
        json={"invitation_code": "CHURCH-NOPE0000"},
        headers=auth(OUTSIDER_TOKEN),
    )
    assert response.status_code == 404


def test_role_catalog(client):
    response = client.get("/api/v1/churches/roles")
    assert response.status_code == 200
    body = response.json()
    assert body["invitable_roles"] == ["member", "leader"]
    small_group = next(r for r in body["ministry_roles"] if r["name"] == "small_group_leader")
    assert small_group["requires_group"] is True


def test_expiry_sweep_only_touches_stale_pending(db, church, monkeypatch):
    stale = _invitation(db, church, email="stale@gracechurch.org", days=-2)
    fresh = _invitation(db, church, email="fresh@gracechurch.org", days=5)
    accepted = _invitation(db, church, email="done@gracechurch.org", status="accepted", days=-2)
    monkeypatch.setattr(expiry_scheduler, "get_service_supabase", lambda: db)

    assert asyncio.run(expiry_scheduler.expire_stale_invitations()) == 1

    statuses = {row["id"]: row["status"] for row in db.rows("church_invitations")}
    assert statuses == {stale["id"]: "expired", fresh["id"]: "pending", accepted["id"]: "accepted"}


def test_expiry_sweep_logs_and_survives_errors(db, monkeypatch):
    db.errors[("church_invitations", "select")] = RuntimeError("database offline")
    monkeypatch.setattr(expiry_scheduler, "get_service_supabase", lambda: db)
    assert asyncio.run(expiry_scheduler.expire_stale_invitations()) == 0
