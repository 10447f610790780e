import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SUPABASE_URL", "https://project.supabase.test")
os.environ.setdefault("SUPABASE_KEY", "anon-key")

import pytest
from fastapi.testclient import TestClient

from fakes import ADMIN_TOKEN, MEMBER_TOKEN, OUTSIDER_TOKEN, FakeSupabase
from palace.database.supabase_client import get_supabase, get_service_supabase
from palace.main import app
from palace.modules.auth.service import clear_auth_cache



@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def church(db):
    """A church with one admin and one member"""
    church = db.seed("churches", {"name": "Grace Fellowship", "seat_limit": 3})
    db.auth.add_user(ADMIN_TOKEN, "user-admin", "admin@gracechurch.org")
    db.auth.add_user(MEMBER_TOKEN, "user-member", "member@gracechurch.org")
    db.auth.add_user(OUTSIDER_TOKEN, "user-outsider", "outsider@gracechurch.org")
    db.seed(
        "church_members",
        {"church_id": church["id"], "user_id": "user-admin", "role": "admin", "joined_at": "2024-01-01T00:00:00+00:00"},
        {"church_id": church["id"], "user_id": "user-member", "role": "member", "joined_at": "2024-02-01T00:00:00+00:00"},
    )
    db.seed(
        "profiles",
        {"id": "user-admin", "display_name": "Pastor Ann"},
        {"id": "user-member", "display_name": "Ben"},
    )
    return church


@pytest.fixture
def client(db):
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    clear_auth_cache()


