import pytest
from fastapi.testclient import TestClient

from palace.config.settings import Settings
from palace.main import app
from palace.modules.churches import expiry_scheduler


def test_health_has_security_headers(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_root(client):
    assert client.get("/").json()["message"] == "Welcome to palace-backend"


def test_ready_reports_configured_providers(client, monkeypatch):
    from palace.config import settings
    monkeypatch.setattr(settings, "openai_api_key", "sk-test")
    monkeypatch.setattr(settings, "elevenlabs_api_key", None)
    body = client.get("/ready").json()
    assert body["tts"]["openai"] is True
    assert body["tts"]["elevenlabs"] is False


def test_cors_origins_list():
    settings = Settings(cors_origins="https://palace.app, http://localhost:5173,,")
    assert settings.get_cors_origins_list() == ["https://palace.app", "http://localhost:5173"]


def test_llm_key_accepts_legacy_env_name(monkeypatch):
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.setenv("LOVABLE_API_KEY", "legacy-key")
    assert Settings().llm_api_key == "legacy-key"


def test_production_flag():
    assert Settings(environment="production").is_production
    assert not Settings(environment="staging").is_production


def test_sweeper_starts_when_enabled(monkeypatch):
    from palace.config import settings
    async def fake_loop():
        return None

    monkeypatch.setattr(settings, "invitation_sweep_enabled", True)
    monkeypatch.setattr(expiry_scheduler, "expiry_scheduler_loop", fake_loop)
    try:
        with TestClient(app):
            assert app.state.expiry_task is not None
    finally:
        app.state.expiry_task = None


def test_service_client_falls_back_to_anon_key(monkeypatch):
    from palace.config import settings
    from palace.database import supabase_client

    created = []
    monkeypatch.setattr(supabase_client, "create_client", lambda url, key: created.append(key) or key)
    monkeypatch.setattr(settings, "supabase_service_role_key", None)
    supabase_client.SupabaseClient.reset()
    try:
        assert supabase_client.get_service_supabase() == "anon-key"
        assert supabase_client.get_supabase() == "anon-key"
        assert created == ["anon-key"]

        supabase_client.SupabaseClient.reset()
        monkeypatch.setattr(settings, "supabase_service_role_key", "service-key")
        assert supabase_client.get_service_supabase() == "service-key"
    finally:
        supabase_client.SupabaseClient.reset()


def test_unconfigured_client_raises(monkeypatch):
    from palace.config import settings
    from palace.database import supabase_client

    monkeypatch.setattr(settings, "supabase_key", "")
    supabase_client.SupabaseClient.reset()
    try:
        with pytest.raises(RuntimeError):
            supabase_client.get_supabase()
    finally:
        supabase_client.SupabaseClient.reset()
