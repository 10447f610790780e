import base64

import pytest
import requests

from fakes import FakeResponse, FakeSession
from palace.config import settings
from palace.core.errors import FunctionError, ProviderError
from palace.main import app
from palace.modules.tts import audio_storage
from palace.modules.tts.providers import ElevenLabsProvider, OpenAITTSProvider, SpeechifyProvider, get_provider
from palace.modules.tts.routes import get_tts_service
from palace.modules.tts.schemas import TextToSpeechRequest
from palace.modules.tts.service import TextToSpeechService, build_cache_key, build_storage_key
from palace.modules.tts.voices import elevenlabs_voice_id, resolve_provider


class RecordingProvider:
    def __init__(self, name, error=None):
        self.name = name
        self.error = error
        self.calls = []

    def synthesize(self, text, voice):
        self.calls.append((text, voice))
        if self.error:
            raise self.error
        return b"mp3-bytes"


@pytest.fixture
def providers():
    return {}


@pytest.fixture
def service(db, providers):
    def factory(name):
        return providers.setdefault(name, RecordingProvider(name))
    return TextToSpeechService(db, storage=audio_storage.SupabaseAudioStorage(db), provider_factory=factory)


def _verse_request(**overrides):
    data = {"text": "In the beginning God created the heaven and the earth.", "voice": "daniel",
            "book": "Genesis", "chapter": 1, "verse": 1}
    data.update(overrides)
    return TextToSpeechRequest(**data)


def test_resolve_provider():
    assert resolve_provider("onyx") == "openai"
    assert resolve_provider("henry") == "speechify"
    assert resolve_provider("daniel") == "elevenlabs"
    assert resolve_provider("onyx", "elevenlabs") == "elevenlabs"


def test_elevenlabs_voice_id_passes_raw_ids_through():
    assert elevenlabs_voice_id("Daniel") == "onwK4e9ZLuTAKqWW03F9"
    assert elevenlabs_voice_id("customVoiceId123") == "customVoiceId123"


def test_keys():
    assert build_cache_key("openai", "onyx", "Genesis", 1, 1) == "openai:onyx:Genesis:1:1"
    assert build_storage_key("elevenlabs", "daniel", "1 Corinthians", 13, 4) == "tts/elevenlabs/daniel/1_corinthians/13/4.mp3"


def test_blank_text_is_rejected(service):
    with pytest.raises(FunctionError) as exc:
        service.synthesize(TextToSpeechRequest(text="   "))
    assert exc.value.status_code == 400
    assert exc.value.message == "Text is required"


def test_uncached_request_returns_inline_audio(service, db, providers):
    result = service.synthesize(TextToSpeechRequest(text="Hello", voice="nova"))
    assert result == {"audioContent": base64.b64encode(b"mp3-bytes").decode()}
    assert providers["openai"].calls == [("Hello", "nova")]
    assert db.rows("tts_audio_cache") == []


def test_default_voice_is_used(service, providers):
    service.synthesize(TextToSpeechRequest(text="Hello"))
    assert providers[resolve_provider(settings.tts_default_voice)].calls[0][1] == settings.tts_default_voice


def test_verse_audio_is_stored_then_served_from_cache(service, db, providers):
    first = service.synthesize(_verse_request())
    expected_url = "https://storage.test/bible-audio/tts/elevenlabs/daniel/genesis/1/1.mp3"
    assert first == {"audioUrl": expected_url, "cached": False}
    assert db.storage.files[("bible-audio", "tts/elevenlabs/daniel/genesis/1/1.mp3")] == b"mp3-bytes"
    assert db.rows("tts_audio_cache")[0]["cache_key"] == "elevenlabs:daniel:Genesis:1:1"

    second = service.synthesize(_verse_request())
    assert second == {"audioUrl": expected_url, "cached": True}
    assert len(providers["elevenlabs"].calls) == 1


def test_use_cache_false_skips_cache(service, db, providers):
    service.synthesize(_verse_request())
    result = service.synthesize(_verse_request(use_cache=False))
    assert "audioContent" in result
    assert len(providers["elevenlabs"].calls) == 2


def test_upload_failure_falls_back_to_inline_audio(service, db):
    db.storage.fail_uploads = True
    result = service.synthesize(_verse_request())
    assert "audioContent" in result
    assert db.rows("tts_audio_cache") == []


def test_cache_lookup_failure_still_synthesizes(service, db, providers):
    db.errors[("tts_audio_cache", "select")] = RuntimeError("timeout")
    result = service.synthesize(_verse_request())
    assert result["cached"] is False
    assert len(providers["elevenlabs"].calls) == 1


def test_openai_provider_posts_speech_request():
    session = FakeSession([("POST", "/audio/speech", FakeResponse(content=b"audio"))])
    provider = OpenAITTSProvider(api_key="sk-test", session=session)
    assert provider.synthesize("Hello", "onyx") == b"audio"
    _, url, kwargs = session.calls[0]
    assert url == f"{settings.openai_base_url}/audio/speech"
    assert kwargs["json"]["voice"] == "onyx"
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"


def test_elevenlabs_provider_maps_voice_name():
    session = FakeSession([("POST", "/text-to-speech/", FakeResponse(content=b"audio"))])
    ElevenLabsProvider(api_key="xi-test", session=session).synthesize("Hello", "daniel")
    _, url, kwargs = session.calls[0]
    assert url.endswith("/text-to-speech/onwK4e9ZLuTAKqWW03F9")
    assert kwargs["headers"]["xi-api-key"] == "xi-test"


def test_speechify_provider_decodes_base64():
    payload = {"audio_data": base64.b64encode(b"audio").decode()}
    session = FakeSession([("POST", "/audio/speech", FakeResponse(json_data=payload))])
    assert SpeechifyProvider(api_key="sp-test", session=session).synthesize("Hello", "henry") == b"audio"


def test_provider_without_key():
    with pytest.raises(FunctionError) as exc:
        OpenAITTSProvider(api_key="", session=FakeSession()).synthesize("Hello", "onyx")
    assert exc.value.status_code == 500
    assert exc.value.message == "openai API key is not configured"


def test_provider_http_error():
    session = FakeSession([("POST", "/audio/speech", FakeResponse(status_code=429, text="slow down"))])
    with pytest.raises(ProviderError) as exc:
        OpenAITTSProvider(api_key="sk-test", session=session).synthesize("Hello", "onyx")
    assert exc.value.status_code == 502
    assert exc.value.message == "openai API error: 429"


def test_provider_network_error():
    session = FakeSession([("POST", "/audio/speech", requests.ConnectionError("refused"))])
    with pytest.raises(ProviderError):
        OpenAITTSProvider(api_key="sk-test", session=session).synthesize("Hello", "onyx")


def test_unknown_provider():
    with pytest.raises(FunctionError) as exc:
        get_provider("acme")
    assert exc.value.status_code == 400


def test_s3_storage_builds_public_url(monkeypatch):
    uploads = []

    class FakeS3:
        def put_object(self, **kwargs):
            uploads.append(kwargs)

    monkeypatch.setattr(settings, "aws_access_key_id", "AKIA")
    monkeypatch.setattr(settings, "aws_secret_access_key", "secret")
    monkeypatch.setattr(settings, "s3_bucket_name", "palace-audio")
    monkeypatch.setattr(settings, "s3_public_base_url", "https://cdn.palace.org/")
    monkeypatch.setattr(audio_storage.boto3, "client", lambda *args, **kwargs: FakeS3())

    storage = audio_storage.S3AudioStorage()
    assert storage.upload_audio(b"audio", "tts/openai/onyx/john/3/16.mp3") == "https://cdn.palace.org/tts/openai/onyx/john/3/16.mp3"
    assert uploads[0]["Bucket"] == "palace-audio"
    assert uploads[0]["ContentType"] == "audio/mpeg"


def test_s3_storage_requires_credentials(monkeypatch):
    monkeypatch.setattr(settings, "s3_bucket_name", None)
    with pytest.raises(ValueError):
        audio_storage.S3AudioStorage()


def test_get_audio_storage_defaults_to_supabase(db):
    assert isinstance(audio_storage.get_audio_storage(db), audio_storage.SupabaseAudioStorage)


def test_route_returns_error_envelope(client):
    response = client.post("/api/v1/functions/text-to-speech", json={"text": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Text is required"}


def test_route_accepts_camel_case_fields(client, db):
    providers = {}
    app.dependency_overrides[get_tts_service] = lambda: TextToSpeechService(
        db,
        storage=audio_storage.SupabaseAudioStorage(db),
        provider_factory=lambda name: providers.setdefault(name, RecordingProvider(name)),
    )
    response = client.post("/api/v1/functions/text-to-speech", json={
        "text": "For God so loved the world", "voice": "onyx",
        "book": "John", "chapter": 3, "verse": 16, "useCache": False,
    })
    assert response.status_code == 200
    assert "audioContent" in response.json()
    assert providers["openai"].calls == [("For God so loved the world", "onyx")]


def test_route_reports_provider_failure(client, db):
    app.dependency_overrides[get_tts_service] = lambda: TextToSpeechService(
        db, provider_factory=lambda name: RecordingProvider(name, error=ProviderError("openai API error: 500")),
    )
    response = client.post("/api/v1/functions/text-to-speech", json={"text": "Hello", "voice": "onyx"})
    assert response.status_code == 502
    assert response.json() == {"error": "openai API error: 500"}


def test_voice_catalog(client):
    response = client.get("/api/v1/functions/text-to-speech/voices")
    assert response.status_code == 200
    body = response.json()
    assert {v["id"] for v in body["openai"]} == {"alloy", "echo", "fable", "onyx", "nova", "shimmer"}
    assert body["speechify"]
