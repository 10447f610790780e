"""Synthesis backends for the text-to-speech function.

Each provider turns text plus a voice into MP3 bytes. HTTP goes through a
``requests.Session`` so tests can hand in a fake session.
"""

import base64
import logging
from typing import Dict, Optional

import requests

from palace.config import settings
from palace.core.errors import FunctionError, ProviderError
from palace.modules.tts.voices import elevenlabs_voice_id

logger = logging.getLogger(__name__)


class TTSProvider:
    name = ""

    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout or settings.tts_timeout_seconds

    def synthesize(self, text: str, voice: str) -> bytes:
        raise NotImplementedError

    def _require_key(self):
        if not self.api_key:
            raise FunctionError(f"{self.name} API key is not configured", status_code=500)

    def _post(self, url: str, headers: Dict[str, str], payload: dict) -> requests.Response:
        try:
            response = self.session.post(url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"{self.name} request failed: {e}")
            raise ProviderError(f"{self.name} request failed: {e}")
        if not response.ok:
            logger.error("%s error %s: %s", self.name, response.status_code, response.text[:300])
            raise ProviderError(f"{self.name} API error: {response.status_code}")
        return response


class OpenAITTSProvider(TTSProvider):
    name = "openai"

    def __init__(self, api_key: Optional[str] = None, model: str = "tts-1", **kwargs):
        super().__init__(api_key if api_key is not None else settings.openai_api_key, **kwargs)
        self.model = model

    def synthesize(self, text: str, voice: str) -> bytes:
        self._require_key()
        response = self._post(
            f"{settings.openai_base_url}/audio/speech",
            {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
            {"model": self.model, "input": text, "voice": voice, "response_format": "mp3"},
        )
        return response.content


class ElevenLabsProvider(TTSProvider):
    name = "elevenlabs"

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(api_key if api_key is not None else settings.elevenlabs_api_key, **kwargs)

    def synthesize(self, text: str, voice: str) -> bytes:
        self._require_key()
        response = self._post(
            f"{settings.elevenlabs_base_url}/text-to-speech/{elevenlabs_voice_id(voice)}",
            {"xi-api-key": self.api_key, "Content-Type": "application/json", "Accept": "audio/mpeg"},
            {
                "text": text,
                "model_id": settings.elevenlabs_model,
                "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
            },
        )
        return response.content


class SpeechifyProvider(TTSProvider):
    name = "speechify"

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(api_key if api_key is not None else settings.speechify_api_key, **kwargs)

    def synthesize(self, text: str, voice: str) -> bytes:
        self._require_key()
        response = self._post(
            f"{settings.speechify_base_url}/audio/speech",
            {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
            {"input": text, "voice_id": voice, "audio_format": "mp3"},
        )
        # Speechify answers with base64 audio inside JSON
        try:
            return base64.b64decode(response.json()["audio_data"])
        except (ValueError, KeyError, TypeError):
            raise ProviderError("speechify returned no audio")


PROVIDER_CLASSES = {
    "openai": OpenAITTSProvider,
    "elevenlabs": ElevenLabsProvider,
    "speechify": SpeechifyProvider,
}


def get_provider(name: str, session: Optional[requests.Session] = None) -> TTSProvider:
    provider_class = PROVIDER_CLASSES.get(name)
    if provider_class is None:
        raise FunctionError(f"Unknown TTS provider: {name}", status_code=400)
    return provider_class(session=session)
