import base64
import logging
import re
from typing import Callable, Dict, Optional

from supabase import Client

from palace.config import settings
from palace.core.errors import FunctionError
from palace.modules.tts.audio_storage import get_audio_storage
from palace.modules.tts.providers import TTSProvider, get_provider
from palace.modules.tts.schemas import TextToSpeechRequest
from palace.modules.tts.voices import resolve_provider

logger = logging.getLogger(__name__)


def build_cache_key(provider: str, voice: str, book: str, chapter: int, verse: int) -> str:
    return f"{provider}:{voice}:{book}:{chapter}:{verse}"


def build_storage_key(provider: str, voice: str, book: str, chapter: int, verse: int) -> str:
    safe_book = re.sub(r"[^A-Za-z0-9]+", "_", book).strip("_").lower()
    return f"tts/{provider}/{voice}/{safe_book}/{chapter}/{verse}.mp3"


class TextToSpeechService:
    """Synthesizes speech, caching per-verse audio in storage when asked to."""

    def __init__(self, supabase: Client, storage=None,
                 provider_factory: Callable[[str], TTSProvider] = get_provider):
        self.supabase = supabase
        self._storage = storage
        self.provider_factory = provider_factory

    @property
    def storage(self):
        if self._storage is None:
            self._storage = get_audio_storage(self.supabase)
        return self._storage

    def synthesize(self, request: TextToSpeechRequest) -> Dict:
        text = (request.text or "").strip()
        if not text:
            raise FunctionError("Text is required", status_code=400)

        voice = request.voice or settings.tts_default_voice
        provider_name = resolve_provider(voice, request.provider)
        cacheable = request.use_cache and request.book and request.chapter is not None and request.verse is not None

        cache_key = None
        if cacheable:
            cache_key = build_cache_key(provider_name, voice, request.book, request.chapter, request.verse)
            cached_url = self._lookup_cache(cache_key)
            if cached_url:
                logger.info(f"TTS cache hit: {cache_key}")
                return {"audioUrl": cached_url, "cached": True}

        provider = self.provider_factory(provider_name)
        logger.info(f"Synthesizing {len(text)} chars with {provider_name}/{voice}")
        audio = provider.synthesize(text, voice)

        if cacheable:
            audio_url = self._store(audio, cache_key, provider_name, voice, request)
            if audio_url:
                return {"audioUrl": audio_url, "cached": False}

        return {"audioContent": base64.b64encode(audio).decode("ascii")}

    def _lookup_cache(self, cache_key: str) -> Optional[str]:
        try:
            result = self.supabase.table("tts_audio_cache")\
                .select("audio_url")\
                .eq("cache_key", cache_key)\
                .execute()
        except Exception as e:
            logger.warning(f"TTS cache lookup failed: {e}")
            return None
        if result.data:
            return result.data[0]["audio_url"]
        return None

    def _store(self, audio: bytes, cache_key: str, provider_name: str, voice: str,
               request: TextToSpeechRequest) -> Optional[str]:
        """Upload and record the audio; None means the caller should inline it instead."""
        storage_key = build_storage_key(provider_name, voice, request.book, request.chapter, request.verse)
        try:
            audio_url = self.storage.upload_audio(audio, storage_key)
        except Exception as e:
            logger.warning(f"Audio upload failed, returning inline audio: {e}")
            return None
        try:
            self.supabase.table("tts_audio_cache").upsert({
                "cache_key": cache_key,
                "provider": provider_name,
                "voice": voice,
                "book": request.book,
                "chapter": request.chapter,
                "verse": request.verse,
                "audio_url": audio_url,
            }).execute()
        except Exception as e:
            logger.warning(f"TTS cache insert failed for {cache_key}: {e}")
        return audio_url
