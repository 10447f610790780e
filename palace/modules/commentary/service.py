import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from supabase import Client

from palace.config import settings
from palace.core.errors import FunctionError
from palace.core.llm_gateway import ChatCompletionClient
from palace.modules.commentary.prompts import (
    TIER_MAX_TOKENS, build_system_prompt, build_user_prompt, normalize_tier
)
from palace.modules.commentary.schemas import CommentaryRequest
from palace.modules.tts.audio_storage import get_audio_storage
from palace.modules.tts.providers import OpenAITTSProvider

logger = logging.getLogger(__name__)


def get_commentary_llm() -> ChatCompletionClient:
    """Commentary goes straight to OpenAI rather than through the gateway"""
    return ChatCompletionClient(
        url=f"{settings.openai_base_url}/chat/completions",
        api_key=settings.openai_api_key,
        model=settings.commentary_model,
    )


class CommentaryService:
    def __init__(self, llm: ChatCompletionClient, supabase: Client, tts: Optional[OpenAITTSProvider] = None,
                 storage=None):
        self.llm = llm
        self.supabase = supabase
        self.tts = tts or OpenAITTSProvider()
        self._storage = storage

    @property
    def storage(self):
        if self._storage is None:
            self._storage = get_audio_storage(self.supabase)
        return self._storage

    def generate(self, request: CommentaryRequest) -> Dict:
        if not request.book or not request.chapter or not request.verse or not request.verse_text:
            raise FunctionError("Missing required fields: book, chapter, verse, verseText", status_code=400)
        tier = request.tier
        logger.info(f"Generating {tier} commentary for {request.book} {request.chapter}:{request.verse}")

        cached = self.supabase.table("bible_commentaries")\
            .select("*")\
            .eq("book", request.book)\
            .eq("chapter", request.chapter)\
            .eq("verse", request.verse)\
            .eq("tier", tier)\
            .execute()
        if cached.data and cached.data[0].get("commentary_text"):
            logger.info(f"Commentary cache hit for {request.book} {request.chapter}:{request.verse}")
            row = cached.data[0]
            return {"commentary": row["commentary_text"], "audioUrl": row.get("audio_url"), "cached": True}

        commentary = self.llm.complete(
            [
                {"role": "system", "content": build_system_prompt(tier)},
                {"role": "user", "content": build_user_prompt(request.book, request.chapter, request.verse,
                                                              request.verse_text, tier)},
            ],
            temperature=0.7,
            max_tokens=TIER_MAX_TOKENS[normalize_tier(tier)],
        ).strip()
        logger.info(f"Generated {len(commentary)} chars for {request.book} {request.chapter}:{request.verse}")

        audio_url = None
        if request.generate_audio:
            audio_url = self._generate_audio(commentary, request, tier)

        self.supabase.table("bible_commentaries").upsert({
            "book": request.book,
            "chapter": request.chapter,
            "verse": request.verse,
            "tier": tier,
            "commentary_text": commentary,
            "audio_url": audio_url,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }, on_conflict="book,chapter,verse,tier").execute()

        return {"commentary": commentary, "audioUrl": audio_url, "cached": False}

    def _generate_audio(self, commentary: str, request: CommentaryRequest, tier: str) -> Optional[str]:
        """Synthesize and upload; any failure leaves the commentary without audio"""
        key = f"commentary/{request.book.lower()}/{request.chapter}/{request.verse}_{tier}.mp3"
        try:
            audio = self.tts.synthesize(commentary, request.voice)
            return self.storage.upload_audio(audio, key)
        except Exception as e:
            logger.error(f"Commentary audio failed for {key}: {e}")
            return None
