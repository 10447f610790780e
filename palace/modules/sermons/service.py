import logging
from typing import Dict

from supabase import Client

from palace.core.errors import FunctionError, ProviderError
from palace.core.llm_gateway import ChatCompletionClient
from palace.modules.sermons.categories import CATEGORY_RULES, CURRENT_EVENT_TYPES
from palace.modules.sermons.parsing import parse_starter
from palace.modules.sermons.prompts import (
    build_system_prompt, build_user_prompt, build_compact_user_prompt, COMPACT_SUFFIX
)
from palace.modules.sermons.schemas import SermonStarterRequest

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


class SermonStarterService:
    def __init__(self, llm: ChatCompletionClient, supabase: Client):
        self.llm = llm
        self.supabase = supabase

    def generate(self, request: SermonStarterRequest) -> Dict:
        if not request.topic or not request.level:
            raise FunctionError("Topic and level are required", status_code=400)

        category = CATEGORY_RULES.get(request.category) if request.category else None
        event = CURRENT_EVENT_TYPES.get(request.current_event_type) if request.current_event_type else None
        system_prompt = build_system_prompt(
            category, event, request.pt_rooms, request.room_labels,
            request.generate_series, request.series_length,
        )
        user_prompt = build_user_prompt(
            request.topic, request.level, category, event, request.anchor_scriptures,
            request.pt_rooms, request.room_labels, request.generate_series, request.series_length,
        )
        logger.info(f"Generating {request.level} starter for topic: {request.topic}, category: {request.category or 'none'}")

        starter = None
        for attempt in range(1, MAX_ATTEMPTS + 1):
            compact = attempt > 1
            # Second attempt asks for a shorter answer; truncated JSON is the usual failure
            messages = [
                {"role": "system", "content": system_prompt + (COMPACT_SUFFIX if compact else "")},
                {"role": "user", "content": build_compact_user_prompt(request.topic, request.level) if compact else user_prompt},
            ]
            content = self.llm.complete(messages, temperature=0.7, max_tokens=8000)
            try:
                starter = parse_starter(content, salvage=attempt == MAX_ATTEMPTS)
                break
            except ValueError:
                logger.error(f"Parse attempt {attempt} failed. Content length: {len(content)}")
        if starter is None:
            raise ProviderError("Failed to parse AI response as JSON after multiple attempts", status_code=500)

        if request.topic_id:
            self._save(request, starter)

        return {
            "success": True,
            "starter": starter,
            "categoryUsed": category["name"] if category else None,
            "eventTypeUsed": event["label"] if event else None,
        }

    def _save(self, request: SermonStarterRequest, starter: Dict) -> None:
        try:
            self.supabase.table("sermon_starters").insert({
                "topic_id": request.topic_id,
                "starter_title": starter.get("starterTitle"),
                "level": request.level,
                "floors": starter,
                "room_refs": starter.get("roomRefs") or [],
                "quality_status": "published",
            }).execute()
            logger.info(f"Saved starter for topic {request.topic_id}")
        except Exception as e:
            logger.error(f"Database insert error for sermon starter: {e}")
