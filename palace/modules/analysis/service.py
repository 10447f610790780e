import logging
from typing import Dict, Optional

import requests

from palace.core.errors import FunctionError, ProviderError
from palace.core.llm_gateway import ChatCompletionClient
from palace.modules.analysis import youtube
from palace.modules.analysis.prompts import SYSTEM_PROMPT, TRANSCRIPT_PROMPT, METADATA_PROMPT

logger = logging.getLogger(__name__)

# Transcripts shorter than this are treated as missing
TRANSCRIPT_PROMPT_MIN_CHARS = 200


class VideoAnalysisService:
    def __init__(self, llm: ChatCompletionClient, session: Optional[requests.Session] = None):
        self.llm = llm
        self.session = session or requests.Session()

    def analyze(self, video_url: Optional[str]) -> Dict:
        if not video_url:
            raise FunctionError("Video URL is required", status_code=400)
        video_id = youtube.extract_video_id(video_url)
        if not video_id:
            raise FunctionError("Invalid YouTube URL", status_code=400)
        logger.info(f"Analyzing video {video_id}")

        try:
            metadata = youtube.fetch_metadata(video_id, self.session)
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Metadata fetch error: {e}")
            raise ProviderError(f"Could not fetch video metadata. Error: {e}")

        transcript = youtube.fetch_transcript(video_id, self.session)
        fields = {"url": video_url, "video_id": video_id, **metadata}
        if transcript and len(transcript) > TRANSCRIPT_PROMPT_MIN_CHARS:
            user_prompt = TRANSCRIPT_PROMPT.format(transcript=transcript, **fields)
        else:
            user_prompt = METADATA_PROMPT.format(**fields)

        analysis = self.llm.complete_json([
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ])
        return {"analysis": analysis}
