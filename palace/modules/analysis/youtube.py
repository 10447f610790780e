"""YouTube helpers: video id extraction, oEmbed metadata and caption scraping."""

import html
import logging
import re
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)

VIDEO_ID_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\n?#]+)")
CAPTIONS_RE = re.compile(r'"captions":\s*(\{[^}]+\})')
CAPTION_URL_RE = re.compile(r'"baseUrl":"([^"]+)"')
CAPTION_TEXT_RE = re.compile(r"<text[^>]*>(.*?)</text>", re.DOTALL)
TAG_RE = re.compile(r"<[^>]*>")

MIN_TRANSCRIPT_CHARS = 100


def extract_video_id(url: str) -> Optional[str]:
    match = VIDEO_ID_RE.search(url or "")
    return match.group(1) if match else None


def fetch_metadata(video_id: str, session: requests.Session, timeout: float = 15) -> Dict[str, str]:
    """Title and channel via oEmbed (no API key needed). Raises requests.RequestException on failure."""
    response = session.get(
        "https://www.youtube.com/oembed",
        params={"url": f"https://www.youtube.com/watch?v={video_id}", "format": "json"},
        timeout=timeout,
    )
    response.raise_for_status()
    data = response.json()
    return {
        "title": data.get("title") or "Unknown Title",
        "channel": data.get("author_name") or "Unknown Channel",
    }


def parse_caption_xml(xml: str) -> str:
    parts = []
    for raw in CAPTION_TEXT_RE.findall(xml):
        parts.append(TAG_RE.sub("", html.unescape(raw)))
    return " ".join(parts).strip()


def fetch_transcript(video_id: str, session: requests.Session, timeout: float = 15) -> Optional[str]:
    """Best effort: first caption track of the watch page, or None"""
    try:
        page = session.get(f"https://www.youtube.com/watch?v={video_id}", timeout=timeout).text
        if not CAPTIONS_RE.search(page):
            logger.info("No captions on watch page, using metadata only")
            return None
        urls = CAPTION_URL_RE.findall(page)
        if not urls:
            return None
        caption_url = urls[0].replace("\\u0026", "&")
        transcript = parse_caption_xml(session.get(caption_url, timeout=timeout).text)
    except requests.RequestException as e:
        logger.warning(f"Transcript fetch failed for {video_id}: {e}")
        return None
    if len(transcript) > MIN_TRANSCRIPT_CHARS:
        logger.info(f"Transcript fetched: {len(transcript)} characters")
        return transcript
    return None
