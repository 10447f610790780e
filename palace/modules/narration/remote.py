"""Client for the text-to-speech function."""

import base64
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from palace.config import settings
from palace.modules.narration.errors import RemoteError, RemoteTimeout

logger = logging.getLogger(__name__)


@dataclass
class RemoteAudio:
    data: bytes
    cached: bool = False


class RemoteTTSClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 access_token: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.narration_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.narration_timeout_seconds
        self.session = session or requests.Session()
        if access_token:
            self.session.headers["Authorization"] = f"Bearer {access_token}"

    def fetch(self, text: str, voice: str, book: Optional[str] = None, chapter: Optional[int] = None,
              verse: Optional[int] = None, use_cache: bool = True) -> RemoteAudio:
        """Request speech and return the decoded audio bytes.

        Raises RemoteTimeout when the call exceeds the timeout, RemoteError otherwise.
        """
        payload = {
            "text": text.strip(),
            "voice": voice,
            "book": book,
            "chapter": chapter,
            "verse": verse,
            "useCache": use_cache,
        }
        response = self._request("POST", f"{self.base_url}/functions/text-to-speech", json=payload)
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteError("Text-to-speech returned a non-JSON response") from e
        if not isinstance(data, dict):
            raise RemoteError("Text-to-speech returned an unexpected response")

        if data.get("audioUrl"):
            cached = data.get("cached") is True
            logger.info(f"Using {'cached' if cached else 'newly cached'} audio")
            return RemoteAudio(self._request("GET", data["audioUrl"]).content, cached=cached)
        if data.get("audioContent"):
            try:
                return RemoteAudio(base64.b64decode(data["audioContent"]))
            except ValueError:
                raise RemoteError("Audio content was not valid base64")
        raise RemoteError(data.get("error") or "No audio content received")

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise RemoteTimeout("Network timeout - connection too slow") from e
        except requests.RequestException as e:
            raise RemoteError(f"Failed to generate speech: {e}") from e
        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            raise RemoteError(message or f"Text-to-speech failed with status {response.status_code}")
        return response
