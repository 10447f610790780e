"""Client for the OpenAI-compatible chat completions gateway used by the AI functions."""

import json
import logging
from typing import Any, Dict, List, Optional

import requests

from palace.config import settings
from palace.core.errors import FunctionError, ProviderError

logger = logging.getLogger(__name__)


class ChatCompletionClient:
    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or settings.llm_gateway_url
        self.api_key = api_key if api_key is not None else settings.llm_api_key
        self.model = model or settings.llm_model
        self.timeout = timeout or settings.llm_timeout_seconds
        self.session = session or requests.Session()

    def complete(
        self,
        messages: List[Dict[str, str]],
        json_mode: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Send a chat completion request and return the first choice's content."""
        if not self.api_key:
            raise FunctionError("LLM API key is not configured", status_code=500)

        payload: Dict[str, Any] = {"model": self.model, "messages": messages}
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        try:
            response = self.session.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"LLM gateway request failed: {e}")
            raise ProviderError(f"AI request failed: {e}")

        if not response.ok:
            logger.error("LLM gateway error %s: %s", response.status_code, response.text[:500])
            if response.status_code == 429:
                raise ProviderError("Rate limit exceeded, please try again later", status_code=429)
            if response.status_code == 402:
                raise ProviderError("AI credits exhausted", status_code=402)
            raise ProviderError(f"AI API error: {response.status_code}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            raise ProviderError("Malformed AI response")
        if not content:
            raise ProviderError("No content in AI response")
        return content

    def complete_json(self, messages: List[Dict[str, str]], **kwargs) -> Dict[str, Any]:
        content = self.complete(messages, json_mode=True, **kwargs)
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            logger.error("AI returned non-JSON content: %s", content[:300])
            raise ProviderError("AI response was not valid JSON")


def get_chat_client() -> ChatCompletionClient:
    return ChatCompletionClient()
