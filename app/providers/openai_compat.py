# FILE: app/providers/openai_compat.py
"""
Adapters for vendors exposing an OpenAI-compatible chat completions API.

Mistral and Groq both accept the system/user message list and reply with
`choices[0].message.content`; they differ only in base URL and model.
Calls go through openai.AsyncOpenAI pointed at the vendor's base URL.
"""
from __future__ import annotations

from typing import Any, Optional

from config import get_provider_config

from app.llm.prompts import MessageShape
from app.llm.schemas import Provider
from app.providers.base import ProviderAdapter, RequestPayload


class OpenAICompatibleAdapter(ProviderAdapter):
    message_shape = MessageShape.CHAT_MESSAGES

    def __init__(
        self,
        model_id: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        base_url: Optional[str] = None,
    ):
        super().__init__(model_id=model_id, timeout_seconds=timeout_seconds)
        self.base_url = base_url or get_provider_config(self.provider.value).base_url

    def _client(self, credential: str) -> Any:
        from openai import AsyncOpenAI

        return AsyncOpenAI(
            api_key=credential,
            base_url=self.base_url,
            timeout=self.timeout_seconds or None,
            max_retries=0,
        )

    async def _send(self, payload: RequestPayload, credential: str) -> Any:
        client = self._client(credential)
        return await client.chat.completions.create(
            model=self.model_id,
            messages=payload,
            stream=False,
        )

    def _extract_text(self, response: Any) -> str:
        choices = getattr(response, "choices", None)
        if not choices:
            raise self.invalid_response("no choices")
        message = getattr(choices[0], "message", None)
        if message is None:
            raise self.invalid_response("choices[0].message missing")
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            raise self.invalid_response("choices[0].message.content missing")
        return content


class MistralAdapter(OpenAICompatibleAdapter):
    provider = Provider.MISTRAL


class GroqAdapter(OpenAICompatibleAdapter):
    provider = Provider.GROQ
