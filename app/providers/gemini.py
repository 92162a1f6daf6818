# FILE: app/providers/gemini.py
"""
Google Gemini adapter (google-generativeai).

Gemini takes one prompt string: system instruction and user request are
joined before the call. Text is read from `response.text`; the SDK raises
ValueError there when the reply has no candidates/parts (e.g. blocked).
"""
from __future__ import annotations

from typing import Any

from app.llm.prompts import MessageShape
from app.llm.schemas import Provider
from app.providers.base import ProviderAdapter, RequestPayload


class GeminiAdapter(ProviderAdapter):
    provider = Provider.GEMINI
    message_shape = MessageShape.SINGLE_STRING

    def _model(self, credential: str) -> Any:
        import google.generativeai as genai

        genai.configure(api_key=credential)
        return genai.GenerativeModel(self.model_id)

    async def _send(self, payload: RequestPayload, credential: str) -> Any:
        model = self._model(credential)
        request_options = {"timeout": self.timeout_seconds} if self.timeout_seconds else None
        return await model.generate_content_async(payload, request_options=request_options)

    def _extract_text(self, response: Any) -> str:
        try:
            text = response.text
        except (ValueError, AttributeError) as exc:
            raise self.invalid_response(str(exc) or "missing text") from exc
        if not isinstance(text, str):
            raise self.invalid_response("text is not a string")
        return text
