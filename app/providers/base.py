# FILE: app/providers/base.py
"""
Provider adapter contract.

Every backend implements the same call:

    await adapter.invoke(system_instruction, user_prompt, credential) -> str

The adapter owns everything vendor-specific: the request shape it sends
(single string vs chat messages), the SDK call, and the field path of the
text inside the vendor's success envelope. A missing field in an otherwise
successful reply is a ProviderError ("invalid response structure"), never
an empty result.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from config import get_provider_config, http_timeout_seconds

from app.llm.errors import ProviderError
from app.llm.prompts import MessageShape, compose_request
from app.llm.schemas import Provider

logger = logging.getLogger(__name__)

RequestPayload = Union[str, List[Dict[str, str]]]

INVALID_RESPONSE_STRUCTURE = "invalid response structure"


def _describe_backend_error(exc: Exception) -> str:
    """Best-effort backend-reported detail (SDK errors expose .message / .status_code)."""
    message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
    status = getattr(exc, "status_code", None)
    if status:
        return f"{message} (status {status})"
    return message


def _redact(text: str, credential: str) -> str:
    if credential and credential in text:
        return text.replace(credential, "***")
    return text


class ProviderAdapter(ABC):
    provider: Provider
    message_shape: MessageShape

    def __init__(self, model_id: Optional[str] = None, timeout_seconds: Optional[float] = None):
        cfg = get_provider_config(self.provider.value)
        self.model_id = model_id or cfg.model
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else http_timeout_seconds()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model_id={self.model_id!r})"

    @property
    def name(self) -> str:
        return self.provider.value

    def invalid_response(self, detail: Optional[str] = None) -> ProviderError:
        if detail:
            return ProviderError(self.name, f"{INVALID_RESPONSE_STRUCTURE}: {detail}")
        return ProviderError(self.name, INVALID_RESPONSE_STRUCTURE)

    async def invoke(self, system_instruction: str, user_prompt: str, credential: str) -> str:
        if not credential or not credential.strip():
            raise ProviderError(self.name, "API key is missing")

        payload = compose_request(self.message_shape, system_instruction, user_prompt)

        try:
            response = await self._send(payload, credential)
        except ProviderError:
            raise
        except Exception as exc:
            detail = _redact(_describe_backend_error(exc), credential)
            logger.error("[%s] backend call failed (model=%s): %s", self.name, self.model_id, detail)
            raise ProviderError(self.name, detail) from exc

        text = self._extract_text(response)
        if not text.strip():
            raise ProviderError(self.name, "no response received from the AI model")
        return text

    @abstractmethod
    async def _send(self, payload: RequestPayload, credential: str) -> Any:
        """Perform the vendor call and return its raw response object."""

    @abstractmethod
    def _extract_text(self, response: Any) -> str:
        """Pull the single text payload out of the vendor envelope."""


__all__ = [
    "ProviderAdapter",
    "RequestPayload",
    "INVALID_RESPONSE_STRUCTURE",
]
