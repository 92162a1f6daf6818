# FILE: app/providers/registry.py
"""
Provider Registry

Maps each Provider to its adapter class. The dispatcher only ever sees the
resulting Provider -> ProviderAdapter mapping; adding a backend means one
adapter class and one row in ADAPTER_TYPES.

Supported:
- Gemini (google-generativeai)
- Mistral (OpenAI-compatible endpoint via AsyncOpenAI)
- Groq (OpenAI-compatible endpoint via AsyncOpenAI)
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Type

from app.llm.schemas import Provider
from app.providers.base import ProviderAdapter
from app.providers.gemini import GeminiAdapter
from app.providers.openai_compat import GroqAdapter, MistralAdapter

logger = logging.getLogger(__name__)


ADAPTER_TYPES: Dict[Provider, Type[ProviderAdapter]] = {
    Provider.GEMINI: GeminiAdapter,
    Provider.MISTRAL: MistralAdapter,
    Provider.GROQ: GroqAdapter,
}


def build_adapters() -> Dict[Provider, ProviderAdapter]:
    adapters = {provider: adapter_type() for provider, adapter_type in ADAPTER_TYPES.items()}
    logger.debug(
        "[registry] adapters ready: %s",
        ", ".join(f"{p.value}={a.model_id}" for p, a in adapters.items()),
    )
    return adapters


_adapters: Optional[Dict[Provider, ProviderAdapter]] = None


def get_adapters() -> Dict[Provider, ProviderAdapter]:
    global _adapters
    if _adapters is None:
        _adapters = build_adapters()
    return _adapters


__all__ = [
    "ADAPTER_TYPES",
    "build_adapters",
    "get_adapters",
]
