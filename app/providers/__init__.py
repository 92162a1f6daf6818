"""Provider adapters: one per LLM backend, all behind ProviderAdapter."""

from app.providers.base import ProviderAdapter
from app.providers.gemini import GeminiAdapter
from app.providers.openai_compat import GroqAdapter, MistralAdapter, OpenAICompatibleAdapter
from app.providers.registry import ADAPTER_TYPES, build_adapters, get_adapters

__all__ = [
    "ProviderAdapter",
    "GeminiAdapter",
    "MistralAdapter",
    "GroqAdapter",
    "OpenAICompatibleAdapter",
    "ADAPTER_TYPES",
    "build_adapters",
    "get_adapters",
]
