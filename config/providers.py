# FILE: config/providers.py
"""Provider configuration - single source of truth.

Every backend the proxy can talk to is listed in PROVIDER_CONFIGS. A row
names the env var holding its secret (plus the legacy VITE_* name the
browser build used), the default model and, for OpenAI-compatible vendors,
the base URL the AsyncOpenAI client is pointed at.

Model ids can be overridden per provider through env:
  - GEMINI_MODEL
  - MISTRAL_MODEL
  - GROQ_MODEL
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ProviderConfig:
    provider_id: str
    display_name: str
    env_key_name: str
    legacy_env_key_name: str
    model_env_name: str
    default_model: str
    base_url: Optional[str] = None

    @property
    def model(self) -> str:
        return (os.getenv(self.model_env_name) or "").strip() or self.default_model

    def read_key(self) -> Optional[str]:
        """Secret from env, preferring the server-side name over the legacy one."""
        for name in (self.env_key_name, self.legacy_env_key_name):
            value = (os.getenv(name) or "").strip()
            if value:
                return value
        return None


# =============================================================================
# Provider table (authoritative)
# =============================================================================

PROVIDER_CONFIGS: Dict[str, ProviderConfig] = {
    "gemini": ProviderConfig(
        provider_id="gemini",
        display_name="Google (Gemini)",
        env_key_name="GEMINI_API_KEY",
        legacy_env_key_name="VITE_GEMINI_API_KEY",
        model_env_name="GEMINI_MODEL",
        default_model="gemini-1.5-flash",
    ),
    "mistral": ProviderConfig(
        provider_id="mistral",
        display_name="Mistral",
        env_key_name="MISTRAL_API_KEY",
        legacy_env_key_name="VITE_MISTRAL_API_KEY",
        model_env_name="MISTRAL_MODEL",
        default_model="mistral-large-latest",
        base_url="https://api.mistral.ai/v1",
    ),
    "groq": ProviderConfig(
        provider_id="groq",
        display_name="Groq",
        env_key_name="GROQ_API_KEY",
        legacy_env_key_name="VITE_GROQ_API_KEY",
        model_env_name="GROQ_MODEL",
        default_model="llama-3.3-70b-versatile",
        base_url="https://api.groq.com/openai/v1",
    ),
}


def get_provider_config(provider_id: str) -> ProviderConfig:
    cfg = PROVIDER_CONFIGS.get(provider_id)
    if cfg is None:
        raise KeyError(f"no provider config for '{provider_id}'")
    return cfg


def missing_key_names() -> List[str]:
    """Env var names of providers with no secret configured."""
    return [
        cfg.env_key_name
        for cfg in PROVIDER_CONFIGS.values()
        if cfg.read_key() is None
    ]


# =============================================================================
# Runtime flags
# =============================================================================

def http_timeout_seconds() -> float:
    """Transport timeout handed to SDK clients (0 disables it)."""
    return float(os.getenv("LLM_HTTP_TIMEOUT_SECONDS") or "60")


def lenient_decode_enabled() -> bool:
    return os.getenv("LLM_LENIENT_DECODE", "false").lower() == "true"


def keys_endpoint_enabled() -> bool:
    return os.getenv("EXPOSE_API_KEYS_ENDPOINT", "false").lower() == "true"


def cors_allow_origin() -> str:
    return os.getenv("CORS_ALLOW_ORIGIN", "*")


def credentials_url() -> Optional[str]:
    """When set, credentials are fetched from this key-fetch endpoint instead of env."""
    return (os.getenv("CREDENTIALS_URL") or "").strip() or None
