# FILE: config/__init__.py
"""Configuration package for the JustBuilt LLM proxy.

Contains:
- providers.py: provider table (env key names, default models, base URLs)
  and runtime flags read from the environment.
"""

from config.providers import (
    PROVIDER_CONFIGS,
    ProviderConfig,
    get_provider_config,
    missing_key_names,
    http_timeout_seconds,
    lenient_decode_enabled,
    keys_endpoint_enabled,
    cors_allow_origin,
    credentials_url,
)

__all__ = [
    "PROVIDER_CONFIGS",
    "ProviderConfig",
    "get_provider_config",
    "missing_key_names",
    "http_timeout_seconds",
    "lenient_decode_enabled",
    "keys_endpoint_enabled",
    "cors_allow_origin",
    "credentials_url",
]
