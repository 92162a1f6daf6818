# FILE: app/credentials/gate.py
"""
Credential gates: where provider secrets come from.

A gate answers one question:

    await gate.get_credentials() -> {Provider: secret or None}

Implementations:
- EnvCredentialGate: server-side env vars (GEMINI_API_KEY, ... or legacy VITE_* names)
- StaticCredentialGate: secrets injected directly (tests, embedding apps)
- RemoteCredentialGate: GET of a key-fetch endpoint returning
  {"geminiKey": ..., "mistralKey": ..., "groqKey": ...}

Secrets are never logged; only provider names and presence are.
"""
from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Protocol

import httpx

from config import PROVIDER_CONFIGS

from app.llm.errors import ConfigError
from app.llm.schemas import Provider

logger = logging.getLogger(__name__)

Credentials = Dict[Provider, Optional[str]]

# Field names used by the key-fetch endpoint payload.
WIRE_KEY_FIELDS: Dict[Provider, str] = {
    Provider.GEMINI: "geminiKey",
    Provider.MISTRAL: "mistralKey",
    Provider.GROQ: "groqKey",
}


def _clean(secret: Optional[str]) -> Optional[str]:
    if secret is None:
        return None
    secret = str(secret).strip()
    return secret or None


def credentials_to_wire(credentials: Mapping[Provider, Optional[str]]) -> Dict[str, Optional[str]]:
    return {field: _clean(credentials.get(p)) for p, field in WIRE_KEY_FIELDS.items()}


def credentials_from_wire(payload: Mapping[str, object]) -> Credentials:
    out: Credentials = {}
    for provider, field in WIRE_KEY_FIELDS.items():
        value = payload.get(field)
        out[provider] = _clean(value) if isinstance(value, str) else None
    return out


def describe_availability(credentials: Mapping[Provider, Optional[str]]) -> Dict[str, bool]:
    """Presence-only view, safe to log or return to clients."""
    return {p.value: bool(_clean(credentials.get(p))) for p in Provider}


class CredentialGate(Protocol):
    async def get_credentials(self) -> Mapping[Provider, Optional[str]]:
        ...


class EnvCredentialGate:
    async def get_credentials(self) -> Credentials:
        return read_env_credentials()


def read_env_credentials() -> Credentials:
    return {
        provider: PROVIDER_CONFIGS[provider.value].read_key()
        for provider in Provider
    }


class StaticCredentialGate:
    def __init__(self, credentials: Mapping[Provider, Optional[str]]):
        self._credentials: Credentials = {p: _clean(credentials.get(p)) for p in Provider}

    def __repr__(self) -> str:
        return f"StaticCredentialGate({describe_availability(self._credentials)})"

    async def get_credentials(self) -> Credentials:
        return dict(self._credentials)


class RemoteCredentialGate:
    """Fetches secrets from a key-fetch endpoint (see app/routers/keys.py)."""

    def __init__(self, url: str, timeout_seconds: float = 15.0, client: Optional[httpx.AsyncClient] = None):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def get_credentials(self) -> Credentials:
        try:
            if self._client is not None:
                resp = await self._client.get(self.url)
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_seconds)) as client:
                    resp = await client.get(self.url)
        except httpx.HTTPError as exc:
            logger.error("[credentials] key fetch from %s failed: %s", self.url, exc)
            raise ConfigError(f"Credential endpoint unreachable: {exc}") from exc

        if resp.status_code != 200:
            logger.error("[credentials] key fetch from %s returned status %s", self.url, resp.status_code)
            raise ConfigError(f"Credential endpoint returned status {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ConfigError("Credential endpoint returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise ConfigError("Credential endpoint returned an unexpected payload")

        return credentials_from_wire(payload)


__all__ = [
    "Credentials",
    "CredentialGate",
    "EnvCredentialGate",
    "StaticCredentialGate",
    "RemoteCredentialGate",
    "WIRE_KEY_FIELDS",
    "credentials_to_wire",
    "credentials_from_wire",
    "describe_availability",
    "read_env_credentials",
]
