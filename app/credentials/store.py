# FILE: app/credentials/store.py
"""
Process-wide credential cache with a single-flight guard.

The first caller starts one fetch task; every concurrent caller awaits that
same task and sees its outcome (credentials or ConfigError). Once the task
has completed successfully, `_initialized` short-circuits the guard.

The outcome is cached for the lifetime of the store, failures included:
the gate is consulted at most once. reset() drops the cache explicitly.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Mapping, Optional

from config import credentials_url

from app.credentials.gate import (
    CredentialGate,
    Credentials,
    EnvCredentialGate,
    RemoteCredentialGate,
    describe_availability,
)
from app.llm.errors import ConfigError
from app.llm.schemas import Provider

logger = logging.getLogger(__name__)


class CredentialStore:
    def __init__(self, gate: CredentialGate):
        self._gate = gate
        self._credentials: Optional[Credentials] = None
        self._initialized = False
        self._init_task: Optional[asyncio.Future] = None
        self.fetch_count = 0

    def __repr__(self) -> str:
        state = describe_availability(self._credentials) if self._credentials else "pending"
        return f"CredentialStore(gate={self._gate.__class__.__name__}, state={state})"

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def get(self) -> Credentials:
        if self._initialized:
            return self._credentials  # type: ignore[return-value]
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._fetch())
        return await asyncio.shield(self._init_task)

    async def _fetch(self) -> Credentials:
        self.fetch_count += 1
        try:
            raw = await self._gate.get_credentials()
        except ConfigError:
            logger.error("[credentials] credential gate failed")
            raise
        except Exception as exc:
            logger.exception("[credentials] credential gate raised unexpectedly")
            raise ConfigError(f"Credential gate failed: {exc}") from exc

        if raw is None:
            raise ConfigError("Credential gate returned no credentials")
        if not isinstance(raw, Mapping):
            raise ConfigError(
                f"Credential gate returned {raw.__class__.__name__}, expected a mapping"
            )

        credentials: Credentials = {}
        for key, secret in raw.items():
            try:
                provider = Provider(key)
            except ValueError:
                logger.warning("[credentials] ignoring key for unknown provider %r", key)
                continue
            secret = secret.strip() if isinstance(secret, str) else None
            credentials[provider] = secret or None

        for provider, available in describe_availability(credentials).items():
            if not available:
                logger.warning("[credentials] %s API key not provided", provider)

        self._credentials = credentials
        self._initialized = True
        return credentials

    def reset(self) -> None:
        self._credentials = None
        self._initialized = False
        self._init_task = None


def _default_gate() -> CredentialGate:
    url = credentials_url()
    if url:
        return RemoteCredentialGate(url)
    return EnvCredentialGate()


_store: Optional[CredentialStore] = None


def get_credential_store() -> CredentialStore:
    global _store
    if _store is None:
        _store = CredentialStore(_default_gate())
    return _store


def set_credential_store(store: Optional[CredentialStore]) -> None:
    """Replace (or clear, with None) the process-wide store."""
    global _store
    _store = store


__all__ = [
    "CredentialStore",
    "get_credential_store",
    "set_credential_store",
]
