# FILE: tests/test_credentials.py
"""
Tests for app/credentials/
Credential gates (env, static, remote) and the single-flight CredentialStore.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import asyncio
import logging

import httpx
import pytest
from unittest.mock import AsyncMock, Mock

from app.credentials import (
    CredentialStore,
    EnvCredentialGate,
    RemoteCredentialGate,
    StaticCredentialGate,
    credentials_from_wire,
    credentials_to_wire,
    describe_availability,
    get_credential_store,
    read_env_credentials,
    set_credential_store,
)
from app.llm.errors import ConfigError
from app.llm.schemas import Provider

from tests.fakes import ALL_KEYS

KEYS_URL = "https://proxy.test/get-api-keys"


class SlowGate:
    """Gate that blocks until released, counting calls."""

    def __init__(self, result=None, error=None):
        self.calls = 0
        self.release = asyncio.Event()
        self._result = result
        self._error = error

    async def get_credentials(self):
        self.calls += 1
        await self.release.wait()
        if self._error is not None:
            raise self._error
        return self._result


class TestWireFormat:
    """geminiKey / mistralKey / groqKey payload."""

    def test_to_wire(self):
        assert credentials_to_wire({Provider.GEMINI: "a", Provider.GROQ: " c "}) == {
            "geminiKey": "a",
            "mistralKey": None,
            "groqKey": "c",
        }

    def test_from_wire(self):
        creds = credentials_from_wire({"geminiKey": "a", "mistralKey": "", "groqKey": 42, "extra": "x"})
        assert creds == {Provider.GEMINI: "a", Provider.MISTRAL: None, Provider.GROQ: None}

    def test_availability_is_presence_only(self):
        availability = describe_availability({Provider.GEMINI: "secret", Provider.MISTRAL: ""})
        assert availability == {"gemini": True, "mistral": False, "groq": False}


class TestEnvCredentialGate:
    """Server-side env vars, legacy VITE_* names accepted."""

    @pytest.mark.asyncio
    async def test_reads_server_names(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gm")
        monkeypatch.setenv("GROQ_API_KEY", "gq")
        creds = await EnvCredentialGate().get_credentials()
        assert creds == {Provider.GEMINI: "gm", Provider.MISTRAL: None, Provider.GROQ: "gq"}

    def test_legacy_names(self, monkeypatch):
        monkeypatch.setenv("VITE_MISTRAL_API_KEY", "ms-legacy")
        assert read_env_credentials()[Provider.MISTRAL] == "ms-legacy"

    def test_server_name_preferred(self, monkeypatch):
        monkeypatch.setenv("VITE_MISTRAL_API_KEY", "ms-legacy")
        monkeypatch.setenv("MISTRAL_API_KEY", "ms-server")
        assert read_env_credentials()[Provider.MISTRAL] == "ms-server"


class TestStaticCredentialGate:

    @pytest.mark.asyncio
    async def test_returns_copy(self):
        gate = StaticCredentialGate({Provider.GEMINI: "gm"})
        first = await gate.get_credentials()
        first[Provider.GEMINI] = "changed"
        assert (await gate.get_credentials())[Provider.GEMINI] == "gm"

    def test_repr_hides_secrets(self):
        gate = StaticCredentialGate({Provider.GEMINI: "gm-very-secret"})
        assert "gm-very-secret" not in repr(gate)
        assert "'gemini': True" in repr(gate)


class TestRemoteCredentialGate:
    """Key-fetch endpoint over httpx (MockTransport)."""

    @staticmethod
    def _gate(handler):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return RemoteCredentialGate(KEYS_URL, client=client)

    @pytest.mark.asyncio
    async def test_success(self):
        def handler(request):
            assert request.method == "GET"
            assert str(request.url) == KEYS_URL
            return httpx.Response(200, json={"geminiKey": "gm", "mistralKey": None, "groqKey": "gq"})

        creds = await self._gate(handler).get_credentials()
        assert creds == {Provider.GEMINI: "gm", Provider.MISTRAL: None, Provider.GROQ: "gq"}

    @pytest.mark.asyncio
    async def test_non_200_is_config_error(self):
        gate = self._gate(lambda request: httpx.Response(500, json={"error": "Internal server error"}))
        with pytest.raises(ConfigError) as exc_info:
            await gate.get_credentials()
        assert "status 500" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_json_is_config_error(self):
        gate = self._gate(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(ConfigError):
            await gate.get_credentials()

    @pytest.mark.asyncio
    async def test_non_object_is_config_error(self):
        gate = self._gate(lambda request: httpx.Response(200, json=["gm"]))
        with pytest.raises(ConfigError):
            await gate.get_credentials()

    @pytest.mark.asyncio
    async def test_unreachable_is_config_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ConfigError) as exc_info:
            await self._gate(handler).get_credentials()
        assert "unreachable" in str(exc_info.value)


class TestCredentialStoreSingleFlight:
    """At most one gate fetch per store, shared by concurrent callers."""

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_one_fetch(self):
        gate = SlowGate(result=dict(ALL_KEYS))
        store = CredentialStore(gate)

        tasks = [asyncio.ensure_future(store.get()) for _ in range(8)]
        await asyncio.sleep(0)
        assert not store.initialized
        gate.release.set()
        results = await asyncio.gather(*tasks)

        assert gate.calls == 1
        assert store.fetch_count == 1
        assert all(r == ALL_KEYS for r in results)
        assert store.initialized

    @pytest.mark.asyncio
    async def test_concurrent_failure_shared(self):
        """Test every concurrent caller sees the same ConfigError."""
        gate = SlowGate(error=ConfigError("endpoint down"))
        store = CredentialStore(gate)

        tasks = [asyncio.ensure_future(store.get()) for _ in range(5)]
        await asyncio.sleep(0)
        gate.release.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert gate.calls == 1
        assert all(isinstance(r, ConfigError) for r in results)

    @pytest.mark.asyncio
    async def test_later_calls_use_cache(self):
        gate = Mock()
        gate.get_credentials = AsyncMock(return_value=dict(ALL_KEYS))
        store = CredentialStore(gate)

        await store.get()
        await store.get()
        await store.get()

        gate.get_credentials.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_is_sticky(self):
        gate = Mock()
        gate.get_credentials = AsyncMock(side_effect=ConfigError("endpoint down"))
        store = CredentialStore(gate)

        for _ in range(3):
            with pytest.raises(ConfigError):
                await store.get()

        assert store.fetch_count == 1
        assert not store.initialized

    @pytest.mark.asyncio
    async def test_reset_allows_refetch(self):
        gate = Mock()
        gate.get_credentials = AsyncMock(
            side_effect=[ConfigError("endpoint down"), dict(ALL_KEYS)]
        )
        store = CredentialStore(gate)

        with pytest.raises(ConfigError):
            await store.get()
        store.reset()

        assert await store.get() == ALL_KEYS
        assert gate.get_credentials.await_count == 2

    @pytest.mark.asyncio
    async def test_unexpected_gate_error_wrapped(self):
        gate = Mock()
        gate.get_credentials = AsyncMock(side_effect=RuntimeError("socket closed"))
        store = CredentialStore(gate)

        with pytest.raises(ConfigError) as exc_info:
            await store.get()
        assert "socket closed" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_none_result_is_config_error(self):
        gate = Mock()
        gate.get_credentials = AsyncMock(return_value=None)
        with pytest.raises(ConfigError):
            await CredentialStore(gate).get()

    @pytest.mark.asyncio
    async def test_non_mapping_result_is_config_error(self):
        gate = Mock()
        gate.get_credentials = AsyncMock(return_value=["gemini"])
        store = CredentialStore(gate)
        with pytest.raises(ConfigError) as exc_info:
            await store.get()
        assert "expected a mapping" in str(exc_info.value)
        assert not store.initialized


class TestCredentialStoreNormalization:

    @pytest.mark.asyncio
    async def test_string_keys_and_blank_values(self):
        gate = Mock()
        gate.get_credentials = AsyncMock(
            return_value={"gemini": " gm ", "mistral": "", "openai": "sk-x"}
        )
        creds = await CredentialStore(gate).get()
        assert creds == {Provider.GEMINI: "gm", Provider.MISTRAL: None}

    @pytest.mark.asyncio
    async def test_missing_key_warning_never_logs_secret(self, caplog):
        store = CredentialStore(StaticCredentialGate({Provider.GEMINI: "gm-very-secret"}))
        with caplog.at_level(logging.WARNING, logger="app.credentials.store"):
            await store.get()
        assert "mistral API key not provided" in caplog.text
        assert "gm-very-secret" not in caplog.text
        assert "gm-very-secret" not in repr(store)


class TestDefaultStore:
    """get_credential_store picks its gate from CREDENTIALS_URL."""

    def test_env_gate_by_default(self):
        set_credential_store(None)
        store = get_credential_store()
        assert isinstance(store._gate, EnvCredentialGate)
        assert get_credential_store() is store

    def test_remote_gate_when_url_set(self, monkeypatch):
        monkeypatch.setenv("CREDENTIALS_URL", KEYS_URL)
        set_credential_store(None)
        store = get_credential_store()
        assert isinstance(store._gate, RemoteCredentialGate)
        assert store._gate.url == KEYS_URL
