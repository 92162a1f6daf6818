# FILE: tests/fakes.py
"""Test doubles shared across the suite. No test here reaches a real backend."""

from unittest.mock import AsyncMock, Mock

from app.credentials import CredentialStore, StaticCredentialGate
from app.llm.dispatcher import Dispatcher
from app.llm.normalizer import ResponseNormalizer
from app.llm.schemas import Provider

ALL_KEYS = {
    Provider.GEMINI: "gm-test-key",
    Provider.MISTRAL: "ms-test-key",
    Provider.GROQ: "gq-test-key",
}


def make_adapter(reply="", error=None, model_id="test-model"):
    """Adapter double: invoke() returns `reply` or raises `error`."""
    adapter = Mock()
    adapter.model_id = model_id
    if error is not None:
        adapter.invoke = AsyncMock(side_effect=error)
    else:
        adapter.invoke = AsyncMock(return_value=reply)
    return adapter


def make_store(credentials=None):
    return CredentialStore(StaticCredentialGate(ALL_KEYS if credentials is None else credentials))


def make_dispatcher(adapters, credentials=None, audit_sink=None, lenient=False):
    return Dispatcher(
        adapters=adapters,
        credential_store=make_store(credentials),
        normalizer=ResponseNormalizer(lenient=lenient),
        audit_sink=audit_sink,
    )
