# FILE: tests/conftest.py
"""
Pytest configuration for the LLM proxy test suite.

Configures:
- pytest-asyncio (asyncio_mode = auto, see pyproject.toml)
- a clean provider-key environment for every test
- process-wide dispatcher / credential store reset after every test

Shared doubles (fake adapters, static credential stores) live in tests/fakes.py.
"""
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

from app.credentials import set_credential_store
from app.llm.dispatcher import set_dispatcher

PROVIDER_ENV_VARS = [
    "GEMINI_API_KEY",
    "MISTRAL_API_KEY",
    "GROQ_API_KEY",
    "VITE_GEMINI_API_KEY",
    "VITE_MISTRAL_API_KEY",
    "VITE_GROQ_API_KEY",
    "GEMINI_MODEL",
    "MISTRAL_MODEL",
    "GROQ_MODEL",
    "LLM_LENIENT_DECODE",
    "LLM_HTTP_TIMEOUT_SECONDS",
    "CREDENTIALS_URL",
    "CORS_ALLOW_ORIGIN",
    "EXPOSE_API_KEYS_ENDPOINT",
]


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch):
    """Every test starts with no provider keys or overrides in env."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    set_dispatcher(None)
    set_credential_store(None)


@pytest.fixture
def sample_plan_text():
    return '[{"description":"Init repo","prompt":"scaffold"}]'


@pytest.fixture
def sample_structure_text():
    return '[{"name":"src","type":"directory","children":[{"name":"main.ts","type":"file"}]}]'
