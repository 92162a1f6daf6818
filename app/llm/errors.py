# FILE: app/llm/errors.py
"""
Error taxonomy for the dispatch pipeline.

LLMProxyError
- ConfigError: credentials absent or credential gate unreachable
- DispatchError: bad identifiers / unavailable provider, raised before any network call
- ProviderError: backend call failed or its reply lacked the expected payload
- NormalizationError: backend text is not the structured data the task type needs

All of them are terminal for the current dispatch. Messages never carry
credential material.
"""
from __future__ import annotations

from typing import Optional


class LLMProxyError(Exception):
    """Base exception for the dispatch pipeline."""
    pass


class ConfigError(LLMProxyError):
    """Raised when credentials cannot be obtained."""
    pass


# =============================================================================
# DISPATCH
# =============================================================================

class DispatchError(LLMProxyError):
    """Raised when a request cannot be routed to a backend."""
    pass


class UnknownProviderError(DispatchError):
    """Raised when an unknown provider identifier is requested."""
    def __init__(self, provider: str, available: list[str]):
        self.provider = provider
        self.available = available
        super().__init__(
            f"Unknown provider: '{provider}'. Available: {', '.join(available)}"
        )


class UnknownTaskTypeError(DispatchError):
    """Raised when an unknown task type identifier is requested."""
    def __init__(self, task_type: str, available: list[str]):
        self.task_type = task_type
        self.available = available
        super().__init__(
            f"Unknown task type: '{task_type}'. Available: {', '.join(available)}"
        )


class EmptyPromptError(DispatchError):
    def __init__(self, provider: str, task_type: str):
        self.provider = provider
        self.task_type = task_type
        super().__init__(f"Empty prompt for {task_type} request to {provider}")


class ProviderUnavailableError(DispatchError):
    """Raised when the selected provider has no adapter or no credential."""
    def __init__(self, provider: str, task_type: str, reason: str):
        self.provider = provider
        self.task_type = task_type
        self.reason = reason
        super().__init__(
            f"Provider '{provider}' unavailable for {task_type} request: {reason}"
        )


# =============================================================================
# BACKEND / DECODING
# =============================================================================

class ProviderError(LLMProxyError):
    """Raised when a backend call fails or returns an unusable envelope."""
    def __init__(self, provider: str, detail: str, task_type: Optional[str] = None):
        self.provider = provider
        self.detail = detail
        self.task_type = task_type
        if task_type:
            message = f"{provider} failed on {task_type} request: {detail}"
        else:
            message = f"{provider} call failed: {detail}"
        super().__init__(message)

    def for_task(self, task_type: str) -> "ProviderError":
        """Copy of this error whose message also names the task type."""
        return ProviderError(self.provider, self.detail, task_type=task_type)


class NormalizationError(LLMProxyError):
    """Raised when backend text cannot be decoded into the task's shape."""
    def __init__(self, task_type: str, detail: str, provider: Optional[str] = None):
        self.task_type = task_type
        self.detail = detail
        self.provider = provider
        if provider:
            message = f"Invalid {task_type} response from {provider}: {detail}"
        else:
            message = f"Invalid {task_type} response: {detail}"
        super().__init__(message)

    def for_provider(self, provider: str) -> "NormalizationError":
        return NormalizationError(self.task_type, self.detail, provider=provider)


__all__ = [
    "LLMProxyError",
    "ConfigError",
    "DispatchError",
    "UnknownProviderError",
    "UnknownTaskTypeError",
    "EmptyPromptError",
    "ProviderUnavailableError",
    "ProviderError",
    "NormalizationError",
]
