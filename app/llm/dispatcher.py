# FILE: app/llm/dispatcher.py
"""
Dispatcher: provider selection + adapter -> normalizer pipeline.

    result = await dispatch(prompt, "mistral", "plan")

Order of checks (all before any network call):
1. provider / task type identifiers resolve to known enums
2. prompt is non-empty
3. an adapter is registered for the provider
4. the credential store has a secret for the provider

Then the adapter is invoked with the task's fixed system instruction and its
raw text is normalized for the task type. Every failure is logged here and
re-raised with provider and task type in the message; there is no fallback
to another provider and no retry.
"""
from __future__ import annotations

import logging
import time
from typing import Dict, Mapping, Optional, Union

from app.credentials import CredentialStore, get_credential_store
from app.llm.audit import AuditSink, DispatchEvent, get_audit_sink
from app.llm.errors import (
    ConfigError,
    EmptyPromptError,
    LLMProxyError,
    NormalizationError,
    ProviderError,
    ProviderUnavailableError,
    UnknownProviderError,
    UnknownTaskTypeError,
)
from app.llm.normalizer import ResponseNormalizer
from app.llm.prompts import system_instruction_for
from app.llm.schemas import NormalizedResult, Provider, TaskType
from app.providers.base import ProviderAdapter
from app.providers.registry import get_adapters

logger = logging.getLogger(__name__)


def resolve_provider(provider: Union[Provider, str]) -> Provider:
    if isinstance(provider, Provider):
        return provider
    try:
        return Provider(str(provider).strip().lower())
    except ValueError:
        raise UnknownProviderError(str(provider), [p.value for p in Provider]) from None


def resolve_task_type(task_type: Union[TaskType, str]) -> TaskType:
    if isinstance(task_type, TaskType):
        return task_type
    try:
        return TaskType(str(task_type).strip().lower())
    except ValueError:
        raise UnknownTaskTypeError(str(task_type), [t.value for t in TaskType]) from None


class Dispatcher:
    def __init__(
        self,
        adapters: Optional[Mapping[Provider, ProviderAdapter]] = None,
        credential_store: Optional[CredentialStore] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        audit_sink: Optional[AuditSink] = None,
    ):
        self._adapters: Dict[Provider, ProviderAdapter] = (
            dict(adapters) if adapters is not None else get_adapters()
        )
        self._credential_store = credential_store
        self._normalizer = normalizer or ResponseNormalizer()
        self._audit_sink = audit_sink if audit_sink is not None else get_audit_sink()

    @property
    def credential_store(self) -> CredentialStore:
        return self._credential_store or get_credential_store()

    @property
    def providers(self) -> list[Provider]:
        return list(self._adapters)

    async def dispatch(
        self,
        prompt: str,
        provider: Union[Provider, str],
        task_type: Union[TaskType, str],
    ) -> NormalizedResult:
        started = time.perf_counter()
        provider_label = getattr(provider, "value", str(provider))
        task_label = getattr(task_type, "value", str(task_type))
        adapter: Optional[ProviderAdapter] = None
        raw_text = ""

        try:
            resolved_provider = resolve_provider(provider)
            task = resolve_task_type(task_type)
            provider_label, task_label = resolved_provider.value, task.value

            if not prompt or not prompt.strip():
                raise EmptyPromptError(provider_label, task_label)

            adapter = self._select_adapter(resolved_provider, task)
            credential = await self._credential_for(resolved_provider, task)

            try:
                raw_text = await adapter.invoke(system_instruction_for(task), prompt, credential)
            except ProviderError as exc:
                raise exc.for_task(task_label) from exc

            try:
                result = self._normalizer.normalize(raw_text, task)
            except NormalizationError as exc:
                raise exc.for_provider(provider_label) from exc

        except LLMProxyError as exc:
            logger.error(
                "[dispatcher] %s request to %s failed (%s): %s",
                task_label,
                provider_label,
                exc.__class__.__name__,
                exc,
            )
            self._audit(
                provider_label,
                task_label,
                started,
                adapter=adapter,
                prompt=prompt,
                raw_text=raw_text,
                error=exc,
            )
            raise

        logger.info(
            "[dispatcher] %s request to %s ok (model=%s, chars=%d)",
            task_label,
            provider_label,
            adapter.model_id,
            len(raw_text),
        )
        self._audit(provider_label, task_label, started, adapter=adapter, prompt=prompt, raw_text=raw_text)
        return result

    def _select_adapter(self, provider: Provider, task: TaskType) -> ProviderAdapter:
        adapter = self._adapters.get(provider)
        if adapter is None:
            raise ProviderUnavailableError(provider.value, task.value, "no adapter registered")
        return adapter

    async def _credential_for(self, provider: Provider, task: TaskType) -> str:
        try:
            credentials = await self.credential_store.get()
        except ConfigError as exc:
            raise ConfigError(
                f"Credentials unavailable for {task.value} request to {provider.value}: {exc}"
            ) from exc
        secret = credentials.get(provider)
        if not secret:
            raise ProviderUnavailableError(provider.value, task.value, "API key not configured")
        return secret

    def _audit(
        self,
        provider: str,
        task_type: str,
        started: float,
        *,
        adapter: Optional[ProviderAdapter],
        prompt: Optional[str],
        raw_text: str,
        error: Optional[Exception] = None,
    ) -> None:
        if self._audit_sink is None:
            return
        event = DispatchEvent(
            provider=provider,
            task_type=task_type,
            status="error" if error else "success",
            model_id=adapter.model_id if adapter else None,
            error_type=error.__class__.__name__ if error else None,
            error_message=str(error) if error else None,
            prompt_chars=len(prompt or ""),
            response_chars=len(raw_text or ""),
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
        try:
            self._audit_sink.record(event)
        except Exception as exc:
            # Audit must never fail a dispatch.
            logger.warning("[dispatcher] audit sink failed: %s", exc)


_dispatcher: Optional[Dispatcher] = None


def get_dispatcher() -> Dispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = Dispatcher()
    return _dispatcher


def set_dispatcher(dispatcher: Optional[Dispatcher]) -> None:
    global _dispatcher
    _dispatcher = dispatcher


async def dispatch(
    prompt: str,
    provider: Union[Provider, str],
    task_type: Union[TaskType, str],
) -> NormalizedResult:
    return await get_dispatcher().dispatch(prompt, provider, task_type)


__all__ = [
    "Dispatcher",
    "dispatch",
    "get_dispatcher",
    "set_dispatcher",
    "resolve_provider",
    "resolve_task_type",
]
