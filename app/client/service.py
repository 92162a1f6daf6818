# FILE: app/client/service.py
"""
AIService - caller-side facade over the LLM proxy.

Holds no provider secrets: every call is a POST of {prompt, model, type}
to the proxy's /llm endpoint. Results are coerced into the app shapes:

- generate_detailed_plan()  -> List[PlanStep]
- generate_file_structure() -> List[FileNode]
- generate_code()           -> str

The proxy may return plan/structure either already decoded or as a JSON
string; both are validated with the same rules as the server normalizer.

Usage:
    service = AIService(base_url="http://localhost:8000")
    steps = await service.generate_detailed_plan("todo app", "gemini")
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, List, Optional, Union

import httpx

from app.llm.dispatcher import resolve_provider, resolve_task_type
from app.llm.errors import DispatchError, LLMProxyError, ProviderError
from app.llm.normalizer import parse_plan, parse_structure, validate_plan, validate_structure
from app.llm.schemas import FileNode, PlanStep, Provider, TaskType

logger = logging.getLogger(__name__)

DEFAULT_PROXY_URL = os.getenv("LLM_PROXY_URL", "http://localhost:8000")
DEFAULT_ENDPOINT = "/llm"


class AIService:
    def __init__(
        self,
        base_url: Optional[str] = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout_seconds: float = 120.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or DEFAULT_PROXY_URL).rstrip("/")
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _post(self, payload: dict) -> httpx.Response:
        url = f"{self.base_url}{self.endpoint}"
        if self._client is not None:
            return await self._client.post(url, json=payload)
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_seconds)) as client:
            return await client.post(url, json=payload)

    async def _call_llm_function(
        self,
        prompt: str,
        provider: Union[Provider, str],
        task_type: TaskType,
    ) -> Any:
        provider_id = resolve_provider(provider).value
        payload = {"prompt": prompt, "model": provider_id, "type": task_type.value}

        try:
            resp = await self._post(payload)
        except httpx.HTTPError as exc:
            logger.error("[ai_service] proxy call failed: %s", exc)
            raise ProviderError(provider_id, f"proxy unreachable: {exc}", task_type=task_type.value) from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not resp.is_success:
            detail = data.get("error") or f"HTTP error! status: {resp.status_code}"
            logger.error("[ai_service] proxy returned %s: %s", resp.status_code, detail)
            if resp.status_code == 400:
                raise DispatchError(f"Failed to generate {task_type.value}: {detail}")
            raise ProviderError(provider_id, detail, task_type=task_type.value)

        result = data.get("result")
        if result is None or result == "":
            raise ProviderError(provider_id, "No result received from the AI model", task_type=task_type.value)
        return result

    async def generate_detailed_plan(self, prompt: str, provider: Union[Provider, str]) -> List[PlanStep]:
        try:
            result = await self._call_llm_function(prompt, provider, TaskType.PLAN)
            if isinstance(result, str):
                return parse_plan(result)
            return validate_plan(result)
        except LLMProxyError as exc:
            logger.error("[ai_service] generating plan with %s failed: %s", provider, exc)
            raise

    async def generate_file_structure(self, prompt: str, provider: Union[Provider, str]) -> List[FileNode]:
        try:
            result = await self._call_llm_function(prompt, provider, TaskType.STRUCTURE)
            if isinstance(result, str):
                return parse_structure(result)
            return validate_structure(result)
        except LLMProxyError as exc:
            logger.error("[ai_service] generating file structure with %s failed: %s", provider, exc)
            raise

    async def generate_code(self, prompt: str, provider: Union[Provider, str]) -> str:
        try:
            result = await self._call_llm_function(prompt, provider, TaskType.CODE)
        except LLMProxyError as exc:
            logger.error("[ai_service] generating code with %s failed: %s", provider, exc)
            raise
        return result if isinstance(result, str) else json.dumps(result)

    async def generate(self, prompt: str, provider: Union[Provider, str], task_type: Union[TaskType, str]) -> Any:
        """Generic entry point keyed by task type."""
        task = resolve_task_type(task_type)
        if task == TaskType.PLAN:
            return await self.generate_detailed_plan(prompt, provider)
        if task == TaskType.STRUCTURE:
            return await self.generate_file_structure(prompt, provider)
        return await self.generate_code(prompt, provider)


__all__ = ["AIService"]
