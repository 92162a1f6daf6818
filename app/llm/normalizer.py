# FILE: app/llm/normalizer.py
"""
Response normalizer: raw backend text -> NormalizedResult.

DECODING POLICY:
- code: text passes through untouched, never fails
- plan / structure: the whole text must be one JSON array. Prose or code
  fences around the payload are a parse failure; nothing is stripped or
  recovered here. Callers that want leniency pre-clean the text.

Legacy leniency (undecodable plan/structure text returned as-is) is an
explicit option: ResponseNormalizer(lenient=True) or LLM_LENIENT_DECODE=true.
"""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from config import lenient_decode_enabled

from app.llm.errors import NormalizationError
from app.llm.schemas import FileNode, NormalizedResult, PlanStep, TaskType

logger = logging.getLogger(__name__)

_PLAN_ADAPTER = TypeAdapter(List[PlanStep])
_STRUCTURE_ADAPTER = TypeAdapter(List[FileNode])


def _format_validation_error(exc: ValidationError) -> str:
    parts: List[str] = []
    for err in exc.errors()[:5]:
        path = "".join(
            f"[{p}]" if isinstance(p, int) else f".{p}" for p in err.get("loc", ())
        )
        parts.append(f"${path}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def _decode_array(raw_text: str, task_type: TaskType) -> List[Any]:
    if not raw_text or not raw_text.strip():
        raise NormalizationError(task_type.value, "model output is empty")
    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise NormalizationError(
            task_type.value, f"model output is not valid JSON: {exc.msg}"
        ) from exc
    except RecursionError as exc:
        raise NormalizationError(task_type.value, "model output is nested too deeply") from exc
    if not isinstance(parsed, list):
        raise NormalizationError(task_type.value, "model output must be a JSON array")
    return parsed


def validate_plan(items: Any) -> List[PlanStep]:
    """Validate an already-decoded plan value."""
    if not isinstance(items, list):
        raise NormalizationError(TaskType.PLAN.value, "plan must be a JSON array")
    try:
        return _PLAN_ADAPTER.validate_python(items)
    except ValidationError as exc:
        raise NormalizationError(TaskType.PLAN.value, _format_validation_error(exc)) from exc
    except RecursionError as exc:
        raise NormalizationError(TaskType.PLAN.value, "plan is nested too deeply") from exc


def validate_structure(items: Any) -> List[FileNode]:
    """Validate an already-decoded file tree value."""
    if not isinstance(items, list):
        raise NormalizationError(TaskType.STRUCTURE.value, "file structure must be a JSON array")
    try:
        return _STRUCTURE_ADAPTER.validate_python(items)
    except ValidationError as exc:
        raise NormalizationError(TaskType.STRUCTURE.value, _format_validation_error(exc)) from exc
    except RecursionError as exc:
        raise NormalizationError(TaskType.STRUCTURE.value, "file structure is nested too deeply") from exc


def parse_plan(raw_text: str) -> List[PlanStep]:
    return validate_plan(_decode_array(raw_text, TaskType.PLAN))


def parse_structure(raw_text: str) -> List[FileNode]:
    return validate_structure(_decode_array(raw_text, TaskType.STRUCTURE))


class ResponseNormalizer:
    def __init__(self, lenient: Optional[bool] = None):
        if lenient is None:
            lenient = lenient_decode_enabled()
        self.lenient = lenient

    def normalize(self, raw_text: str, task_type: TaskType) -> NormalizedResult:
        if task_type == TaskType.CODE:
            return NormalizedResult.for_code(raw_text)

        try:
            if task_type == TaskType.PLAN:
                return NormalizedResult.for_plan(parse_plan(raw_text))
            return NormalizedResult.for_structure(parse_structure(raw_text))
        except NormalizationError as exc:
            if not self.lenient:
                raise
            logger.warning(
                "[normalizer] lenient mode: passing undecoded %s text through (%s)",
                task_type.value,
                exc.detail,
            )
            return NormalizedResult.undecoded(task_type, raw_text)


def normalize(raw_text: str, task_type: TaskType) -> NormalizedResult:
    """Strict normalization, independent of the LLM_LENIENT_DECODE flag."""
    return ResponseNormalizer(lenient=False).normalize(raw_text, task_type)


__all__ = [
    "ResponseNormalizer",
    "normalize",
    "parse_plan",
    "parse_structure",
    "validate_plan",
    "validate_structure",
]
