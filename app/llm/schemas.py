# FILE: app/llm/schemas.py
"""
Dispatch schemas: provider/task identifiers and normalized result shapes.

TASK TYPES:
- plan:      ordered list of PlanStep {description, prompt}
- structure: root-level list of FileNode {name, type, children?}
- code:      raw generated code text

All values are immutable once built. Pydantic models are frozen and
NormalizedResult is a frozen dataclass.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# IDENTIFIERS
# =============================================================================

class Provider(str, Enum):
    """LLM provider identifiers (wire value of the `model` field)."""
    GEMINI = "gemini"
    MISTRAL = "mistral"
    GROQ = "groq"


class TaskType(str, Enum):
    """Requested output shape (wire value of the `type` field)."""
    PLAN = "plan"
    STRUCTURE = "structure"
    CODE = "code"


class FileKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


# =============================================================================
# STRUCTURED RESULTS
# =============================================================================

class PlanStep(BaseModel):
    """One development step. Order within a plan is execution order."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    description: str
    prompt: str


class FileNode(BaseModel):
    """
    Node of a generated file tree.

    `kind` travels as `type` on the wire. Directories always carry a
    children list (empty when the model omitted it); files never do.
    """
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str
    kind: FileKind = Field(alias="type")
    children: Optional[List["FileNode"]] = None

    @model_validator(mode="before")
    @classmethod
    def _shape_children(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        kind = data.get("type", data.get("kind"))
        if kind == FileKind.DIRECTORY:
            if data.get("children") is None:
                data["children"] = []
        else:
            data.pop("children", None)
        return data

    @property
    def is_directory(self) -> bool:
        return self.kind == FileKind.DIRECTORY

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


FileNode.model_rebuild()


# =============================================================================
# NORMALIZED RESULT (tagged union)
# =============================================================================

@dataclass(frozen=True)
class NormalizedResult:
    """
    Result of one dispatch. Exactly one of plan/structure/text is set,
    selected by task_type.

    `decoded` is False only in lenient mode, when a plan/structure reply
    could not be decoded and its raw text is carried in `text` instead.
    """
    task_type: TaskType
    plan: Optional[Tuple[PlanStep, ...]] = None
    structure: Optional[Tuple[FileNode, ...]] = None
    text: Optional[str] = None
    decoded: bool = True

    def __post_init__(self) -> None:
        populated = [v for v in (self.plan, self.structure, self.text) if v is not None]
        if len(populated) != 1:
            raise ValueError("NormalizedResult must carry exactly one variant")
        expected = {
            TaskType.PLAN: self.plan,
            TaskType.STRUCTURE: self.structure,
            TaskType.CODE: self.text,
        }[self.task_type]
        if expected is None and self.decoded:
            raise ValueError(f"variant does not match task type '{self.task_type.value}'")

    @classmethod
    def for_plan(cls, steps: List[PlanStep]) -> "NormalizedResult":
        return cls(task_type=TaskType.PLAN, plan=tuple(steps))

    @classmethod
    def for_structure(cls, nodes: List[FileNode]) -> "NormalizedResult":
        return cls(task_type=TaskType.STRUCTURE, structure=tuple(nodes))

    @classmethod
    def for_code(cls, text: str) -> "NormalizedResult":
        return cls(task_type=TaskType.CODE, text=text)

    @classmethod
    def undecoded(cls, task_type: TaskType, raw_text: str) -> "NormalizedResult":
        return cls(task_type=task_type, text=raw_text, decoded=False)

    @property
    def value(self) -> Any:
        if self.plan is not None:
            return self.plan
        if self.structure is not None:
            return self.structure
        return self.text

    def to_payload(self) -> Any:
        """JSON-ready value for the proxy's `result` field."""
        if self.plan is not None:
            return [step.model_dump(mode="json") for step in self.plan]
        if self.structure is not None:
            return [node.to_wire() for node in self.structure]
        return self.text


__all__ = [
    "Provider",
    "TaskType",
    "FileKind",
    "PlanStep",
    "FileNode",
    "NormalizedResult",
]
