# FILE: app/llm/__init__.py
"""
LLM module exports: schemas, error taxonomy and the normalizer.

The dispatcher lives in app.llm.dispatcher and is not re-exported here:
providers and credentials import these leaf modules, and the dispatcher
imports both of them.
"""

# ============== SCHEMA EXPORTS ==============

from app.llm.schemas import (
    Provider,
    TaskType,
    FileKind,
    PlanStep,
    FileNode,
    NormalizedResult,
)

# ============== ERROR EXPORTS ==============

from app.llm.errors import (
    LLMProxyError,
    ConfigError,
    DispatchError,
    UnknownProviderError,
    UnknownTaskTypeError,
    EmptyPromptError,
    ProviderUnavailableError,
    ProviderError,
    NormalizationError,
)

# ============== NORMALIZER EXPORTS ==============

from app.llm.normalizer import ResponseNormalizer, normalize

__all__ = [
    # Schemas
    "Provider",
    "TaskType",
    "FileKind",
    "PlanStep",
    "FileNode",
    "NormalizedResult",
    # Errors
    "LLMProxyError",
    "ConfigError",
    "DispatchError",
    "UnknownProviderError",
    "UnknownTaskTypeError",
    "EmptyPromptError",
    "ProviderUnavailableError",
    "ProviderError",
    "NormalizationError",
    # Normalizer
    "ResponseNormalizer",
    "normalize",
]
