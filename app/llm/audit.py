# FILE: app/llm/audit.py
"""
Optional audit sink for dispatches.

One DispatchEvent per dispatch (success or failure). Events carry sizes and
timings, never prompt text, model output or credentials.

Enable the default sink with LLM_AUDIT_ENABLED=true; it writes one JSON line
per event to the "app.llm.audit" logger. Sinks must not break dispatches:
the dispatcher swallows and logs sink failures.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

AUDIT_ENABLED = os.getenv("LLM_AUDIT_ENABLED", "false").lower() == "true"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class DispatchEvent:
    provider: str
    task_type: str
    status: str
    model_id: Optional[str] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    prompt_chars: int = 0
    response_chars: int = 0
    latency_ms: int = 0
    timestamp: str = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AuditSink(Protocol):
    def record(self, event: DispatchEvent) -> None:
        ...


class LoggingAuditSink:
    def __init__(self, level: int = logging.INFO):
        self.level = level

    def record(self, event: DispatchEvent) -> None:
        logger.log(self.level, json.dumps(event.to_dict(), sort_keys=True))


class InMemoryAuditSink:
    """Bounded ring of recent events."""

    def __init__(self, max_events: int = 500):
        self._events: Deque[DispatchEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def record(self, event: DispatchEvent) -> None:
        with self._lock:
            self._events.append(event)

    def get_recent_events(self, limit: int = 50) -> List[DispatchEvent]:
        with self._lock:
            events = list(self._events)
        return events[-limit:]


_audit_sink: Optional[AuditSink] = None


def get_audit_sink() -> Optional[AuditSink]:
    global _audit_sink
    if _audit_sink is None and AUDIT_ENABLED:
        _audit_sink = LoggingAuditSink()
    return _audit_sink


__all__ = [
    "DispatchEvent",
    "AuditSink",
    "LoggingAuditSink",
    "InMemoryAuditSink",
    "get_audit_sink",
]
