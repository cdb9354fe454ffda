from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from .logger import get_logger, log_json

SENSITIVE_KEY_MARKERS = ("token", "password", "secret", "authorization", "apikey", "api_key")


@dataclass(frozen=True)
class DiagnosticEvent:
    stage: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_line(self) -> str:
        return f"{self.at.strftime('%H:%M:%S')}: [{self.stage}] {self.message}"


class DiagnosticsSink(Protocol):
    def record(self, stage: str, message: str, **data: Any) -> None: ...

    def snapshot(self) -> list[DiagnosticEvent]: ...


def sanitize(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: sanitize(nested)
            for key, nested in value.items()
            if not any(marker in str(key).lower() for marker in SENSITIVE_KEY_MARKERS)
        }
    if isinstance(value, (list, tuple)):
        return [sanitize(item) for item in value]
    return value


class RingBufferSink:
    """Keeps the most recent ``capacity`` events and mirrors each one to logging."""

    def __init__(self, capacity: int = 20, logger: logging.Logger | None = None) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._events: deque[DiagnosticEvent] = deque(maxlen=capacity)
        self._logger = logger or get_logger("hoa_client_sdk.diagnostics")

    @property
    def capacity(self) -> int:
        return self._events.maxlen or 0

    def record(self, stage: str, message: str, **data: Any) -> None:
        event = DiagnosticEvent(stage=stage, message=message, data=sanitize(data))
        self._events.append(event)
        log_json(
            self._logger,
            {"ts": event.at.isoformat(), "stage": stage, "message": message, **event.data},
            logging.DEBUG,
        )

    def snapshot(self) -> list[DiagnosticEvent]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()


class NullSink:
    def record(self, stage: str, message: str, **data: Any) -> None:
        return None

    def snapshot(self) -> list[DiagnosticEvent]:
        return []
