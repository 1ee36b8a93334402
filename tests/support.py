"""Test doubles shared across test modules."""

from __future__ import annotations

from typing import Any


class RecordingSink:
    """Structlog-style sink capturing events for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    def _record(self, level: str, event: str, **fields: Any) -> None:
        self.events.append((level, event, fields))

    def debug(self, event: str, **fields: Any) -> None:
        self._record('debug', event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self._record('info', event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._record('warning', event, **fields)


class FlakyAction:
    """Awaitable action that raises a given number of times before succeeding."""

    def __init__(self, failures: int, value: Any = 'done', error: Exception | None = None) -> None:
        self.failures = failures
        self.value = value
        self.error = error or ValueError('boom')
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.value
