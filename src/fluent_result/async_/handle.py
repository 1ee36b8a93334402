"""Pending-value handles held by AsyncResult.

A handle is something that can be awaited more than once: an asyncio
future/task, or a ``Resolved`` wrapper around a value that is already
available. Coroutines can only be awaited once, so they are scheduled as
tasks when turned into handles.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Generator
from typing import Any

__all__ = ['Handle', 'Resolved', 'as_handle', 'discard_outcome']


async def _identity[T](value: T) -> T:
    return value


class Resolved[T]:
    """An already-available value that can be awaited any number of times."""

    __slots__ = ('value',)

    def __init__(self, value: T) -> None:
        self.value = value

    def __await__(self) -> Generator[Any, Any, T]:
        return _identity(self.value).__await__()

    def __repr__(self) -> str:
        return f'Resolved({self.value!r})'


type Handle[T] = Resolved[T] | asyncio.Future[T]


def discard_outcome(task: asyncio.Future[Any]) -> None:
    """Done callback that marks a task's exception as retrieved.

    Without it, asyncio reports a failed task that nobody awaits as
    "exception was never retrieved". Awaiting the task still raises.
    """
    if not task.cancelled():
        task.exception()


def as_handle[T](value: T | Awaitable[T]) -> Handle[T]:
    """Normalize a value or awaitable into a re-awaitable handle.

    Futures and tasks are kept as they are. Other awaitables (coroutines
    included) are scheduled on the running loop, which means they start
    running right away; a failure nobody awaits is not reported as
    unhandled. Anything else is wrapped as ``Resolved``.

    Raises:
        RuntimeError: If a coroutine is given and no event loop is running.
    """
    if isinstance(value, Resolved) or asyncio.isfuture(value):
        return value  # type: ignore[return-value]
    if inspect.isawaitable(value):
        task = asyncio.ensure_future(value, loop=asyncio.get_running_loop())
        task.add_done_callback(discard_outcome)
        return task
    return Resolved(value)  # type: ignore[arg-type]
