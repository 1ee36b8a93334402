"""Async utilities: AsyncResult and Result-producing helpers for awaitables.

This module provides:
- AsyncResult: Result container whose value is a pending computation
- try_: Wrap one awaitable call in a Result
- retry / try_async: Repeat failing calls with a delay (and a timeout)
- timeout: Race a call against a timer
- combine: Fold AsyncResults into one

Examples:
    >>> from fluent_result.async_ import AsyncResult, combine
    >>>
    >>> async def main():
    ...     combined = await combine([AsyncResult.ok(1), AsyncResult.ok(2)])
    ...     assert await combined.value == [1, 2]
"""

from fluent_result.async_.handle import Handle, Resolved, as_handle
from fluent_result.async_.result import AsyncResult
from fluent_result.async_.utils import combine, retry, timeout, try_, try_async

__all__ = [
    'AsyncResult',
    'Handle',
    'Resolved',
    'as_handle',
    'combine',
    'retry',
    'timeout',
    'try_',
    'try_async',
]
