"""Helpers that turn awaitable actions into Results.

``try_`` wraps a single call, ``retry`` and ``try_async`` repeat failing
calls with a delay, ``timeout`` races a call against a timer, and
``combine`` folds several AsyncResults into one.

Timeout races do not cancel the losing action: it keeps running in the
background and its eventual outcome is discarded.

Examples:
    >>> async def fetch() -> dict:
    ...     ...
    >>>
    >>> async def main():
    ...     result = await try_async(fetch, max_attempts=5, delay_ms=200, timeout_ms=2000)
    ...     if result.is_failure:
    ...         print(result.errors[0].context)
"""

from __future__ import annotations

import asyncio
import traceback
from collections.abc import Awaitable, Callable, Sequence
import anyio
import anyio.lowlevel

from fluent_result._logging import get_logger
from fluent_result.async_.handle import discard_outcome
from fluent_result.async_.result import AsyncResult
from fluent_result.errors import OperationTimeoutError
from fluent_result.result import Result
from fluent_result.types.metadata import ResultOptions
from fluent_result.types.records import ErrorRecord, ExceptionCause, utcnow

__all__ = [
    'combine',
    'retry',
    'timeout',
    'try_',
    'try_async',
]

logger = get_logger(__name__)

UNKNOWN_ERROR_MESSAGE = 'Unknown error occurred'
TIMED_OUT_MESSAGE = 'Operation timed out'


def _message_of(exc: BaseException | None, fallback: str) -> str:
    if exc is None:
        return fallback
    return str(exc) or fallback


async def _race[T](
    action: Callable[[], Awaitable[T]],
    timeout_ms: float,
    message: str | None = None,
) -> T:
    """Await ``action()`` for at most ``timeout_ms`` milliseconds.

    Raises:
        OperationTimeoutError: If the deadline passes first. The action is
            shielded and left running.
    """
    task = asyncio.ensure_future(action())
    # Let the task take its first step: an action that finishes without
    # suspending beats any deadline, including zero.
    await anyio.lowlevel.checkpoint()
    if task.done():
        return task.result()
    with anyio.move_on_after(timeout_ms / 1000):
        return await asyncio.shield(task)
    task.add_done_callback(discard_outcome)
    raise OperationTimeoutError(timeout_ms, message)


async def try_[T](
    action: Callable[[], Awaitable[T]],
    options: ResultOptions | None = None,
) -> Result[T]:
    """Run ``action`` and wrap its outcome in a Result.

    Args:
        action: Zero-argument callable returning an awaitable.
        options: Options for the success Result.

    Returns:
        A success holding the value, or a failure whose error has the raised
        exception as its cause and the formatted traceback under
        ``context['stack']``.
    """
    try:
        value = await action()
    except Exception as exc:
        logger.debug('action_failed', error=repr(exc))
        return Result.fail(
            ErrorRecord.from_exception(
                exc,
                message=_message_of(exc, UNKNOWN_ERROR_MESSAGE),
                timestamp=utcnow(),
                context={'stack': ''.join(traceback.format_exception(exc))},
            )
        )
    return Result.ok(value, options=options)


async def combine[T](
    async_results: Sequence[AsyncResult[T]],
    options: ResultOptions | None = None,
) -> AsyncResult[list[T]]:
    """Resolve several AsyncResults and fold them into one.

    Every input is converted to a Result concurrently. If any failed, the
    outcome is a failure carrying all errors in input order; otherwise it is
    a success holding the values in input order.

    Args:
        async_results: Containers to combine.
        options: Options for the success container.
    """
    results = await asyncio.gather(*(item.to_result() for item in async_results))
    values: list[T] = []
    errors: list[ErrorRecord] = []
    for result in results:
        if result.is_success:
            values.append(result.value)
        else:
            errors.extend(result.errors)

    if errors:
        return AsyncResult.fail(errors)
    return AsyncResult.ok(values, options=options)


async def retry[T](
    action: Callable[[], Awaitable[T]],
    retries: int = 3,
    delay_ms: float = 1000,
) -> Result[T]:
    """Call ``action`` until it succeeds, retrying up to ``retries`` times.

    The first call is not a retry, so at most ``retries + 1`` calls are made,
    sleeping ``delay_ms`` between them.

    Returns:
        A success with the first value obtained, or a failure with message
        "Max retries reached", the last exception as cause, and context
        ``{'retries', 'attempts', 'final_attempt'}``.
    """
    last_error: Exception | None = None
    attempts = 0

    while attempts <= retries:
        try:
            value = await action()
        except Exception as exc:
            last_error = exc
            attempts += 1
            logger.debug('retry_attempt_failed', attempt=attempts, retries=retries, error=repr(exc))
            if attempts <= retries:
                await anyio.sleep(delay_ms / 1000)
        else:
            return Result.ok(value)

    logger.warning('retries_exhausted', attempts=attempts, retries=retries)
    return Result.fail(
        ErrorRecord(
            message='Max retries reached',
            caused_by=ExceptionCause(last_error) if last_error is not None else None,
            context={'retries': retries, 'attempts': attempts, 'final_attempt': True},
        )
    )


async def timeout[T](
    action: Callable[[], Awaitable[T]],
    timeout_ms: float,
) -> Result[T]:
    """Race ``action`` against a ``timeout_ms`` timer.

    Returns:
        A success with the value, or a failure carrying ``{'timeout_ms'}`` in
        its context. Timeouts have the message "Operation timed out after
        {timeout_ms}ms" and no cause; other exceptions become the cause.
    """
    try:
        value = await _race(action, timeout_ms)
    except OperationTimeoutError as exc:
        logger.warning('operation_timed_out', timeout_ms=timeout_ms)
        return Result.fail(ErrorRecord(message=str(exc), context={'timeout_ms': timeout_ms}))
    except Exception as exc:
        return Result.fail(
            ErrorRecord.from_exception(
                exc,
                message=_message_of(exc, TIMED_OUT_MESSAGE),
                context={'timeout_ms': timeout_ms},
            )
        )
    return Result.ok(value)


async def try_async[T](
    action: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    delay_ms: float = 1000,
    timeout_ms: float | None = None,
) -> Result[T]:
    """Call ``action`` with retries and an optional per-attempt timeout.

    Ordinary exceptions are retried up to ``max_attempts`` calls in total,
    sleeping ``delay_ms`` between calls (never after the last one). A timeout
    is final: it returns immediately without further attempts.

    Args:
        action: Zero-argument callable returning an awaitable.
        max_attempts: Total number of calls. Values below 1 still make one call.
        delay_ms: Delay between attempts in milliseconds.
        timeout_ms: Per-attempt timeout in milliseconds. None or 0 disables it.

    Returns:
        A success with the first value obtained; a failure with message
        "Operation timed out" and ``{'timeout_ms'}`` context on timeout; or,
        after exhausting attempts, a failure with the last exception's
        message and cause and context ``{'attempts', 'max_attempts',
        'delay_ms', 'timeout_ms'}``.
    """
    last_error: Exception | None = None
    attempts = max(max_attempts, 1)

    for attempt in range(1, attempts + 1):
        try:
            if timeout_ms:
                value = await _race(action, timeout_ms, TIMED_OUT_MESSAGE)
            else:
                value = await action()
        except OperationTimeoutError:
            logger.warning('operation_timed_out', timeout_ms=timeout_ms, attempt=attempt)
            return Result.fail(
                ErrorRecord(message=TIMED_OUT_MESSAGE, context={'timeout_ms': timeout_ms})
            )
        except Exception as exc:
            last_error = exc
            logger.debug(
                'attempt_failed', attempt=attempt, max_attempts=max_attempts, error=repr(exc)
            )
            if attempt < max_attempts and delay_ms > 0:
                await anyio.sleep(delay_ms / 1000)
        else:
            return Result.ok(value)

    logger.warning('attempts_exhausted', attempts=attempts, max_attempts=max_attempts)
    return Result.fail(
        ErrorRecord(
            message=_message_of(last_error, 'Operation failed after retries'),
            caused_by=ExceptionCause(last_error) if last_error is not None else None,
            context={
                'attempts': attempts,
                'max_attempts': max_attempts,
                'delay_ms': delay_ms,
                'timeout_ms': timeout_ms,
            },
        )
    )
