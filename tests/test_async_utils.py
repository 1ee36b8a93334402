"""Tests for try_, combine, retry, timeout and try_async."""

from __future__ import annotations

import anyio
import pytest

from fluent_result import (
    AsyncResult,
    ExceptionCause,
    ResultMetadata,
    ResultOptions,
    combine,
    combine_async,
    retry,
    timeout,
    try_,
    try_async,
    try_result,
)
from tests.support import FlakyAction


class SlowAction:
    """Action that sleeps before returning, tracking whether it finished."""

    def __init__(self, seconds: float, value: str = 'slow') -> None:
        self.seconds = seconds
        self.value = value
        self.calls = 0
        self.finished = 0

    async def __call__(self) -> str:
        self.calls += 1
        await anyio.sleep(self.seconds)
        self.finished += 1
        return self.value


class TestTry:
    """Tests for try_."""

    async def test_success(self) -> None:
        result = await try_(FlakyAction(0, value=5))
        assert result.is_success
        assert result.value == 5

    async def test_success_with_options(self) -> None:
        options = ResultOptions(metadata=ResultMetadata(message='wrapped'))
        result = await try_result(FlakyAction(0), options)
        assert result.get_metadata().message == 'wrapped'  # type: ignore[union-attr]

    async def test_failure_records_cause_and_stack(self) -> None:
        exc = KeyError('missing')
        result = await try_(FlakyAction(1, error=exc))
        assert result.is_failure
        (error,) = result.errors
        assert error.message == str(exc)
        assert error.caused_by == ExceptionCause(exc)
        assert error.timestamp is not None
        assert 'KeyError' in error.context['stack']  # type: ignore[index]

    async def test_failure_without_message(self) -> None:
        result = await try_(FlakyAction(1, error=RuntimeError()))
        assert result.errors[0].message == 'Unknown error occurred'


class TestCombine:
    """Tests for combine."""

    async def test_all_success(self) -> None:
        combined = await combine([AsyncResult.ok(2), AsyncResult.ok(3)])
        assert combined.is_success
        assert await combined.value == [2, 3]

    async def test_collects_all_errors_in_order(self) -> None:
        combined = await combine_async([
            AsyncResult.ok(2),
            AsyncResult.fail('x'),
            AsyncResult.fail('y'),
        ])
        assert combined.is_failure
        assert [e.message for e in combined.errors] == ['x', 'y']

    async def test_applies_options_on_success(self) -> None:
        options = ResultOptions(metadata=ResultMetadata(message='combined'))
        combined = await combine([AsyncResult.ok(1)], options)
        assert combined.get_metadata().message == 'combined'  # type: ignore[union-attr]

    async def test_empty(self) -> None:
        combined = await combine([])
        assert await combined.value == []


class TestRetry:
    """Tests for retry."""

    async def test_success_first_try(self) -> None:
        action = FlakyAction(0, value='ok')
        result = await retry(action, 3, 0)
        assert result.value == 'ok'
        assert action.calls == 1

    async def test_success_after_failures(self) -> None:
        action = FlakyAction(2, value='ok')
        result = await retry(action, 3, 0)
        assert result.is_success
        assert action.calls == 3

    async def test_exhaustion(self) -> None:
        exc = ValueError('always')
        action = FlakyAction(100, error=exc)
        result = await retry(action, retries=2, delay_ms=0)
        assert result.is_failure
        assert action.calls == 3
        (error,) = result.errors
        assert error.message == 'Max retries reached'
        assert error.caused_by == ExceptionCause(exc)
        assert error.context == {'retries': 2, 'attempts': 3, 'final_attempt': True}

    async def test_waits_between_attempts(self) -> None:
        action = FlakyAction(1)
        start = anyio.current_time()
        await retry(action, retries=1, delay_ms=50)
        assert anyio.current_time() - start >= 0.04


class TestTimeout:
    """Tests for timeout."""

    async def test_completes_in_time(self) -> None:
        result = await timeout(SlowAction(0.01), 1000)
        assert result.value == 'slow'

    async def test_times_out(self) -> None:
        action = SlowAction(0.1)
        result = await timeout(action, 20)
        assert result.is_failure
        (error,) = result.errors
        assert error.message == 'Operation timed out after 20ms'
        assert error.context == {'timeout_ms': 20}
        assert error.caused_by is None
        await anyio.sleep(0.15)

    async def test_zero_timeout_lets_immediate_action_win(self) -> None:
        async def instant() -> str:
            return 'now'

        result = await timeout(instant, 0)
        assert result.is_success
        assert result.value == 'now'

    async def test_zero_timeout_fails_suspending_action(self) -> None:
        result = await timeout(SlowAction(0.01), 0)
        assert result.is_failure
        assert result.errors[0].message == 'Operation timed out after 0ms'
        await anyio.sleep(0.05)

    async def test_losing_action_keeps_running(self) -> None:
        action = SlowAction(0.05)
        result = await timeout(action, 10)
        assert result.is_failure
        assert action.finished == 0
        await anyio.sleep(0.15)
        assert action.finished == 1

    async def test_other_failure_keeps_cause(self) -> None:
        exc = PermissionError('denied')
        result = await timeout(FlakyAction(1, error=exc), 1000)
        (error,) = result.errors
        assert error.message == 'denied'
        assert error.caused_by == ExceptionCause(exc)
        assert error.context == {'timeout_ms': 1000}


class TestTryAsync:
    """Tests for try_async."""

    async def test_succeeds_on_third_attempt(self) -> None:
        action = FlakyAction(2, value='third')
        result = await try_async(action, max_attempts=3, delay_ms=0)
        assert result.is_success
        assert result.value == 'third'
        assert action.calls == 3

    async def test_exhaustion_context(self) -> None:
        exc = ValueError('always')
        action = FlakyAction(100, error=exc)
        result = await try_async(action, max_attempts=2, delay_ms=0)
        assert result.is_failure
        assert action.calls == 2
        (error,) = result.errors
        assert error.message == 'always'
        assert error.caused_by == ExceptionCause(exc)
        assert error.context == {
            'attempts': 2,
            'max_attempts': 2,
            'delay_ms': 0,
            'timeout_ms': None,
        }

    async def test_timeout_is_not_retried(self) -> None:
        action = SlowAction(0.1)
        result = await try_async(action, max_attempts=3, delay_ms=0, timeout_ms=20)
        assert result.is_failure
        assert action.calls == 1
        (error,) = result.errors
        assert error.message == 'Operation timed out'
        assert error.context == {'timeout_ms': 20}
        await anyio.sleep(0.15)
        assert action.calls == 1

    async def test_timeout_allows_fast_action(self) -> None:
        result = await try_async(SlowAction(0.01, 'fast'), max_attempts=1, timeout_ms=1000)
        assert result.value == 'fast'

    async def test_builtin_timeout_error_from_action_is_retried(self) -> None:
        action = FlakyAction(1, value='ok', error=TimeoutError('upstream'))
        result = await try_async(action, max_attempts=2, delay_ms=0, timeout_ms=1000)
        assert result.value == 'ok'
        assert action.calls == 2

    @pytest.mark.parametrize('max_attempts', [0, 1])
    async def test_at_least_one_attempt(self, max_attempts: int) -> None:
        action = FlakyAction(100)
        result = await try_async(action, max_attempts=max_attempts, delay_ms=0)
        assert action.calls == 1
        assert result.errors[0].context['attempts'] == 1  # type: ignore[index]

    async def test_no_delay_after_last_attempt(self) -> None:
        action = FlakyAction(100)
        start = anyio.current_time()
        await try_async(action, max_attempts=1, delay_ms=500)
        assert anyio.current_time() - start < 0.4
