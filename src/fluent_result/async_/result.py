"""AsyncResult: a Result whose value is a pending computation.

AsyncResult has the same status, error, success, metadata and option model as
``Result``, but its value slot holds a handle (an asyncio future/task or an
already-resolved wrapper). The status is decided when the container is built,
independently of how the pending value eventually resolves; only
``from_awaitable`` observes a rejection and turns it into a failure.

Fluent mutators change the receiver in place and return it, as on Result.
``map`` and ``bind`` always build a new container.

Example:
    ```python
    async def fetch_user(user_id: int) -> dict:
        ...

    async def main():
        user = AsyncResult.ok(fetch_user(1))
        names = await user.map(lambda u: u['name'])
        result = await names.to_result()
        if result.is_success:
            print(result.value)
    ```
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, Self

from fluent_result._base import ResultBase
from fluent_result.async_.handle import Handle, Resolved, as_handle
from fluent_result.result import Result
from fluent_result.types.metadata import ResultMetadata, ResultOptions
from fluent_result.types.records import ErrorRecord, coerce_error, utcnow

__all__ = ['AsyncResult']


async def _settle[U](outcome: U | Awaitable[U]) -> U:
    if inspect.isawaitable(outcome):
        return await outcome
    return outcome


def _is_absent(handle: Handle[Any]) -> bool:
    return isinstance(handle, Resolved) and handle.value is None


class AsyncResult[T](ResultBase[T]):
    """Async-aware Result container.

    The value slot is always a handle; plain values given to the
    constructor or factories are wrapped as already resolved. Coroutines are
    scheduled as tasks, so building an AsyncResult from one requires a
    running event loop.
    """

    __slots__ = ()

    def __init__(
        self,
        value: T | Awaitable[T] | None = None,
        *,
        metadata: ResultMetadata[Any] | None = None,
        options: ResultOptions | None = None,
    ) -> None:
        super().__init__(metadata=metadata, options=options)
        self._value: Handle[T] = as_handle(value)

    # --- Factories ---

    @classmethod
    def ok(
        cls,
        value: T | Awaitable[T] | None = None,
        *,
        metadata: ResultMetadata[Any] | None = None,
        options: ResultOptions | None = None,
    ) -> AsyncResult[T]:
        """Create a successful AsyncResult.

        Args:
            value: A plain value or an awaitable producing it.
            metadata: Metadata to attach.
            options: Policy for the container's lifetime.
        """
        return cls(value, metadata=metadata, options=options)

    @classmethod
    def fail(
        cls,
        error: str | ErrorRecord | Sequence[ErrorRecord],
        metadata: ResultMetadata[Any] | None = None,
        *,
        options: ResultOptions | None = None,
    ) -> AsyncResult[T]:
        """Create a failed AsyncResult from a message, a record, or a sequence of records."""
        result = cls(metadata=metadata, options=options)
        result._mark_failed()
        if isinstance(error, str | ErrorRecord):
            result._add_error(coerce_error(error))
        else:
            for item in error:
                result._add_error(coerce_error(item))
        return result

    @classmethod
    async def merge(cls, results: Iterable[AsyncResult[T]]) -> AsyncResult[list[T]]:
        """Fold several AsyncResults into one.

        Same accumulation rules as ``Result.merge``: containers built without
        a value are skipped, but pending values are kept even if they later
        resolve to None. On success the merged value is a future resolving
        once every collected handle has resolved; on failure it resolves to
        an empty list.
        """
        merged: AsyncResult[list[T]] = AsyncResult()
        handles: list[Handle[T]] = []
        has_errors = False

        for result in results:
            if result.is_success and not _is_absent(result._value):
                handles.append(result._value)
            if result.is_failure:
                has_errors = True
                for error in result._errors:
                    merged._add_error(error)
            for success in result._successes:
                merged._add_success(success)

        if has_errors:
            merged._mark_failed()
            merged._value = Resolved([])
        else:
            merged._value = asyncio.gather(*handles)
        return merged

    @classmethod
    def from_result(cls, result: Result[T]) -> AsyncResult[T]:
        """Lift a synchronous Result, copying status, records, options and metadata."""
        async_result = cls(result._value if result.is_success else None, options=result.options)
        result._copy_records_to(async_result)
        return result._propagate_metadata(async_result)

    @classmethod
    async def from_awaitable(cls, awaitable: Awaitable[Result[T] | T]) -> AsyncResult[T]:
        """Await a pending computation and wrap its outcome.

        A Result outcome is lifted with ``from_result``; any other value
        becomes a success. If the awaitable raises, the exception becomes a
        failure whose single error has the exception as its cause.
        """
        try:
            outcome = await awaitable
        except Exception as exc:
            return cls.fail(ErrorRecord.from_exception(exc, timestamp=utcnow()))
        if isinstance(outcome, Result):
            return cls.from_result(outcome)
        return cls.ok(outcome)

    # --- Value ---

    @property
    def value(self) -> Handle[T]:
        """The pending handle itself; await it to get the value.

        Raises:
            ResultAccessError: If the container failed and
                ``default_value_when_failure`` is off.
        """
        self._check_value_access()
        return self._value

    async def with_value(self, value: T | Awaitable[T]) -> Self:
        """Replace the pending value if the container is a success; no-op on failure."""
        if self.is_success:
            self._value = as_handle(value)
        return self

    # --- Transformations ---

    async def map[U](self, func: Callable[[T], U | Awaitable[U]]) -> AsyncResult[U]:
        """Apply ``func`` to the resolved value and wrap the outcome in a new container.

        ``func`` may be sync or async. A failed container short-circuits to a
        new failure with the same errors without calling ``func``. Metadata
        is carried over to the new container.

        Example:
            ```python
            doubled = await AsyncResult.ok(21).map(lambda x: x * 2)
            await doubled.value  # 42
            ```
        """
        if self.is_failure:
            return self._propagate_metadata(
                AsyncResult.fail(list(self._errors), options=self._options)
            )
        value = await self._value
        mapped = await _settle(func(value))
        return self._propagate_metadata(AsyncResult.ok(mapped, options=self._options))

    async def bind[U](
        self, func: Callable[[T], AsyncResult[U] | Awaitable[AsyncResult[U]]]
    ) -> AsyncResult[U]:
        """Chain with a function that returns an AsyncResult.

        Same short-circuit rules as ``map``. The container produced by
        ``func`` is returned as is, with this container's metadata merged
        onto it.
        """
        if self.is_failure:
            return self._propagate_metadata(
                AsyncResult.fail(list(self._errors), options=self._options)
            )
        value = await self._value
        bound = await _settle(func(value))
        return self._propagate_metadata(bound)

    async def tap(self, action: Callable[[T], object]) -> Self:
        """Run a side effect with the resolved value on success. Returns self."""
        if self.is_success:
            await _settle(action(await self._value))
        return self

    async def on_success(self, callback: Callable[[T], object]) -> Self:
        """Call ``callback`` with the resolved value if the container succeeded."""
        if self.is_success:
            await _settle(callback(await self._value))
        return self

    async def on_failure(self, callback: Callable[[list[ErrorRecord]], object]) -> Self:
        """Call ``callback`` with the errors if the container failed."""
        if self.is_failure:
            await _settle(callback(self.errors))
        return self

    # --- Conversion & diagnostics ---

    async def to_result(self) -> Result[T]:
        """Await the value and build the equivalent synchronous Result.

        Errors and successes are copied in insertion order with their
        timestamps, and the metadata is re-applied.
        """
        value = await self._value
        result: Result[T] = Result(value if self.is_success else None, options=self._options)
        self._copy_records_to(result)
        return self._propagate_metadata(result)

    async def log(self, sink: Any = None) -> Self:
        """Await the value, then emit the current state to ``sink``.

        Args:
            sink: A structlog-style logger. Defaults to the package logger.
        """
        value = await self._value
        self._emit_state(value, sink)
        return self

    def __repr__(self) -> str:
        return f'AsyncResult({self._repr_fields()}, value={self._value!r})'
