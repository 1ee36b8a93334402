"""Result: a synchronous success/failure container with structured errors.

A Result holds a status, an optional value, ordered error and success
records, optional metadata, and fixed options. Expected failures travel as
error records instead of exceptions; the only exception raised by the
container itself is ``ResultAccessError``, when a failed container's value is
read without opting into a default value.

Fluent mutators (``with_error``, ``with_value``, ...) change the receiver in
place and return it. ``map`` and ``bind`` build new containers.

Example:
    ```python
    from fluent_result import Result, ErrorRecord

    def parse_port(raw: str) -> Result[int]:
        if not raw.isdigit():
            return Result.fail(ErrorRecord(message='not a number', reason_code='E_PORT'))
        return Result.ok(int(raw)).with_success('parsed port')

    result = parse_port('8080')
    if result.is_success:
        print(result.value)  # 8080
    else:
        print([error.message for error in result.errors])
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any, Self

from fluent_result._base import ResultBase
from fluent_result.errors import ResultAccessError
from fluent_result.types.metadata import ResultMetadata, ResultOptions
from fluent_result.types.records import ErrorRecord, coerce_error

__all__ = ['Result']


class Result[T](ResultBase[T]):
    """Synchronous Result container.

    Prefer the ``ok``, ``fail`` and ``merge`` factories over calling the
    constructor directly; a freshly constructed Result is a success.

    Attributes:
        is_success: True while no error has been added (or after ``clear_errors``).
        is_failure: Negation of ``is_success``.
    """

    __slots__ = ()

    def __init__(
        self,
        value: T | None = None,
        *,
        metadata: ResultMetadata[Any] | None = None,
        options: ResultOptions | None = None,
    ) -> None:
        super().__init__(metadata=metadata, options=options)
        self._value = value

    # --- Factories ---

    @classmethod
    def ok(
        cls,
        value: T | None = None,
        *,
        metadata: ResultMetadata[Any] | None = None,
        options: ResultOptions | None = None,
    ) -> Result[T]:
        """Create a successful Result.

        Args:
            value: The success value. None means no value.
            metadata: Metadata to attach. Merged over ``options.metadata``
                when both are given.
            options: Policy for the container's lifetime. Defaults to the
                library configuration.

        Returns:
            A success container.

        Example:
            ```python
            Result.ok(42, metadata=ResultMetadata(message='answer')).value  # 42
            ```
        """
        return cls(value, metadata=metadata, options=options)

    @classmethod
    def fail(
        cls,
        error: str | ErrorRecord | Sequence[ErrorRecord],
        metadata: ResultMetadata[Any] | None = None,
        *,
        options: ResultOptions | None = None,
    ) -> Result[T]:
        """Create a failed Result.

        Args:
            error: A message, a single error record, or a sequence of
                records appended in order.
            metadata: Metadata to attach.
            options: Policy for the container's lifetime.

        Returns:
            A failure container.
        """
        result = cls(metadata=metadata, options=options)
        result._mark_failed()
        if isinstance(error, str | ErrorRecord):
            result._add_error(coerce_error(error))
        else:
            for item in error:
                result._add_error(coerce_error(item))
        return result

    @classmethod
    def merge(cls, results: Iterable[Result[T]]) -> Result[list[T]]:
        """Fold several Results into one.

        Values of successful inputs are collected in order, skipping None.
        Errors of every failing input and successes of every input are
        accumulated in order. If any input failed, the merged Result is a
        failure and holds no values, even those of the inputs that succeeded.

        Args:
            results: Results to merge.

        Returns:
            A Result of the ordered values, or a failure with all errors.

        Example:
            ```python
            Result.merge([Result.ok(1), Result.ok(2)]).value  # [1, 2]
            Result.merge([Result.ok(1), Result.fail('a'), Result.fail('b')]).errors  # 2 errors
            ```
        """
        merged: Result[list[T]] = Result()
        values: list[T] = []
        has_errors = False

        for result in results:
            if result.is_success and result._value is not None:
                values.append(result._value)
            if result.is_failure:
                has_errors = True
                for error in result._errors:
                    merged._add_error(error)
            for success in result._successes:
                merged._add_success(success)

        if has_errors:
            merged._mark_failed()
        else:
            merged._value = values
        return merged

    # --- Value ---

    @property
    def value(self) -> T:
        """The contained value.

        Raises:
            ResultAccessError: If the Result failed and
                ``default_value_when_failure`` is off.
        """
        self._check_value_access()
        return self._value  # type: ignore[return-value]

    def with_value(self, value: T) -> Self:
        """Replace the value if the Result is a success; no-op on failure."""
        if self.is_success:
            self._value = value
        return self

    # --- Transformations ---

    def map[U](self, func: Callable[[T], U]) -> Result[U]:
        """Apply ``func`` to the value and wrap the outcome in a new Result.

        On failure, returns a new failure with the same errors without
        calling ``func``. Metadata is carried over in both cases.
        """
        if self.is_failure:
            return self._propagate_metadata(
                Result.fail(list(self._errors), options=self._options)
            )
        return self._propagate_metadata(Result.ok(func(self._value), options=self._options))

    def bind[U](self, func: Callable[[T], Result[U]]) -> Result[U]:
        """Chain with a function that itself returns a Result.

        On failure, returns a new failure with the same errors without
        calling ``func``. On success, returns the Result produced by ``func``
        with this Result's metadata merged onto it.
        """
        if self.is_failure:
            return self._propagate_metadata(
                Result.fail(list(self._errors), options=self._options)
            )
        return self._propagate_metadata(func(self._value))

    def tap(self, action: Callable[[T], object]) -> Self:
        """Call ``action`` with the value on success. Returns self."""
        if self.is_success:
            action(self._value)
        return self

    # --- Conversion & diagnostics ---

    async def to_awaitable(self) -> T:
        """Resolve to the value, or raise the first error as an exception.

        Raises:
            ResultFailureError: If the Result failed and
                ``default_value_when_failure`` is off.
        """
        if self.is_failure and not self._options.default_value_when_failure:
            if not self._errors:
                raise ResultAccessError
            raise self._errors[0].to_exception()
        return self._value  # type: ignore[return-value]

    def log(self, sink: Any = None) -> Self:
        """Emit the current status, value, errors and successes to ``sink``.

        Args:
            sink: A structlog-style logger. Defaults to the package logger.
        """
        self._emit_state(self._value, sink)
        return self

    def __repr__(self) -> str:
        return f'Result({self._repr_fields()}, value={self._value!r})'
