"""State and fluent mutators shared by Result and AsyncResult.

Both containers are owned, single-writer records: every ``with_*`` method
mutates the receiver and returns it. Transformations that produce a new
container (``map``, ``bind``) live on the concrete classes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

import msgspec

from fluent_result._config import get_config
from fluent_result._logging import get_logger
from fluent_result.errors import ResultAccessError
from fluent_result.types.metadata import ResultMetadata, ResultOptions
from fluent_result.types.records import (
    ErrorRecord,
    SuccessRecord,
    coerce_error,
    coerce_success,
)

__all__ = ['ResultBase']


class ResultBase[T]:
    """Status, error/success sequences, metadata, and options of a container.

    Subclasses own the ``_value`` slot and decide what it holds: a plain
    value for ``Result``, a pending handle for ``AsyncResult``.
    """

    __slots__ = ('_errors', '_is_success', '_metadata', '_options', '_successes', '_value')

    _value: Any

    def __init__(
        self,
        *,
        metadata: ResultMetadata[Any] | None = None,
        options: ResultOptions | None = None,
    ) -> None:
        resolved = options if options is not None else get_config().default_options()
        self._is_success = True
        self._errors: list[ErrorRecord] = []
        self._successes: list[SuccessRecord] = []
        self._metadata: ResultMetadata[Any] | None = None
        self._options = msgspec.structs.replace(resolved, metadata=None)
        if resolved.metadata is not None:
            self.with_metadata(resolved.metadata)
        if metadata is not None:
            self.with_metadata(metadata)

    # --- Status ---

    @property
    def is_success(self) -> bool:
        return self._is_success

    @property
    def is_failure(self) -> bool:
        return not self._is_success

    @property
    def options(self) -> ResultOptions:
        """Policy this container was constructed with."""
        return self._options

    # --- Accessors ---

    @property
    def errors(self) -> list[ErrorRecord]:
        """Errors in insertion order, or reversed if ``preserve_errors_order`` is False.

        Always a fresh list; the stored sequence is never reordered.
        """
        if self._options.preserve_errors_order:
            return list(self._errors)
        return self._errors[::-1]

    def get_errors(self) -> list[ErrorRecord]:
        """Same as the ``errors`` property."""
        return self.errors

    def get_successes(self) -> list[SuccessRecord]:
        """Copy of the success records in insertion order."""
        return list(self._successes)

    def get_metadata(self) -> ResultMetadata[Any] | None:
        """Copy of the attached metadata, or None."""
        if self._metadata is None:
            return None
        return msgspec.structs.replace(self._metadata)

    # --- Fluent mutators ---

    def with_error(self, error: str | ErrorRecord) -> Self:
        """Append an error and force the status to failure.

        Args:
            error: A message or a full error record.

        Returns:
            This container.
        """
        self._add_error(coerce_error(error))
        self._is_success = False
        return self

    def with_success(self, success: str | SuccessRecord) -> Self:
        """Append a success annotation stamped with now. Status is unchanged."""
        self._add_success(coerce_success(success))
        return self

    def with_context(self, context: Mapping[str, Any]) -> Self:
        """Merge ``context`` into the context of the most recently added error.

        Does nothing when there are no errors.
        """
        if self._errors:
            self._errors[-1] = self._errors[-1].with_context(context)
        return self

    def with_metadata(self, metadata: ResultMetadata[Any]) -> Self:
        """Shallow-merge ``metadata`` over the attached metadata."""
        if self._metadata is None:
            self._metadata = metadata.stamped()
        else:
            self._metadata = self._metadata.merged_with(metadata)
        return self

    def clear_errors(self) -> Self:
        """Drop all errors and reset the status to success.

        The value and success records are left untouched.
        """
        self._errors = []
        self._is_success = True
        return self

    # --- Internals ---

    def _add_error(self, error: ErrorRecord) -> None:
        self._errors.append(error.stamped())

    def _add_success(self, success: SuccessRecord) -> None:
        self._successes.append(success.stamped())

    def _mark_failed(self) -> None:
        self._is_success = False

    def _check_value_access(self) -> None:
        if self.is_failure and not self._options.default_value_when_failure:
            raise ResultAccessError

    def _propagate_metadata[R: ResultBase[Any]](self, target: R) -> R:
        if self._metadata is not None:
            target.with_metadata(self._metadata)
        return target

    def _copy_records_to(self, target: ResultBase[Any]) -> None:
        for error in self._errors:
            target._add_error(error)
        for success in self._successes:
            target._add_success(success)
        if self.is_failure:
            target._mark_failed()

    def _emit_state(self, value: Any, sink: Any) -> None:
        logger = sink if sink is not None else get_logger('result')
        logger.info(
            'result_state',
            container=type(self).__name__,
            status='success' if self.is_success else 'failure',
            value=value,
            errors=[error.to_builtins() for error in self._errors],
            successes=[success.to_builtins() for success in self._successes],
        )

    def _repr_fields(self) -> str:
        status = 'success' if self.is_success else 'failure'
        return f'status={status!r}, errors={len(self._errors)}, successes={len(self._successes)}'
