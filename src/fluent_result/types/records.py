"""Error and success records attached to Result containers.

Records are frozen msgspec structs. A container stamps ``timestamp`` when a
record without one is added, and context updates replace the record with a
merged copy instead of mutating it.

The causal chain of an error is a tagged variant: either an ``ExceptionCause``
wrapping a native exception (a leaf) or another ``ErrorRecord``.

Example:
    ```python
    try:
        connect()
    except OSError as exc:
        record = ErrorRecord.from_exception(exc, reason_code='E_CONNECT')

    match record.caused_by:
        case ExceptionCause(exception=exc):
            ...
        case ErrorRecord(message=message):
            ...
    ```
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import msgspec

if TYPE_CHECKING:
    from fluent_result.errors import ResultFailureError

__all__ = [
    'Cause',
    'ErrorRecord',
    'ExceptionCause',
    'SuccessRecord',
    'coerce_error',
    'coerce_success',
    'utcnow',
]


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def _encode_unknown(obj: Any) -> Any:
    if isinstance(obj, BaseException):
        return f'{type(obj).__name__}: {obj}'
    return repr(obj)


class ExceptionCause(msgspec.Struct, frozen=True, tag='exception'):
    """Leaf of a causal chain: the native exception behind a failure."""

    exception: BaseException

    @property
    def message(self) -> str:
        return str(self.exception)


class ErrorRecord(msgspec.Struct, frozen=True, kw_only=True, tag='error'):
    """One modeled failure.

    Attributes:
        message: Human readable description of what went wrong.
        metadata: Optional free-form metadata.
        caused_by: What caused this error, either a wrapped exception or
            another error record.
        reason_code: Optional machine readable code.
        context: Optional string-keyed diagnostic context.
        timestamp: When the error occurred. Filled in when added to a
            container if left unset.
    """

    message: str
    metadata: dict[str, Any] | None = None
    caused_by: ExceptionCause | ErrorRecord | None = None
    reason_code: str | None = None
    context: dict[str, Any] | None = None
    timestamp: datetime | None = None

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        *,
        message: str | None = None,
        reason_code: str | None = None,
        context: Mapping[str, Any] | None = None,
        metadata: Mapping[str, Any] | None = None,
        timestamp: datetime | None = None,
    ) -> ErrorRecord:
        """Build a record whose cause is ``exc``.

        The message defaults to ``str(exc)``.
        """
        return cls(
            message=message if message is not None else str(exc),
            caused_by=ExceptionCause(exc),
            reason_code=reason_code,
            context=dict(context) if context is not None else None,
            metadata=dict(metadata) if metadata is not None else None,
            timestamp=timestamp,
        )

    def stamped(self) -> ErrorRecord:
        """Return self if it has a timestamp, else a copy stamped with now."""
        if self.timestamp is not None:
            return self
        return msgspec.structs.replace(self, timestamp=utcnow())

    def with_context(self, context: Mapping[str, Any]) -> ErrorRecord:
        """Return a copy whose context is shallow-merged with ``context``."""
        return msgspec.structs.replace(self, context={**(self.context or {}), **context})

    def iter_causes(self) -> Iterator[Cause]:
        """Walk the causal chain from the nearest cause to the root."""
        cause = self.caused_by
        while cause is not None:
            yield cause
            cause = cause.caused_by if isinstance(cause, ErrorRecord) else None

    @property
    def root_cause(self) -> Cause | None:
        """The innermost cause of this error, or None."""
        causes = list(self.iter_causes())
        return causes[-1] if causes else None

    def to_builtins(self) -> dict[str, Any]:
        """Convert to JSON-compatible builtins; exceptions become strings."""
        return msgspec.to_builtins(self, enc_hook=_encode_unknown)

    def to_exception(self) -> ResultFailureError:
        """Convert to exception for raise-based code."""
        from fluent_result.errors import ResultFailureError

        return ResultFailureError(self)


type Cause = ExceptionCause | ErrorRecord


class SuccessRecord(msgspec.Struct, frozen=True, kw_only=True, tag='success'):
    """Informational annotation of a successful step. Never changes status."""

    message: str | None = None
    metadata: dict[str, Any] | None = None
    context: dict[str, Any] | None = None
    timestamp: datetime | None = None

    def stamped(self) -> SuccessRecord:
        """Return self if it has a timestamp, else a copy stamped with now."""
        if self.timestamp is not None:
            return self
        return msgspec.structs.replace(self, timestamp=utcnow())

    def to_builtins(self) -> dict[str, Any]:
        """Convert to JSON-compatible builtins."""
        return msgspec.to_builtins(self, enc_hook=_encode_unknown)


def coerce_error(error: str | ErrorRecord) -> ErrorRecord:
    """Wrap a bare message into an ErrorRecord."""
    if isinstance(error, str):
        return ErrorRecord(message=error)
    return error


def coerce_success(success: str | SuccessRecord) -> SuccessRecord:
    """Wrap a bare message into a SuccessRecord stamped with now.

    Record inputs get their timestamp overwritten with now as well.
    """
    if isinstance(success, str):
        return SuccessRecord(message=success, timestamp=utcnow())
    return msgspec.structs.replace(success, timestamp=utcnow())
