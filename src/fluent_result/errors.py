"""Exception types: misuse errors and the exception side of error records."""

from __future__ import annotations

from fluent_result.types.records import ErrorRecord

__all__ = [
    'OperationTimeoutError',
    'ResultAccessError',
    'ResultFailureError',
]


class ResultAccessError(RuntimeError):
    """Value was read from a failed container without a default-value policy."""

    def __init__(self, message: str = 'Cannot get value from failed result') -> None:
        super().__init__(message)


class ResultFailureError(Exception):
    """A failed container converted into raise-based code.

    Carries the first error record of the container.
    """

    def __init__(self, error: ErrorRecord) -> None:
        self.error = error
        super().__init__(error.message)

    def to_struct(self) -> ErrorRecord:
        """Convert to struct for Result-based code."""
        return self.error


class OperationTimeoutError(TimeoutError):
    """A timeout race was lost by the wrapped operation."""

    def __init__(self, timeout_ms: float, message: str | None = None) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(message or f'Operation timed out after {timeout_ms}ms')
