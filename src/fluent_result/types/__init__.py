"""Core types: error/success records, metadata, and options."""

from fluent_result.types.metadata import ResultMetadata, ResultOptions
from fluent_result.types.records import (
    Cause,
    ErrorRecord,
    ExceptionCause,
    SuccessRecord,
    coerce_error,
    coerce_success,
)

__all__ = [
    'Cause',
    'ErrorRecord',
    'ExceptionCause',
    'ResultMetadata',
    'ResultOptions',
    'SuccessRecord',
    'coerce_error',
    'coerce_success',
]
