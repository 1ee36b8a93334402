"""fluent-result: fluent Result and AsyncResult containers for Python 3.12+.

Flat imports (preferred):
    from fluent_result import Result, AsyncResult, ErrorRecord, ResultMetadata
    from fluent_result import ok, fail, merge, try_async, combine_async

Submodule imports (for organization):
    from fluent_result.result import Result
    from fluent_result.async_ import AsyncResult, retry, timeout
    from fluent_result.types import ErrorRecord, SuccessRecord
"""

# Configuration & logging
from fluent_result._config import ResultConfig, get_config, init, reset_config
from fluent_result._logging import configure_logging, get_logger

# Async
from fluent_result.async_ import AsyncResult, Resolved, combine, retry, timeout, try_, try_async

# Errors
from fluent_result.errors import OperationTimeoutError, ResultAccessError, ResultFailureError

# Sync
from fluent_result.result import Result

# Types
from fluent_result.types import (
    Cause,
    ErrorRecord,
    ExceptionCause,
    ResultMetadata,
    ResultOptions,
    SuccessRecord,
)

# Synchronous Result helpers
ok = Result.ok
fail = Result.fail
merge = Result.merge

# Asynchronous Result helpers
ok_async = AsyncResult.ok
fail_async = AsyncResult.fail
merge_async = AsyncResult.merge
from_result = AsyncResult.from_result
from_awaitable = AsyncResult.from_awaitable

# Utility helpers
try_result = try_
combine_async = combine

__all__ = [
    'AsyncResult',
    'Cause',
    'ErrorRecord',
    'ExceptionCause',
    'OperationTimeoutError',
    'Resolved',
    'Result',
    'ResultAccessError',
    'ResultConfig',
    'ResultFailureError',
    'ResultMetadata',
    'ResultOptions',
    'SuccessRecord',
    'combine',
    'combine_async',
    'configure_logging',
    'fail',
    'fail_async',
    'from_awaitable',
    'from_result',
    'get_config',
    'get_logger',
    'init',
    'merge',
    'merge_async',
    'ok',
    'ok_async',
    'reset_config',
    'retry',
    'timeout',
    'try_',
    'try_async',
    'try_result',
]
