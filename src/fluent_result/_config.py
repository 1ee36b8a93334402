"""Library configuration: default container options and logging level."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from fluent_result._logging import configure_logging
from fluent_result.types.metadata import ResultOptions

__all__ = [
    'ResultConfig',
    'get_config',
    'init',
    'reset_config',
]

_ENV_PREFIX = 'FLUENT_RESULT_'
_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_FALSY = frozenset({'0', 'false', 'no', 'off'})


@dataclass(frozen=True)
class ResultConfig:
    """Configuration for fluent-result.

    Attributes:
        default_value_when_failure: Default for containers built without
            explicit options.
        preserve_errors_order: Default for containers built without explicit
            options.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
    """

    default_value_when_failure: bool = False
    preserve_errors_order: bool = True
    log_level: str | None = None

    def default_options(self) -> ResultOptions:
        """Options applied to containers constructed without any."""
        return ResultOptions(
            default_value_when_failure=self.default_value_when_failure,
            preserve_errors_order=self.preserve_errors_order,
        )


# Global configuration (set by init() or detected from the environment)
_config: ResultConfig | None = None


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(f'{_ENV_PREFIX}{name}', '').strip().lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    logging.getLogger('fluent_result').warning(
        "Unknown %s%s value '%s', using %s", _ENV_PREFIX, name, raw, default
    )
    return default


def _detect_config() -> ResultConfig:
    """Build configuration from ``FLUENT_RESULT_*`` environment variables."""
    return ResultConfig(
        default_value_when_failure=_env_flag('DEFAULT_VALUE_WHEN_FAILURE', False),
        preserve_errors_order=_env_flag('PRESERVE_ERRORS_ORDER', True),
        log_level=os.environ.get(f'{_ENV_PREFIX}LOG_LEVEL') or None,
    )


def init(
    *,
    default_value_when_failure: bool | None = None,
    preserve_errors_order: bool | None = None,
    log_level: str | None = None,
) -> ResultConfig:
    """Set library-wide defaults.

    Unspecified values fall back to the environment. Containers already
    constructed keep the options they were built with.

    Args:
        default_value_when_failure: Default for new containers.
        preserve_errors_order: Default for new containers.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.

    Returns:
        The ResultConfig that was set.

    Example:
        ```python
        from fluent_result import init

        init(preserve_errors_order=False, log_level='DEBUG')
        ```
    """
    global _config  # noqa: PLW0603

    detected = _detect_config()
    _config = ResultConfig(
        default_value_when_failure=(
            detected.default_value_when_failure
            if default_value_when_failure is None
            else default_value_when_failure
        ),
        preserve_errors_order=(
            detected.preserve_errors_order if preserve_errors_order is None else preserve_errors_order
        ),
        log_level=log_level if log_level is not None else detected.log_level,
    )

    if _config.log_level is not None:
        configure_logging(_config.log_level)

    return _config


def get_config() -> ResultConfig:
    """Get the active configuration, detecting it from the environment on first use."""
    global _config  # noqa: PLW0603

    if _config is None:
        _config = _detect_config()
    return _config


def reset_config() -> None:
    """Forget the active configuration so the next read re-detects it."""
    global _config  # noqa: PLW0603

    _config = None
