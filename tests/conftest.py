"""Pytest configuration and shared fixtures for fluent-result tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from fluent_result import reset_config
from fluent_result._logging import clear_log_hooks
from tests.support import RecordingSink

if TYPE_CHECKING:
    from collections.abc import Generator

_ENV_VARS = (
    'FLUENT_RESULT_DEFAULT_VALUE_WHEN_FAILURE',
    'FLUENT_RESULT_PRESERVE_ERRORS_ORDER',
    'FLUENT_RESULT_LOG_LEVEL',
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Every test starts from environment-free default configuration."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
    clear_log_hooks()


@pytest.fixture
def sink() -> RecordingSink:
    """A recording diagnostic sink."""
    return RecordingSink()
