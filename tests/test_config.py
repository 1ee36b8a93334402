"""Tests for library configuration and initialization."""

from __future__ import annotations

import pytest

from fluent_result import AsyncResult, Result, ResultConfig, ResultOptions, get_config, init
from fluent_result._config import _detect_config


class TestResultConfig:
    """Tests for the ResultConfig dataclass."""

    def test_default_values(self) -> None:
        config = ResultConfig()
        assert config.default_value_when_failure is False
        assert config.preserve_errors_order is True
        assert config.log_level is None

    def test_config_is_frozen(self) -> None:
        config = ResultConfig()
        with pytest.raises(AttributeError):
            config.log_level = 'DEBUG'  # type: ignore[misc]

    def test_default_options(self) -> None:
        options = ResultConfig(preserve_errors_order=False).default_options()
        assert options == ResultOptions(preserve_errors_order=False)


class TestDetection:
    """Tests for environment-based configuration."""

    def test_defaults_without_env(self) -> None:
        assert _detect_config() == ResultConfig()

    @pytest.mark.parametrize('raw', ['1', 'true', 'YES', 'on'])
    def test_truthy_values(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv('FLUENT_RESULT_DEFAULT_VALUE_WHEN_FAILURE', raw)
        assert _detect_config().default_value_when_failure is True

    @pytest.mark.parametrize('raw', ['0', 'false', 'No', 'off'])
    def test_falsy_values(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv('FLUENT_RESULT_PRESERVE_ERRORS_ORDER', raw)
        assert _detect_config().preserve_errors_order is False

    def test_unknown_value_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('FLUENT_RESULT_PRESERVE_ERRORS_ORDER', 'maybe')
        assert _detect_config().preserve_errors_order is True

    def test_log_level_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('FLUENT_RESULT_LOG_LEVEL', 'DEBUG')
        assert _detect_config().log_level == 'DEBUG'

    def test_get_config_detects_lazily(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('FLUENT_RESULT_PRESERVE_ERRORS_ORDER', 'false')
        assert get_config().preserve_errors_order is False


class TestInit:
    """Tests for init()."""

    def test_init_returns_config(self) -> None:
        config = init(preserve_errors_order=False)
        assert config is get_config()
        assert config.preserve_errors_order is False
        assert config.default_value_when_failure is False

    def test_explicit_values_override_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('FLUENT_RESULT_DEFAULT_VALUE_WHEN_FAILURE', 'true')
        assert init(default_value_when_failure=False).default_value_when_failure is False
        assert init().default_value_when_failure is True

    def test_new_containers_use_configured_defaults(self) -> None:
        init(preserve_errors_order=False, default_value_when_failure=True)
        result = Result.ok(1).with_error('a').with_error('b')
        assert [e.message for e in result.errors] == ['b', 'a']
        assert result.value == 1
        assert AsyncResult.ok(1).options.preserve_errors_order is False

    def test_explicit_options_win_over_config(self) -> None:
        init(preserve_errors_order=False)
        result = Result.fail('a', options=ResultOptions()).with_error('b')
        assert [e.message for e in result.errors] == ['a', 'b']

    def test_existing_containers_keep_their_options(self) -> None:
        result = Result.ok(1)
        init(preserve_errors_order=False)
        result.with_error('a').with_error('b')
        assert [e.message for e in result.errors] == ['a', 'b']
