"""Tests for configuration module."""

import dataclasses

import pytest

from state_sync.config import AppConfig, RetryConfig, Settings, _env, _env_int, load_settings


def test_env_returns_value(monkeypatch):
    monkeypatch.setenv("TEST_KEY", "hello")
    assert _env("TEST_KEY") == "hello"


def test_env_returns_default_when_missing(monkeypatch):
    monkeypatch.delenv("TEST_KEY", raising=False)
    assert _env("TEST_KEY", "fallback") == "fallback"


def test_env_returns_empty_string_default(monkeypatch):
    monkeypatch.delenv("TEST_KEY", raising=False)
    assert _env("TEST_KEY") == ""


def test_env_int_parses_value(monkeypatch):
    monkeypatch.setenv("TEST_KEY", "7")
    assert _env_int("TEST_KEY", 3) == 7


def test_env_int_uses_default_when_blank(monkeypatch):
    monkeypatch.setenv("TEST_KEY", "")
    assert _env_int("TEST_KEY", 3) == 3


def test_app_config_is_development_true():
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "env", "development")
    assert config.is_development is True


def test_app_config_is_development_false():
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "env", "production")
    assert config.is_development is False


def test_app_config_defaults(monkeypatch):
    monkeypatch.delenv("STATE_SYNC_ENV", raising=False)
    monkeypatch.delenv("STATE_SYNC_LOG_LEVEL", raising=False)
    config = AppConfig()
    assert config.env == "development"
    assert config.log_level == "INFO"


def test_retry_config_defaults(monkeypatch):
    for key in [
        "STATE_SYNC_RETRY_MAX_ATTEMPTS",
        "STATE_SYNC_RETRY_INITIAL_DELAY_MS",
        "STATE_SYNC_RETRY_BACKOFF_MULTIPLIER",
        "STATE_SYNC_RETRY_MAX_DELAY_MS",
    ]:
        monkeypatch.delenv(key, raising=False)
    config = RetryConfig()
    assert config.max_attempts == 3
    assert config.initial_delay_ms == 500
    assert config.backoff_multiplier == 2
    assert config.max_delay_ms == 10_000


def test_retry_config_from_env(monkeypatch):
    monkeypatch.setenv("STATE_SYNC_RETRY_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("STATE_SYNC_RETRY_INITIAL_DELAY_MS", "250")
    config = RetryConfig()
    assert config.max_attempts == 5
    assert config.initial_delay_ms == 250


def test_retry_config_rejects_zero_attempts():
    with pytest.raises(ValueError, match="max_attempts"):
        RetryConfig(max_attempts=0)


def test_retry_config_rejects_negative_delay():
    with pytest.raises(ValueError, match="negative"):
        RetryConfig(initial_delay_ms=-1)


def test_retry_config_is_frozen():
    config = RetryConfig(max_attempts=2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.max_attempts = 4


def test_load_settings_creates_all_sub_configs(monkeypatch):
    monkeypatch.setenv("STATE_SYNC_LOG_LEVEL", "DEBUG")
    settings = load_settings()
    assert isinstance(settings, Settings)
    assert isinstance(settings.app, AppConfig)
    assert isinstance(settings.retry, RetryConfig)
    assert settings.app.log_level == "DEBUG"
