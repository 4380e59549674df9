"""Environment-backed configuration for state-sync consumers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    raw = _env(key)
    return int(raw) if raw else default


def _env_float(key: str, default: float) -> float:
    raw = _env(key)
    return float(raw) if raw else default


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("STATE_SYNC_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("STATE_SYNC_LOG_LEVEL", "INFO"))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class RetryConfig:
    """Backoff policy for snapshot fetches.

    The delay before retry ``n`` (0-based) is
    ``min(initial_delay_ms * backoff_multiplier ** n, max_delay_ms)``.
    """

    max_attempts: int = field(
        default_factory=lambda: _env_int("STATE_SYNC_RETRY_MAX_ATTEMPTS", 3)
    )
    initial_delay_ms: float = field(
        default_factory=lambda: _env_float("STATE_SYNC_RETRY_INITIAL_DELAY_MS", 500)
    )
    backoff_multiplier: float = field(
        default_factory=lambda: _env_float("STATE_SYNC_RETRY_BACKOFF_MULTIPLIER", 2)
    )
    max_delay_ms: float = field(
        default_factory=lambda: _env_float("STATE_SYNC_RETRY_MAX_DELAY_MS", 10_000)
    )

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(
                f"max_attempts must be at least 1, got {self.max_attempts}"
            )
        if self.initial_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("retry delays must not be negative")


@dataclass(frozen=True)
class Settings:
    app: AppConfig = field(default_factory=AppConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)


def load_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
