"""Configuration loading and validation from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_VALIDATION_CREATE_TIMEOUT = 45 * 60
_DEFAULT_SERVER_CERT_DELETE_TIMEOUT = 15 * 60
_DEFAULT_VALIDATION_OPTIONS_TIMEOUT = 60
_DEFAULT_POLL_MAX_INTERVAL = 10


@dataclass(frozen=True)
class Timeouts:
    """Deadlines, in seconds, handed to the polling engine."""

    validation_create: float = _DEFAULT_VALIDATION_CREATE_TIMEOUT
    server_certificate_delete: float = _DEFAULT_SERVER_CERT_DELETE_TIMEOUT
    validation_options: float = _DEFAULT_VALIDATION_OPTIONS_TIMEOUT


@dataclass(frozen=True)
class AppConfig:
    """Application configuration loaded from environment variables."""

    region: str
    profile: str | None = None
    validation_create_timeout: int = _DEFAULT_VALIDATION_CREATE_TIMEOUT
    server_certificate_delete_timeout: int = _DEFAULT_SERVER_CERT_DELETE_TIMEOUT
    validation_options_timeout: int = _DEFAULT_VALIDATION_OPTIONS_TIMEOUT
    poll_max_interval: int = _DEFAULT_POLL_MAX_INTERVAL

    def timeouts(self) -> Timeouts:
        return Timeouts(
            validation_create=self.validation_create_timeout,
            server_certificate_delete=self.server_certificate_delete_timeout,
            validation_options=self.validation_options_timeout,
        )


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ValueError(f"Required environment variable {name} is not set")
    return value


def _positive_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}")
    if value < 1:
        raise ValueError(f"{name} must be a positive integer, got: {value}")
    return value


def load_config() -> AppConfig:
    """Load and validate application configuration from environment variables."""
    region = _require_env("AWS_REGION")
    profile = os.environ.get("AWS_PROFILE") or None

    return AppConfig(
        region=region,
        profile=profile,
        validation_create_timeout=_positive_int_env(
            "CERT_VALIDATION_CREATE_TIMEOUT", _DEFAULT_VALIDATION_CREATE_TIMEOUT
        ),
        server_certificate_delete_timeout=_positive_int_env(
            "SERVER_CERT_DELETE_TIMEOUT", _DEFAULT_SERVER_CERT_DELETE_TIMEOUT
        ),
        validation_options_timeout=_positive_int_env(
            "VALIDATION_OPTIONS_TIMEOUT", _DEFAULT_VALIDATION_OPTIONS_TIMEOUT
        ),
        poll_max_interval=_positive_int_env("POLL_MAX_INTERVAL", _DEFAULT_POLL_MAX_INTERVAL),
    )
