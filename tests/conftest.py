"""Shared pytest fixtures and configuration for the yt-dlp-api test suite.

Guidelines
----------
* No internet access in any test.
* yt-dlp must be mocked at the infra boundary (or replaced by the
  current Python interpreter in runner tests).
* Core tests must be pure — no side effects.
* Tests must not depend on OS state.
"""

from __future__ import annotations

import pytest

_SETTINGS_ENV: tuple[str, ...] = (
    "YT_DLP_API_TOKEN",
    "HOST",
    "PORT",
    "YT_DLP_BIN",
    "YT_DLP_API_CORS_ORIGINS",
    "YT_DLP_API_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide the host's service configuration from ``Settings.from_env``."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
