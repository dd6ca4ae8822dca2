"""
Runtime configuration for yt-dlp-api, read from environment variables.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from ytdlp_api.log import get_logger

logger = get_logger(__name__)

DEFAULT_TOKEN: str = "dev-token"
DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 3001


def _env_raw(environ: Mapping[str, str], *names: str, default: str | None = None) -> str | None:
    for name in names:
        val = environ.get(name)
        if val is not None and val.strip() != "":
            return val.strip()
    return default


def _env_int(
    environ: Mapping[str, str],
    default: int,
    *names: str,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    raw = _env_raw(environ, *names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0], raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, using default=%s", names[0], value, default)
        return default
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, using default=%s", names[0], value, default)
        return default
    return value


def _env_list(environ: Mapping[str, str], default: tuple[str, ...], *names: str) -> tuple[str, ...]:
    raw = _env_raw(environ, *names)
    if raw is None:
        return default
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or default


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide settings; build with :meth:`from_env`."""

    api_token: str = DEFAULT_TOKEN
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    ytdlp_binary: str = "yt-dlp"
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @property
    def uses_default_token(self) -> bool:
        return self.api_token == DEFAULT_TOKEN

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from *environ* (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(
            api_token=_env_raw(env, "YT_DLP_API_TOKEN", default=DEFAULT_TOKEN) or DEFAULT_TOKEN,
            host=_env_raw(env, "HOST", default=DEFAULT_HOST) or DEFAULT_HOST,
            port=_env_int(env, DEFAULT_PORT, "PORT", min_value=1, max_value=65535),
            ytdlp_binary=_env_raw(env, "YT_DLP_BIN", default="yt-dlp") or "yt-dlp",
            cors_origins=_env_list(env, ("*",), "YT_DLP_API_CORS_ORIGINS"),
            log_level=(_env_raw(env, "YT_DLP_API_LOG_LEVEL", default="INFO") or "INFO").upper(),
        )
