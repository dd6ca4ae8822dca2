"""Tests for environment-driven settings (config.py)."""

from __future__ import annotations

from ytdlp_api.config import DEFAULT_PORT, DEFAULT_TOKEN, Settings


class TestSettingsFromEnv:
    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings == Settings()
        assert settings.api_token == DEFAULT_TOKEN
        assert settings.port == DEFAULT_PORT
        assert settings.host == "0.0.0.0"
        assert settings.cors_origins == ("*",)
        assert settings.uses_default_token is True

    def test_overrides(self) -> None:
        settings = Settings.from_env(
            {
                "YT_DLP_API_TOKEN": "s3cret",
                "HOST": "127.0.0.1",
                "PORT": "8080",
                "YT_DLP_BIN": "/usr/bin/yt-dlp",
                "YT_DLP_API_CORS_ORIGINS": "https://a.example, https://b.example",
                "YT_DLP_API_LOG_LEVEL": "debug",
            }
        )
        assert settings.api_token == "s3cret"
        assert settings.uses_default_token is False
        assert settings.host == "127.0.0.1"
        assert settings.port == 8080
        assert settings.ytdlp_binary == "/usr/bin/yt-dlp"
        assert settings.cors_origins == ("https://a.example", "https://b.example")
        assert settings.log_level == "DEBUG"

    def test_blank_values_use_defaults(self) -> None:
        settings = Settings.from_env({"YT_DLP_API_TOKEN": "  ", "PORT": ""})
        assert settings.api_token == DEFAULT_TOKEN
        assert settings.port == DEFAULT_PORT

    def test_invalid_port_uses_default(self) -> None:
        assert Settings.from_env({"PORT": "http"}).port == DEFAULT_PORT

    def test_out_of_range_port_uses_default(self) -> None:
        assert Settings.from_env({"PORT": "70000"}).port == DEFAULT_PORT
        assert Settings.from_env({"PORT": "0"}).port == DEFAULT_PORT

    def test_empty_origin_list_uses_default(self) -> None:
        assert Settings.from_env({"YT_DLP_API_CORS_ORIGINS": " , "}).cors_origins == ("*",)
