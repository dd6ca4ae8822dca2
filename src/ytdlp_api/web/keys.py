"""Typed application keys shared by the app factory, middlewares and routes."""

from __future__ import annotations

from aiohttp import web

from ytdlp_api.config import Settings
from ytdlp_api.core.metadata_service import MetadataService

SETTINGS_KEY = web.AppKey("settings", Settings)
SERVICE_KEY = web.AppKey("metadata_service", MetadataService)
