"""
HTTP route handlers.

Each ``/api/*`` handler validates the JSON body, delegates to
:class:`~ytdlp_api.core.metadata_service.MetadataService`, and renders
either the shaped payload or ``{"error", "details"}`` with status 500.
Request validation failures propagate to ``error_middleware`` (400).
"""
from __future__ import annotations

from typing import Any

from aiohttp import web

from ytdlp_api.exceptions import InvalidRequestError, YtdlpApiError
from ytdlp_api.log import get_logger
from ytdlp_api.version import __version__
from ytdlp_api.web.keys import SERVICE_KEY
from ytdlp_api.web.serializers import (
    serialize_channel,
    serialize_channel_videos,
    serialize_video,
)

logger = get_logger(__name__)

SERVICE_NAME = "yt-dlp-api"


async def _read_json(request: web.Request) -> dict[str, Any]:
    """Return the request body as a dict or raise ``InvalidRequestError``."""
    try:
        body = await request.json()
    except ValueError as exc:
        raise InvalidRequestError("Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise InvalidRequestError("Invalid JSON body")
    return body


def _require_url(body: dict[str, Any]) -> str:
    url = body.get("url")
    if not url:
        raise InvalidRequestError("Missing url parameter")
    if not isinstance(url, str):
        raise InvalidRequestError("url must be a string")
    return url


def _extraction_failed(operation: str, error: str, exc: YtdlpApiError) -> web.Response:
    details = str(exc)
    logger.error("[yt-dlp] %s failed: %s", operation, details)
    return web.json_response({"error": error, "details": details}, status=500)


def register_routes(routes: web.RouteTableDef) -> None:
    """Attach the health and extraction handlers to *routes*."""

    @routes.get("/")
    async def health(request: web.Request) -> web.Response:
        return web.json_response(
            {"status": "ok", "service": SERVICE_NAME, "version": __version__}
        )

    @routes.post("/api/video")
    async def video(request: web.Request) -> web.Response:
        body = await _read_json(request)
        url = _require_url(body)
        try:
            details = await request.app[SERVICE_KEY].get_video(url)
        except InvalidRequestError:
            raise
        except YtdlpApiError as exc:
            return _extraction_failed("Video extraction", "Failed to extract video metadata", exc)
        return web.json_response(serialize_video(details))

    @routes.post("/api/channel")
    async def channel(request: web.Request) -> web.Response:
        body = await _read_json(request)
        url = _require_url(body)
        try:
            details = await request.app[SERVICE_KEY].get_channel(url)
        except InvalidRequestError:
            raise
        except YtdlpApiError as exc:
            return _extraction_failed("Channel extraction", "Failed to extract channel metadata", exc)
        return web.json_response(serialize_channel(details))

    @routes.post("/api/channel/videos")
    async def channel_videos(request: web.Request) -> web.Response:
        body = await _read_json(request)
        url = _require_url(body)
        since_date = body.get("sinceDate")
        max_videos = body.get("maxVideos")

        kwargs: dict[str, Any] = {"since_date": since_date}
        if max_videos is not None:
            kwargs["max_videos"] = max_videos

        try:
            listing = await request.app[SERVICE_KEY].list_channel_videos(url, **kwargs)
        except InvalidRequestError:
            raise
        except YtdlpApiError as exc:
            return _extraction_failed(
                "Channel videos extraction", "Failed to extract channel videos", exc
            )
        return web.json_response(serialize_channel_videos(listing))
