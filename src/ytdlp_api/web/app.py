"""aiohttp application factory and server entry point."""

from __future__ import annotations

import logging

from aiohttp import web

from ytdlp_api.config import Settings
from ytdlp_api.core.metadata_service import MetadataService
from ytdlp_api.infra.tool_detector import detect_ytdlp
from ytdlp_api.infra.ytdlp_runner import YtDlpRunner
from ytdlp_api.log import ACCESS_LOGGER, get_logger
from ytdlp_api.web.keys import SERVICE_KEY, SETTINGS_KEY
from ytdlp_api.web.middleware import auth_middleware, cors_middleware, error_middleware
from ytdlp_api.web.routes import SERVICE_NAME, register_routes

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    service: MetadataService | None = None,
) -> web.Application:
    """Build the application.

    Parameters
    ----------
    settings:
        Defaults to :meth:`Settings.from_env`.
    service:
        Injected metadata service; defaults to one backed by
        :class:`YtDlpRunner` using ``settings.ytdlp_binary``.
    """
    settings = settings or Settings.from_env()
    if service is None:
        service = MetadataService(YtDlpRunner(settings.ytdlp_binary))

    app = web.Application(middlewares=[cors_middleware, auth_middleware, error_middleware])
    app[SETTINGS_KEY] = settings
    app[SERVICE_KEY] = service

    routes = web.RouteTableDef()
    register_routes(routes)
    app.add_routes(routes)
    return app


def run_server(settings: Settings) -> None:
    """Serve until interrupted."""
    if settings.uses_default_token:
        logger.warning("YT_DLP_API_TOKEN is not set; using the development token")

    status = detect_ytdlp(settings.ytdlp_binary)
    if not status.found:
        logger.warning(
            "%s not found on PATH; extraction requests will fail (try: %s)",
            settings.ytdlp_binary,
            " or ".join(status.install_commands),
        )

    logger.info("%s running on port %d", SERVICE_NAME, settings.port)
    web.run_app(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        print=None,
        access_log=logging.getLogger(ACCESS_LOGGER),
    )
