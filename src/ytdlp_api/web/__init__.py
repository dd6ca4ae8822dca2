"""Web layer — aiohttp application, middlewares, and route handlers.

This package is the HTTP error boundary.  It may import from ``core``,
``infra``, ``config`` and ``log``; ``core`` and ``infra`` never import
from it.
"""

from ytdlp_api.web.app import create_app, run_server

__all__: list[str] = ["create_app", "run_server"]
