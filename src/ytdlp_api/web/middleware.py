"""
aiohttp middlewares: CORS, bearer-token auth, and the HTTP error boundary.

Registration order matters (first is outermost):
``cors_middleware`` → ``auth_middleware`` → ``error_middleware``.
CORS headers are therefore present on 401 responses too, and preflight
requests are answered before authentication runs.
"""
from __future__ import annotations

import hmac
from collections.abc import Awaitable, Callable, MutableMapping

from aiohttp import web

from ytdlp_api.exceptions import InvalidRequestError
from ytdlp_api.log import get_logger
from ytdlp_api.web.keys import SETTINGS_KEY

logger = get_logger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

API_PREFIX = "/api/"

_ALLOW_METHODS = "GET,HEAD,PUT,POST,DELETE,PATCH"


def _allowed_origin(request: web.Request) -> str | None:
    origins = request.app[SETTINGS_KEY].cors_origins
    if "*" in origins:
        return "*"
    origin = request.headers.get("Origin")
    if origin and origin in origins:
        return origin
    return None


def _apply_cors_headers(request: web.Request, headers: MutableMapping[str, str]) -> None:
    allowed = _allowed_origin(request)
    if allowed is None:
        return
    headers["Access-Control-Allow-Origin"] = allowed
    if allowed != "*":
        headers["Vary"] = "Origin"


def _is_preflight(request: web.Request) -> bool:
    return request.method == "OPTIONS" and "Access-Control-Request-Method" in request.headers


@web.middleware
async def cors_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Answer preflight requests and tag every response with CORS headers."""
    if _is_preflight(request):
        response = web.Response(status=204)
        _apply_cors_headers(request, response.headers)
        response.headers["Access-Control-Allow-Methods"] = _ALLOW_METHODS
        requested = request.headers.get("Access-Control-Request-Headers")
        if requested:
            response.headers["Access-Control-Allow-Headers"] = requested
        return response

    try:
        response = await handler(request)
    except web.HTTPException as exc:
        _apply_cors_headers(request, exc.headers)
        raise
    _apply_cors_headers(request, response.headers)
    return response


def _bearer_token(request: web.Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


@web.middleware
async def auth_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Require ``Authorization: Bearer <token>`` on ``/api/*`` routes."""
    if not request.path.startswith(API_PREFIX):
        return await handler(request)

    expected = request.app[SETTINGS_KEY].api_token
    supplied = _bearer_token(request)
    if supplied is None or not hmac.compare_digest(supplied.encode(), expected.encode()):
        logger.info("Rejected unauthenticated request to %s", request.path)
        return web.json_response(
            {"error": "Unauthorized"},
            status=401,
            headers={"WWW-Authenticate": 'Bearer realm="yt-dlp-api"'},
        )
    return await handler(request)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Map escaped exceptions to JSON responses.

    ``InvalidRequestError`` becomes 400.  aiohttp's own HTTP exceptions
    pass through.  Anything else is logged and reported as 500.
    """
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except InvalidRequestError as exc:
        body = {"error": str(exc)}
        if exc.hint:
            body["hint"] = exc.hint
        return web.json_response(body, status=400)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return web.json_response({"error": "Internal server error"}, status=500)
