"""HTTP-level tests for the aiohttp application (web/).

The application runs in-process on an ephemeral port; the metadata
service is real but its :class:`ToolRunner` is an ``AsyncMock``, so no
subprocess is started.

Coverage:
* health route without authentication
* bearer-token auth on ``/api/*`` (401 with CORS headers)
* CORS preflight
* body validation → 400
* extraction failures → 500 ``{"error", "details"}``
* camelCase response shapes
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from aiohttp import test_utils

from ytdlp_api.config import Settings
from ytdlp_api.core.metadata_service import MetadataService
from ytdlp_api.exceptions import MetadataExtractionError
from ytdlp_api.infra.tool_detector import ToolStatus
from ytdlp_api.log import ACCESS_LOGGER
from ytdlp_api.version import __version__
from ytdlp_api.web.app import create_app, run_server

TOKEN = "secret"
AUTH = {"Authorization": f"Bearer {TOKEN}"}
VIDEO_URL = "https://www.youtube.com/watch?v=abc123"
CHANNEL_URL = "https://www.youtube.com/@example"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner() -> AsyncMock:
    return AsyncMock()


@pytest_asyncio.fixture
async def client(runner: AsyncMock) -> AsyncIterator[test_utils.TestClient]:
    app = create_app(Settings(api_token=TOKEN), service=MetadataService(runner))
    async with test_utils.TestClient(test_utils.TestServer(app)) as test_client:
        yield test_client


def _ndjson(*entries: dict[str, Any]) -> str:
    return "\n".join(json.dumps(entry) for entry in entries) + "\n"


# ---------------------------------------------------------------------------
# Health, auth and CORS
# ---------------------------------------------------------------------------

class TestHealthAndAuth:
    @pytest.mark.asyncio
    async def test_health_needs_no_token(self, client: test_utils.TestClient) -> None:
        resp = await client.get("/")
        assert resp.status == 200
        assert await resp.json() == {
            "status": "ok",
            "service": "yt-dlp-api",
            "version": __version__,
        }

    @pytest.mark.asyncio
    async def test_missing_token(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        resp = await client.post("/api/video", json={"url": VIDEO_URL})
        assert resp.status == 401
        assert await resp.json() == {"error": "Unauthorized"}
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrong_token(self, client: test_utils.TestClient) -> None:
        resp = await client.post(
            "/api/channel",
            json={"url": CHANNEL_URL},
            headers={"Authorization": "Bearer nope"},
        )
        assert resp.status == 401

    @pytest.mark.asyncio
    async def test_wrong_scheme(self, client: test_utils.TestClient) -> None:
        resp = await client.post(
            "/api/channel",
            json={"url": CHANNEL_URL},
            headers={"Authorization": f"Basic {TOKEN}"},
        )
        assert resp.status == 401

    @pytest.mark.asyncio
    async def test_preflight_skips_auth(self, client: test_utils.TestClient) -> None:
        resp = await client.options(
            "/api/video",
            headers={
                "Origin": "https://app.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization,content-type",
            },
        )
        assert resp.status == 204
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "POST" in resp.headers["Access-Control-Allow-Methods"]
        assert resp.headers["Access-Control-Allow-Headers"] == "authorization,content-type"

    @pytest.mark.asyncio
    async def test_restricted_origins(self, runner: AsyncMock) -> None:
        settings = Settings(api_token=TOKEN, cors_origins=("https://app.example",))
        app = create_app(settings, service=MetadataService(runner))
        async with test_utils.TestClient(test_utils.TestServer(app)) as test_client:
            allowed = await test_client.get("/", headers={"Origin": "https://app.example"})
            other = await test_client.get("/", headers={"Origin": "https://evil.example"})
        assert allowed.headers["Access-Control-Allow-Origin"] == "https://app.example"
        assert "Access-Control-Allow-Origin" not in other.headers


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------

class TestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/video", "/api/channel", "/api/channel/videos"])
    async def test_missing_url(self, client: test_utils.TestClient, path: str) -> None:
        resp = await client.post(path, json={}, headers=AUTH)
        assert resp.status == 400
        assert await resp.json() == {"error": "Missing url parameter"}

    @pytest.mark.asyncio
    async def test_empty_url(self, client: test_utils.TestClient) -> None:
        resp = await client.post("/api/video", json={"url": ""}, headers=AUTH)
        assert resp.status == 400
        assert (await resp.json())["error"] == "Missing url parameter"

    @pytest.mark.asyncio
    async def test_non_string_url(self, client: test_utils.TestClient) -> None:
        resp = await client.post("/api/video", json={"url": 42}, headers=AUTH)
        assert resp.status == 400
        assert (await resp.json())["error"] == "url must be a string"

    @pytest.mark.asyncio
    async def test_invalid_json(self, client: test_utils.TestClient) -> None:
        resp = await client.post(
            "/api/video",
            data="{not json",
            headers={**AUTH, "Content-Type": "application/json"},
        )
        assert resp.status == 400
        assert (await resp.json())["error"] == "Invalid JSON body"

    @pytest.mark.asyncio
    async def test_non_object_body(self, client: test_utils.TestClient) -> None:
        resp = await client.post("/api/video", json=[VIDEO_URL], headers=AUTH)
        assert resp.status == 400

    @pytest.mark.asyncio
    async def test_schemeless_url_reaches_runner(
        self, client: test_utils.TestClient, runner: AsyncMock,
    ) -> None:
        runner.run.return_value = json.dumps({"id": "abc123", "title": "Sample"})
        resp = await client.post(
            "/api/video", json={"url": "youtube.com/watch?v=abc123"}, headers=AUTH
        )
        assert resp.status == 200
        assert runner.run.await_args.args[0][-1] == "youtube.com/watch?v=abc123"

    @pytest.mark.asyncio
    async def test_blank_url(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        resp = await client.post("/api/video", json={"url": "   "}, headers=AUTH)
        assert resp.status == 400
        assert (await resp.json())["error"] == "URL must not be empty."
        runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, -3, "10", 2.5, True])
    async def test_bad_max_videos(self, client: test_utils.TestClient, value: object) -> None:
        resp = await client.post(
            "/api/channel/videos",
            json={"url": CHANNEL_URL, "maxVideos": value},
            headers=AUTH,
        )
        assert resp.status == 400
        assert (await resp.json())["error"] == "maxVideos must be a positive integer."

    @pytest.mark.asyncio
    async def test_non_string_since_date(self, client: test_utils.TestClient) -> None:
        resp = await client.post(
            "/api/channel/videos",
            json={"url": CHANNEL_URL, "sinceDate": 20240101},
            headers=AUTH,
        )
        assert resp.status == 400


# ---------------------------------------------------------------------------
# Extraction endpoints
# ---------------------------------------------------------------------------

class TestVideoEndpoint:
    @pytest.mark.asyncio
    async def test_success_shape(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        runner.run.return_value = json.dumps(
            {
                "id": "abc123",
                "title": "Sample",
                "channel_id": "UC123",
                "channel": "Example",
                "upload_date": "20240315",
                "view_count": 5,
                "duration": 61.5,
                "webpage_url": VIDEO_URL,
                "comments": [{"text": "hello", "is_pinned": True}],
            }
        )
        resp = await client.post("/api/video", json={"url": VIDEO_URL}, headers=AUTH)
        assert resp.status == 200
        assert await resp.json() == {
            "id": "abc123",
            "title": "Sample",
            "description": None,
            "pinnedComment": "hello",
            "channelId": "UC123",
            "channelName": "Example",
            "channelUrl": "https://www.youtube.com/channel/UC123",
            "thumbnailUrl": "https://i.ytimg.com/vi/abc123/hqdefault.jpg",
            "publishedAt": "2024-03-15",
            "viewCount": 5,
            "languageCode": None,
            "duration": 61.5,
            "url": VIDEO_URL,
        }

    @pytest.mark.asyncio
    async def test_extraction_failure(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        runner.run.side_effect = MetadataExtractionError("ERROR: Unsupported URL")
        resp = await client.post("/api/video", json={"url": VIDEO_URL}, headers=AUTH)
        assert resp.status == 500
        assert await resp.json() == {
            "error": "Failed to extract video metadata",
            "details": "ERROR: Unsupported URL",
        }

    @pytest.mark.asyncio
    async def test_unexpected_runner_error(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        runner.run.side_effect = OSError("pipe broke")
        resp = await client.post("/api/video", json={"url": VIDEO_URL}, headers=AUTH)
        assert resp.status == 500
        body = await resp.json()
        assert body["error"] == "Failed to extract video metadata"
        assert "pipe broke" in body["details"]


class TestChannelEndpoint:
    @pytest.mark.asyncio
    async def test_success_shape(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        runner.run.return_value = json.dumps(
            {
                "id": "vid1",
                "channel_id": "UC123",
                "channel": "Example",
                "channel_url": "https://www.youtube.com/channel/UC123",
                "channel_follower_count": 1000,
                "playlist_count": 42,
            }
        )
        resp = await client.post("/api/channel", json={"url": CHANNEL_URL}, headers=AUTH)
        assert resp.status == 200
        assert await resp.json() == {
            "id": "UC123",
            "name": "Example",
            "url": "https://www.youtube.com/channel/UC123",
            "description": None,
            "subscriberCount": 1000,
            "videoCount": 42,
        }

    @pytest.mark.asyncio
    async def test_invalid_output(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        runner.run.return_value = "not json"
        resp = await client.post("/api/channel", json={"url": CHANNEL_URL}, headers=AUTH)
        assert resp.status == 500
        assert (await resp.json())["error"] == "Failed to extract channel metadata"


class TestChannelVideosEndpoint:
    @pytest.mark.asyncio
    async def test_listing_with_since_date(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        runner.run.return_value = _ndjson(
            {"id": "new", "title": "New", "upload_date": "20240320"},
            {"id": "old", "title": "Old", "upload_date": "20240101"},
        )
        resp = await client.post(
            "/api/channel/videos",
            json={"url": CHANNEL_URL, "sinceDate": "2024-03-01", "maxVideos": 10},
            headers=AUTH,
        )
        assert resp.status == 200
        body = await resp.json()
        assert [v["id"] for v in body["videos"]] == ["new"]
        assert body["videos"][0] == {
            "id": "new",
            "title": "New",
            "url": "https://www.youtube.com/watch?v=new",
            "publishedAt": "2024-03-20",
            "viewCount": None,
            "duration": None,
        }
        assert body["meta"] == {
            "requestedSinceDate": "2024-03-01",
            "ytDlpDateafter": "20240301",
            "maxVideos": 10,
            "totalEntries": 2,
            "returned": 1,
            "filteredOut": 1,
        }

    @pytest.mark.asyncio
    async def test_defaults(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        runner.run.return_value = ""
        resp = await client.post(
            "/api/channel/videos", json={"url": CHANNEL_URL}, headers=AUTH
        )
        assert resp.status == 200
        body = await resp.json()
        assert body["videos"] == []
        assert body["meta"]["maxVideos"] == 100
        assert body["meta"]["requestedSinceDate"] is None
        assert body["meta"]["ytDlpDateafter"] is None

    @pytest.mark.asyncio
    async def test_extraction_failure(self, client: test_utils.TestClient, runner: AsyncMock) -> None:
        runner.run.side_effect = MetadataExtractionError("yt-dlp timed out after 120s")
        resp = await client.post(
            "/api/channel/videos", json={"url": CHANNEL_URL}, headers=AUTH
        )
        assert resp.status == 500
        assert await resp.json() == {
            "error": "Failed to extract channel videos",
            "details": "yt-dlp timed out after 120s",
        }


# ---------------------------------------------------------------------------
# Server entry point
# ---------------------------------------------------------------------------

class TestRunServer:
    @patch("ytdlp_api.web.app.detect_ytdlp")
    @patch("ytdlp_api.web.app.web.run_app")
    def test_access_log_uses_configured_logger(
        self, mock_run_app: MagicMock, mock_detect: MagicMock,
    ) -> None:
        mock_detect.return_value = ToolStatus(
            found=True, path=None, module_version=None, install_commands=(),
        )
        run_server(Settings(api_token=TOKEN, host="127.0.0.1", port=4000))

        kwargs = mock_run_app.call_args.kwargs
        assert kwargs["access_log"] is logging.getLogger(ACCESS_LOGGER)
        assert (kwargs["host"], kwargs["port"]) == ("127.0.0.1", 4000)
