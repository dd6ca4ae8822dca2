"""Core metadata service — builds yt-dlp invocations and shapes their output.

This is the central service class consumed by the web layer.  It
depends on a :class:`~ytdlp_api.core.protocols.ToolRunner` injected at
construction time (dependency inversion), keeping the core free of any
subprocess or network imports.

Guarantees
----------
* Pure orchestration — the runner is the only I/O collaborator.
* Only :class:`~ytdlp_api.exceptions.YtdlpApiError` subclasses escape.
* Argument lists are built from validated values only; user input that
  reaches yt-dlp is either the request URL (after ``--``) or a filter
  token produced by :mod:`ytdlp_api.core.since_date`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from ytdlp_api.core.models import (
    ChannelDetails,
    ChannelVideo,
    ChannelVideoList,
    ChannelVideosMeta,
    RunLimits,
    VideoDetails,
)
from ytdlp_api.core.protocols import ToolRunner
from ytdlp_api.core.records import as_int, as_number, as_str, parse_record
from ytdlp_api.core.since_date import (
    format_upload_date,
    normalize_since_date_for_filter,
    parse_since_date_to_local_date,
    parse_upload_date,
)
from ytdlp_api.core.thumbnails import pick_thumbnail_url
from ytdlp_api.exceptions import (
    InvalidRequestError,
    InvalidURLError,
    MetadataExtractionError,
    YtdlpApiError,
)

_MIB = 1024 * 1024

VIDEO_LIMITS = RunLimits(timeout=60.0, max_output_bytes=10 * _MIB)
CHANNEL_LIMITS = RunLimits(timeout=30.0, max_output_bytes=5 * _MIB)
CHANNEL_VIDEOS_LIMITS = RunLimits(timeout=120.0, max_output_bytes=20 * _MIB)

DEFAULT_MAX_VIDEOS: int = 100

_VIDEO_ARGS: tuple[str, ...] = (
    "--dump-json",
    "--skip-download",
    "--no-warnings",
    "--write-comments",
    "--extractor-args",
    "youtube:comment_sort=top;max_comments=5",
)

_CHANNEL_ARGS: tuple[str, ...] = (
    "--dump-json",
    "--skip-download",
    "--no-warnings",
    "--playlist-items",
    "1",
)


class MetadataService:
    """Stateless service implementing the three extraction operations.

    Parameters
    ----------
    runner:
        Any object satisfying the :class:`ToolRunner` protocol.
    """

    def __init__(self, runner: ToolRunner) -> None:
        self._runner: ToolRunner = runner

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_video(self, url: str) -> VideoDetails:
        """Extract metadata, pinned comment and thumbnail for one video.

        Raises
        ------
        InvalidURLError
            If *url* is empty.
        MetadataExtractionError
            If yt-dlp fails or returns unusable output.
        """
        url = self._validate_url(url)
        stdout = await self._run([*_VIDEO_ARGS, "--", url], VIDEO_LIMITS)
        info = self._parse_single(stdout)
        return self._parse_video(info)

    async def get_channel(self, url: str) -> ChannelDetails:
        """Extract channel metadata via the first playlist item of *url*.

        Raises
        ------
        InvalidURLError
            If *url* is empty.
        MetadataExtractionError
            If yt-dlp fails or returns unusable output.
        """
        url = self._validate_url(url)
        stdout = await self._run([*_CHANNEL_ARGS, "--", url], CHANNEL_LIMITS)
        info = self._parse_single(stdout)
        return self._parse_channel(info, requested_url=url)

    async def list_channel_videos(
        self,
        url: str,
        since_date: str | None = None,
        max_videos: int = DEFAULT_MAX_VIDEOS,
    ) -> ChannelVideoList:
        """List a channel's videos, optionally only those since *since_date*.

        *since_date* is applied twice: as a ``--dateafter`` token so that
        yt-dlp emits fewer entries, and locally as a backstop because
        flat-listing dates are approximate.  An unrecognized value
        disables both filters.

        Raises
        ------
        InvalidURLError
            If *url* is empty.
        InvalidRequestError
            If *since_date* or *max_videos* has the wrong type.
        MetadataExtractionError
            If yt-dlp fails.
        """
        url = self._validate_url(url)
        self._validate_since_date(since_date)
        self._validate_max_videos(max_videos)

        dateafter = normalize_since_date_for_filter(since_date) if since_date else None
        threshold = parse_since_date_to_local_date(since_date) if since_date else None

        args = self._channel_videos_args(url, max_videos, dateafter)
        stdout = await self._run(args, CHANNEL_VIDEOS_LIMITS)

        lines = [line for line in stdout.strip().splitlines() if line.strip()]
        videos: list[ChannelVideo] = []
        filtered_out = 0

        for entry in self._iter_entries(lines):
            published = parse_upload_date(as_str(entry.get("upload_date")))
            if threshold is not None and published is not None and published < threshold:
                filtered_out += 1
                continue
            videos.append(self._parse_channel_video(entry))

        meta = ChannelVideosMeta(
            requested_since_date=since_date,
            ytdlp_dateafter=dateafter,
            max_videos=max_videos,
            total_entries=len(lines),
            returned=len(videos),
            filtered_out=filtered_out,
        )
        return ChannelVideoList(videos=tuple(videos), meta=meta)

    # ------------------------------------------------------------------
    # Input validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_url(url: str) -> str:
        """Return the stripped *url*, or raise :class:`InvalidURLError`.

        Only emptiness is checked; yt-dlp resolves schemeless and
        shortened forms itself.  The URL is always passed after ``--``.
        """
        stripped = url.strip()
        if not stripped:
            raise InvalidURLError("URL must not be empty.")
        return stripped

    @staticmethod
    def _validate_since_date(since_date: object) -> None:
        if since_date is not None and not isinstance(since_date, str):
            raise InvalidRequestError("sinceDate must be a string.")

    @staticmethod
    def _validate_max_videos(max_videos: object) -> None:
        value = as_int(max_videos)
        if value is None or value < 1:
            raise InvalidRequestError(
                "maxVideos must be a positive integer.",
                hint=f"Omit it to use the default of {DEFAULT_MAX_VIDEOS}.",
            )

    # ------------------------------------------------------------------
    # Runner delegation (safe boundary)
    # ------------------------------------------------------------------

    async def _run(self, args: Sequence[str], limits: RunLimits) -> str:
        """Call the runner and ensure only our exceptions escape."""
        try:
            return await self._runner.run(args, limits=limits)
        except YtdlpApiError:
            # Already one of ours; propagate unchanged.
            raise
        except Exception as exc:
            raise MetadataExtractionError(
                f"Unexpected runner error: {exc}",
            ) from exc

    @staticmethod
    def _channel_videos_args(
        url: str,
        max_videos: int,
        dateafter: str | None,
    ) -> list[str]:
        """Build the flat-listing argument list for a channel's videos tab."""
        videos_url = url if "/videos" in url else f"{url.rstrip('/')}/videos"
        args = [
            "--flat-playlist",
            "--dump-json",
            "--no-warnings",
            "--playlist-end",
            str(max_videos),
            # Without approximate_date, flat entries carry no upload_date.
            "--extractor-args",
            "youtubetab:approximate_date",
        ]
        if dateafter:
            args.extend(("--dateafter", dateafter))
        args.extend(("--", videos_url))
        return args

    # ------------------------------------------------------------------
    # Output parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_single(stdout: str) -> dict[str, Any]:
        """Decode a single-record ``--dump-json`` output."""
        try:
            info: Any = json.loads(stdout)
        except ValueError as exc:
            raise MetadataExtractionError(
                f"yt-dlp returned invalid JSON: {exc}",
            ) from exc
        if not isinstance(info, dict):
            raise MetadataExtractionError(
                "yt-dlp returned an unexpected data structure.",
            )
        return info

    @staticmethod
    def _iter_entries(lines: Sequence[str]) -> list[dict[str, Any]]:
        """Decode NDJSON *lines*; malformed lines are skipped."""
        entries: list[dict[str, Any]] = []
        for line in lines:
            try:
                entry: Any = json.loads(line)
            except ValueError:
                continue
            if isinstance(entry, dict):
                entries.append(entry)
        return entries

    @staticmethod
    def _pinned_comment(info: Mapping[str, Any]) -> str | None:
        comments = info.get("comments")
        if not isinstance(comments, list):
            return None
        for comment in comments:
            if isinstance(comment, Mapping) and comment.get("is_pinned"):
                return as_str(comment.get("text"))
        return None

    @classmethod
    def _parse_video(cls, info: dict[str, Any]) -> VideoDetails:
        """Convert a raw info dict into :class:`VideoDetails`."""
        record = parse_record(info)
        channel_id = as_str(info.get("channel_id"))

        channel_url = as_str(info.get("channel_url")) or as_str(info.get("uploader_url"))
        if not channel_url and channel_id:
            channel_url = f"https://www.youtube.com/channel/{channel_id}"

        return VideoDetails(
            id=record.id,
            title=record.title,
            description=as_str(info.get("description")) or None,
            pinned_comment=cls._pinned_comment(info),
            channel_id=channel_id,
            channel_name=(
                as_str(info.get("channel")) or as_str(info.get("uploader")) or "Unknown"
            ),
            channel_url=channel_url or None,
            thumbnail_url=pick_thumbnail_url(record),
            published_at=format_upload_date(record.upload_date),
            view_count=as_int(info.get("view_count")),
            language_code=as_str(info.get("language")) or None,
            duration=as_number(info.get("duration")),
            url=as_str(info.get("webpage_url")),
        )

    @staticmethod
    def _parse_channel(info: dict[str, Any], *, requested_url: str) -> ChannelDetails:
        """Convert a raw info dict into :class:`ChannelDetails`."""
        return ChannelDetails(
            id=as_str(info.get("channel_id")) or as_str(info.get("id")),
            name=(
                as_str(info.get("channel"))
                or as_str(info.get("uploader"))
                or as_str(info.get("title"))
                or "Unknown"
            ),
            url=(
                as_str(info.get("channel_url"))
                or as_str(info.get("uploader_url"))
                or requested_url
            ),
            description=as_str(info.get("description")) or None,
            subscriber_count=as_int(info.get("channel_follower_count")),
            video_count=as_int(info.get("playlist_count")),
        )

    @staticmethod
    def _parse_channel_video(entry: dict[str, Any]) -> ChannelVideo:
        """Convert one flat-listing entry into a :class:`ChannelVideo`."""
        video_id = as_str(entry.get("id"))
        url = (
            as_str(entry.get("webpage_url"))
            or as_str(entry.get("url"))
            or f"https://www.youtube.com/watch?v={video_id}"
        )
        return ChannelVideo(
            id=video_id,
            title=as_str(entry.get("title")),
            url=url,
            published_at=format_upload_date(as_str(entry.get("upload_date"))),
            view_count=as_int(entry.get("view_count")),
            duration=as_number(entry.get("duration")),
        )
