"""Domain models for yt-dlp-api.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and live only for the duration of one request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


# ---------------------------------------------------------------------------
# Validated tool output
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ThumbnailCandidate:
    """One entry of a record's ``thumbnails`` list.

    Every field is optional; a value of the wrong type in the raw
    record is stored as ``None``.
    """

    url: str | None = None
    width: float | None = None
    height: float | None = None
    preference: float | None = None
    id: str | None = None


@dataclass(frozen=True, slots=True)
class MetadataRecord:
    """The subset of a yt-dlp info dict used for thumbnail and date logic."""

    id: str | None = None
    """Video identifier (e.g. ``dQw4w9WgXcQ``)."""

    title: str | None = None

    thumbnail: str | None = None
    """Direct thumbnail URL, when yt-dlp reports one."""

    thumbnails: tuple[ThumbnailCandidate, ...] = ()
    """Candidates in the order yt-dlp listed them."""

    upload_date: str | None = None
    """Raw ``YYYYMMDD`` string; not validated here."""


# ---------------------------------------------------------------------------
# Since-date grammar results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AbsoluteSinceDate:
    """A ``YYYY-MM-DD``-prefixed or ``YYYYMMDD`` input, kept as digit strings."""

    year: str
    month: str
    day: str


@dataclass(frozen=True, slots=True)
class RelativeSinceDate:
    """A ``now|today|yesterday[-N<unit>]`` expression."""

    base: str
    count: str | None = None
    unit: str | None = None
    """Singular unit name (``day``, ``week``, ``month``, ``year``)."""


@dataclass(frozen=True, slots=True)
class UnrecognizedSinceDate:
    """Input that matches neither grammar."""

    raw: str


SinceDate = Union[AbsoluteSinceDate, RelativeSinceDate, UnrecognizedSinceDate]


# ---------------------------------------------------------------------------
# Subprocess bounds
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RunLimits:
    """Upper bounds applied to a single yt-dlp invocation."""

    timeout: float
    """Wall-clock limit in seconds."""

    max_output_bytes: int
    """Maximum number of bytes accepted on stdout."""


# ---------------------------------------------------------------------------
# Response payloads
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class VideoDetails:
    """Shaped metadata for a single video."""

    id: str | None
    title: str | None
    description: str | None
    pinned_comment: str | None
    channel_id: str | None
    channel_name: str
    channel_url: str | None
    thumbnail_url: str | None
    published_at: str | None
    """``YYYY-MM-DD`` or ``None``."""
    view_count: int | None
    language_code: str | None
    duration: float | None
    url: str | None


@dataclass(frozen=True, slots=True)
class ChannelDetails:
    """Shaped metadata for a channel."""

    id: str | None
    name: str
    url: str
    description: str | None
    subscriber_count: int | None
    video_count: int | None


@dataclass(frozen=True, slots=True)
class ChannelVideo:
    """One entry of a channel's flat video listing."""

    id: str | None
    title: str | None
    url: str
    published_at: str | None
    view_count: int | None
    duration: float | None


@dataclass(frozen=True, slots=True)
class ChannelVideosMeta:
    """Bookkeeping returned alongside a channel video listing."""

    requested_since_date: str | None
    ytdlp_dateafter: str | None
    max_videos: int
    total_entries: int
    returned: int
    filtered_out: int


@dataclass(frozen=True, slots=True)
class ChannelVideoList:
    """Immutable channel video listing plus its :class:`ChannelVideosMeta`."""

    videos: tuple[ChannelVideo, ...]
    meta: ChannelVideosMeta

    def __len__(self) -> int:
        return len(self.videos)

    def __bool__(self) -> bool:
        return len(self.videos) > 0
