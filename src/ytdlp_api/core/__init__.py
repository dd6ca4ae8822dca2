"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls and no logging.
* No filesystem, subprocess, or network I/O (the injected runner is
  the only collaborator that touches the outside world).
* No imports from ``web``, ``cli`` or ``infra``.
"""

from ytdlp_api.core.metadata_service import MetadataService
from ytdlp_api.core.models import (
    ChannelDetails,
    ChannelVideo,
    ChannelVideoList,
    ChannelVideosMeta,
    MetadataRecord,
    RunLimits,
    ThumbnailCandidate,
    VideoDetails,
)
from ytdlp_api.core.protocols import ToolRunner
from ytdlp_api.core.since_date import (
    normalize_since_date_for_filter,
    parse_since_date,
    parse_since_date_to_local_date,
)
from ytdlp_api.core.thumbnails import pick_thumbnail_url

__all__: list[str] = [
    "ChannelDetails",
    "ChannelVideo",
    "ChannelVideoList",
    "ChannelVideosMeta",
    "MetadataRecord",
    "MetadataService",
    "RunLimits",
    "ThumbnailCandidate",
    "ToolRunner",
    "VideoDetails",
    "normalize_since_date_for_filter",
    "parse_since_date",
    "parse_since_date_to_local_date",
    "pick_thumbnail_url",
]
