"""Boundary validation of raw yt-dlp records.

yt-dlp output is an untyped dict whose fields may be absent or carry an
unexpected type.  The helpers here run once, at the edge of the core,
so that downstream logic works on a typed :class:`MetadataRecord`
instead of repeating ``isinstance`` checks.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ytdlp_api.core.models import MetadataRecord, ThumbnailCandidate


def as_str(value: object) -> str | None:
    """Return *value* if it is a ``str``, else ``None``."""
    return value if isinstance(value, str) else None


def as_number(value: object) -> float | None:
    """Return *value* if it is an ``int`` or ``float`` (but not ``bool``)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def as_int(value: object) -> int | None:
    """Return *value* if it is an ``int`` (but not ``bool``)."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def parse_thumbnail(raw: Mapping[str, Any]) -> ThumbnailCandidate:
    """Convert one raw thumbnail dict to a :class:`ThumbnailCandidate`."""
    return ThumbnailCandidate(
        url=as_str(raw.get("url")),
        width=as_number(raw.get("width")),
        height=as_number(raw.get("height")),
        preference=as_number(raw.get("preference")),
        id=as_str(raw.get("id")),
    )


def parse_thumbnails(raw: object) -> tuple[ThumbnailCandidate, ...]:
    """Parse a raw ``thumbnails`` value; non-dict entries are skipped."""
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(
        parse_thumbnail(entry) for entry in raw if isinstance(entry, Mapping)
    )


def parse_record(raw: Mapping[str, Any]) -> MetadataRecord:
    """Convert a raw yt-dlp info dict into a :class:`MetadataRecord`."""
    return MetadataRecord(
        id=as_str(raw.get("id")),
        title=as_str(raw.get("title")),
        thumbnail=as_str(raw.get("thumbnail")),
        thumbnails=parse_thumbnails(raw.get("thumbnails")),
        upload_date=as_str(raw.get("upload_date")),
    )
