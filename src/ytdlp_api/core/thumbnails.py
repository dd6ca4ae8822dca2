"""Pure thumbnail selection.

Priority (first hit wins):

1. ``hqdefault`` candidate — best compromise for UI cards.
2. ``mqdefault`` candidate.
3. ``maxresdefault`` candidate.
4. The record's direct ``thumbnail`` field.
5. Highest-scoring candidate (area, falling back to ``preference``).
6. ``https://i.ytimg.com/vi/{id}/hqdefault.jpg`` built from the record id.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ytdlp_api.core.models import MetadataRecord, ThumbnailCandidate
from ytdlp_api.core.records import parse_record

_NAMED_QUALITIES: tuple[str, ...] = ("hqdefault", "mqdefault", "maxresdefault")

FALLBACK_URL_TEMPLATE: str = "https://i.ytimg.com/vi/{id}/hqdefault.jpg"


def find_by_quality(
    thumbnails: Sequence[ThumbnailCandidate],
    quality: str,
) -> str | None:
    """Return the first candidate URL containing *quality* (case-insensitive)."""
    needle = quality.lower()
    for candidate in thumbnails:
        if candidate.url and needle in candidate.url.lower():
            return candidate.url
    return None


def score_thumbnail(candidate: ThumbnailCandidate) -> float:
    """Area when both dimensions are positive, else ``preference`` (default 0)."""
    width = candidate.width or 0
    height = candidate.height or 0
    if width > 0 and height > 0:
        return width * height
    return candidate.preference or 0


def best_scored_url(thumbnails: Sequence[ThumbnailCandidate]) -> str | None:
    """Return the URL of the highest-scoring candidate; ties keep list order."""
    usable = [candidate for candidate in thumbnails if candidate.url]
    if not usable:
        return None
    # sorted() is stable, also with reverse=True.
    ranked = sorted(usable, key=score_thumbnail, reverse=True)
    return ranked[0].url


def pick_thumbnail_url(record: MetadataRecord | Mapping[str, Any]) -> str | None:
    """Pick the single best thumbnail URL for *record*.

    *record* may be a raw yt-dlp dict; it is validated first.  Returns
    ``None`` only when the record has no usable candidate, no direct
    thumbnail, and no id.
    """
    if not isinstance(record, MetadataRecord):
        record = parse_record(record)

    for quality in _NAMED_QUALITIES:
        url = find_by_quality(record.thumbnails, quality)
        if url:
            return url

    if record.thumbnail:
        return record.thumbnail

    url = best_scored_url(record.thumbnails)
    if url:
        return url

    if record.id:
        return FALLBACK_URL_TEMPLATE.format(id=record.id)
    return None
