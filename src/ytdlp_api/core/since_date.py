"""Pure parsing of user-supplied "since" dates.

Every function in this module is a **pure** transformation — no I/O,
no clock access, fully deterministic.

A since-date is turned into two things:

1. **Filter token** — a value for yt-dlp's ``--dateafter`` option.  It
   is built only from grammar captures, never from raw input, so it
   contains nothing but ``[A-Za-z0-9-]``.
2. **Local date** — a :class:`datetime.date` used to drop entries that
   yt-dlp let through.  Relative expressions are not resolved locally;
   yt-dlp does that arithmetic itself.

Dates are built from explicit ``(year, month, day)`` components.  A
``date`` has no time zone, so comparisons cannot shift by a day.
"""

from __future__ import annotations

import re
from datetime import date

from ytdlp_api.core.models import (
    AbsoluteSinceDate,
    RelativeSinceDate,
    SinceDate,
    UnrecognizedSinceDate,
)

# ASCII digits only: ``\d`` would also accept non-ASCII digits.
_ISO_PREFIX_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_COMPACT_RE = re.compile(r"([0-9]{4})([0-9]{2})([0-9]{2})")
_RELATIVE_RE = re.compile(
    r"(now|today|yesterday)(?:-([1-9][0-9]*)(day|week|month|year)s?)?"
)


# ---------------------------------------------------------------------------
# 1. Grammar
# ---------------------------------------------------------------------------

def parse_since_date(text: str) -> SinceDate:
    """Classify *text* as absolute, relative, or unrecognized.

    Rules are tried in order; the first match wins:

    * ``YYYY-MM-DD`` prefix (anything after the 10th character is ignored)
    * exactly ``YYYYMMDD``
    * ``now|today|yesterday`` with an optional ``-N<unit>[s]`` suffix
    """
    stripped = text.strip()

    iso = _ISO_PREFIX_RE.match(stripped)
    if iso is not None:
        year, month, day = iso.groups()
        return AbsoluteSinceDate(year=year, month=month, day=day)

    compact = _COMPACT_RE.fullmatch(stripped)
    if compact is not None:
        year, month, day = compact.groups()
        return AbsoluteSinceDate(year=year, month=month, day=day)

    relative = _RELATIVE_RE.fullmatch(stripped)
    if relative is not None:
        base, count, unit = relative.groups()
        return RelativeSinceDate(base=base, count=count, unit=unit)

    return UnrecognizedSinceDate(raw=text)


# ---------------------------------------------------------------------------
# 2. Filter token
# ---------------------------------------------------------------------------

def render_filter_token(parsed: SinceDate) -> str | None:
    """Render a grammar result as a yt-dlp ``--dateafter`` value."""
    if isinstance(parsed, AbsoluteSinceDate):
        return f"{parsed.year}{parsed.month}{parsed.day}"

    if isinstance(parsed, RelativeSinceDate):
        if not parsed.count or not parsed.unit:
            return parsed.base
        # The grammar captures the singular unit, so ``endswith`` never
        # fires for matched input.
        needs_plural = parsed.count != "1" and not parsed.unit.endswith("s")
        unit = f"{parsed.unit}s" if needs_plural else parsed.unit
        return f"{parsed.base}-{parsed.count}{unit}"

    return None


def normalize_since_date_for_filter(text: str) -> str | None:
    """Return a safe ``--dateafter`` value for *text*, or ``None``.

    ``None`` means the input was not recognized; callers must then omit
    the option rather than pass the raw value through.
    """
    return render_filter_token(parse_since_date(text))


# ---------------------------------------------------------------------------
# 3. Local dates
# ---------------------------------------------------------------------------

def _build_date(year: str, month: str, day: str) -> date | None:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def parse_since_date_to_local_date(text: str) -> date | None:
    """Return the calendar date for an absolute *text*, else ``None``.

    Relative expressions and impossible dates (``2024-13-45``) yield
    ``None``, which disables local filtering.
    """
    parsed = parse_since_date(text)
    if not isinstance(parsed, AbsoluteSinceDate):
        return None
    return _build_date(parsed.year, parsed.month, parsed.day)


def parse_upload_date(value: str | None) -> date | None:
    """Decompose a record's ``YYYYMMDD`` ``upload_date`` into a date."""
    if value is None:
        return None
    match = _COMPACT_RE.fullmatch(value)
    if match is None:
        return None
    return _build_date(*match.groups())


def format_upload_date(value: str | None) -> str | None:
    """Reformat a record's ``YYYYMMDD`` ``upload_date`` as ``YYYY-MM-DD``."""
    if value is None:
        return None
    match = _COMPACT_RE.fullmatch(value)
    if match is None:
        return None
    year, month, day = match.groups()
    return f"{year}-{month}-{day}"
