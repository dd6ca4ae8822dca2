"""Custom exception hierarchy for yt-dlp-api.

All exceptions that cross layer boundaries must inherit from
:class:`YtdlpApiError`.  Raw OS / subprocess exceptions must NEVER
propagate beyond the infrastructure layer — they must be caught and
re-raised as a typed subclass defined here.

Hierarchy
---------
YtdlpApiError
├── InvalidRequestError
│   └── InvalidURLError
├── MetadataExtractionError
│   ├── VideoUnavailableError
│   ├── ExtractionTimeoutError
│   └── OutputLimitExceededError
└── EnvironmentError
    └── ToolNotFoundError
"""

from __future__ import annotations


class YtdlpApiError(Exception):
    """Base exception for all yt-dlp-api errors.

    Every reportable error condition must map to a subclass of this
    exception so that the HTTP and CLI error boundaries can render a
    clean message without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown alongside the message."""


# --- Request validation ----------------------------------------------------

class InvalidRequestError(YtdlpApiError):
    """Raised when a request body or parameter is malformed."""


class InvalidURLError(InvalidRequestError):
    """Raised when the provided URL fails validation."""


# --- Metadata / extraction -------------------------------------------------

class MetadataExtractionError(YtdlpApiError):
    """Raised when yt-dlp fails to produce usable metadata."""


class VideoUnavailableError(MetadataExtractionError):
    """Raised when the target video is unavailable (private, removed, etc.)."""


class ExtractionTimeoutError(MetadataExtractionError):
    """Raised when a yt-dlp invocation exceeds its time bound."""


class OutputLimitExceededError(MetadataExtractionError):
    """Raised when a yt-dlp invocation writes more output than allowed."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(YtdlpApiError):
    """Raised when a required runtime dependency is not available."""


class ToolNotFoundError(EnvironmentError):
    """Raised when the yt-dlp executable cannot be started."""


def append_ytdlp_upgrade_suggestion(hint: str) -> str:
    """Append yt-dlp upgrade guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try updating yt-dlp:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    pip install --upgrade yt-dlp",
        )
    )
