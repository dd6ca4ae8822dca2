"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ytdlp_api.core.models import RunLimits


class ToolRunner(Protocol):
    """Contract for yt-dlp execution backends.

    Any object that implements :meth:`run` with the correct signature
    satisfies this protocol structurally (no explicit inheritance
    required).
    """

    async def run(self, args: Sequence[str], *, limits: RunLimits) -> str:
        """Run yt-dlp with *args* and return its decoded stdout.

        Parameters
        ----------
        args:
            Command-line arguments, excluding the executable itself.
            Each element is passed verbatim; no shell is involved.
        limits:
            Time and output-size bounds for this invocation.

        Implementations must map all OS / subprocess exceptions to
        :class:`~ytdlp_api.exceptions.YtdlpApiError` subclasses.

        Raises
        ------
        MetadataExtractionError
            When yt-dlp exits with a non-zero status.
        VideoUnavailableError
            When yt-dlp reports the target as unavailable.
        ExtractionTimeoutError
            When *limits.timeout* is exceeded.
        OutputLimitExceededError
            When stdout grows beyond *limits.max_output_bytes*.
        ToolNotFoundError
            When the executable cannot be started.
        """
        ...  # pragma: no cover
