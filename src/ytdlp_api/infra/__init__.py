"""Infrastructure layer — external system integration.

This layer wraps all interaction with the yt-dlp executable and the
operating system.  Every raw OS / subprocess exception must be caught
here and re-raised as a :class:`~ytdlp_api.exceptions.YtdlpApiError`
subclass.

Rules
-----
* No imports from ``web`` or ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from ytdlp_api.infra.tool_detector import ToolStatus, detect_ytdlp
from ytdlp_api.infra.ytdlp_runner import YtDlpRunner

__all__: list[str] = [
    "ToolStatus",
    "YtDlpRunner",
    "detect_ytdlp",
]
