"""Infrastructure: yt-dlp detection and install guidance.

Locates the yt-dlp executable and the importable ``yt_dlp`` module so
that diagnostics can report what the runner will actually use.

Rules
-----
* Detection via :func:`shutil.which` and imports only — no subprocess.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

INSTALL_COMMANDS: tuple[str, ...] = (
    "pip install yt-dlp",
    "pipx install yt-dlp",
)


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of a yt-dlp detection probe.

    Attributes
    ----------
    found : bool
        Whether the executable was located on PATH.
    path : Path | None
        Absolute path to the executable, or ``None``.
    module_version : str | None
        Version of the importable ``yt_dlp`` package, if installed.
    install_commands : tuple[str, ...]
        Suggested install commands.  Empty when the executable is present.
    """

    found: bool
    path: Path | None
    module_version: str | None
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def ytdlp_module_version() -> str | None:
    """Return the installed ``yt_dlp`` package version, or ``None``."""
    try:
        from yt_dlp.version import __version__ as ydl_ver
    except ImportError:
        return None
    return str(ydl_ver)


def detect_ytdlp(binary: str = "yt-dlp") -> ToolStatus:
    """Probe the system for the yt-dlp executable named *binary*.

    Returns a :class:`ToolStatus` regardless of whether it is present —
    the caller decides whether to abort or merely warn.
    """
    result = shutil.which(binary)
    version = ytdlp_module_version()

    if result is not None:
        return ToolStatus(
            found=True,
            path=Path(result).resolve(),
            module_version=version,
            install_commands=(),
        )

    return ToolStatus(
        found=False,
        path=None,
        module_version=version,
        install_commands=INSTALL_COMMANDS,
    )
