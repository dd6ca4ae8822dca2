"""``ytdlp-api doctor`` — environment diagnostics command.

Collects the facts a deployment needs before it can serve requests and
renders them as a Rich table.  No business logic resides here.
"""

from __future__ import annotations

import platform
import sys

from rich.table import Table

from ytdlp_api.cli import exit_codes
from ytdlp_api.cli.console import console
from ytdlp_api.config import Settings
from ytdlp_api.infra.tool_detector import detect_ytdlp, ytdlp_module_version
from ytdlp_api.version import __version__

Check = tuple[str, str, str]

OK = "[green]OK[/green]"
WARN = "[yellow]WARN[/yellow]"


def _fail(reason: str = "") -> str:
    suffix = f" ({reason})" if reason else ""
    return f"[red]FAIL{suffix}[/red]"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _service_version_check() -> Check:
    return "yt-dlp-api", __version__, OK


def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    ok = sys.version_info[:2] >= (3, 10)
    return "Python", platform.python_version(), OK if ok else _fail(">=3.10 required")


def _ytdlp_binary_check(binary: str) -> Check:
    """Return (label, value, status) for the yt-dlp executable row."""
    status = detect_ytdlp(binary)
    if status.found:
        return "yt-dlp binary", str(status.path), OK
    return "yt-dlp binary", f"{binary} not found", _fail()


def _ytdlp_module_check() -> Check:
    """Return (label, value, status) for the yt_dlp package row.

    Only the executable is required at runtime, so a missing package is
    a warning.
    """
    version = ytdlp_module_version()
    if version is None:
        return "yt-dlp module", "NOT INSTALLED", WARN
    return "yt-dlp module", version, OK


def _token_check(settings: Settings) -> Check:
    if settings.uses_default_token:
        return "API token", "development default", WARN
    return "API token", "configured", OK


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def collect_checks(settings: Settings) -> list[Check]:
    return [
        _service_version_check(),
        _python_version_check(),
        _ytdlp_binary_check(settings.ytdlp_binary),
        _ytdlp_module_check(),
        _token_check(settings),
    ]


def run_doctor(settings: Settings | None = None) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check failed,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    settings = settings or Settings.from_env()
    checks = collect_checks(settings)

    table = Table(
        title="yt-dlp-api doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()

    if any("FAIL" in status for _, _, status in checks):
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
