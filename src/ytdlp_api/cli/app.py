"""CLI application entry point and command routing for yt-dlp-api.

This module is the **process error boundary**.  It catches
:class:`~ytdlp_api.exceptions.YtdlpApiError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering a short message via Rich
and returning a well-defined exit code.

Commands
--------
* ``ytdlp-api serve [--host H] [--port P]`` — run the HTTP service
* ``ytdlp-api doctor`` — environment diagnostics
* ``ytdlp-api --version``
"""

from __future__ import annotations

import argparse
import dataclasses
import sys

from ytdlp_api.cli import exit_codes
from ytdlp_api.cli.console import console
from ytdlp_api.config import Settings
from ytdlp_api.exceptions import YtdlpApiError
from ytdlp_api.log import configure_logging
from ytdlp_api.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="ytdlp-api",
        description="HTTP microservice exposing yt-dlp metadata as JSON.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    commands = parser.add_subparsers(dest="command")

    serve = commands.add_parser("serve", help="Run the HTTP service.")
    serve.add_argument("--host", default=None, help="Bind address (env: HOST).")
    serve.add_argument("--port", type=int, default=None, help="Listen port (env: PORT).")

    commands.add_parser("doctor", help="Check the runtime environment.")
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_serve(settings: Settings, host: str | None, port: int | None) -> int:
    """Apply CLI overrides to *settings* and run the server until stopped."""
    from ytdlp_api.web.app import run_server

    overrides: dict[str, object] = {}
    if host:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    run_server(settings)
    return exit_codes.SUCCESS


def _handle_doctor(settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from ytdlp_api.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the yt-dlp-api CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    if args.command == "doctor":
        return _handle_doctor(settings)

    return _handle_serve(settings, args.host, args.port)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Guarantees the process never exits with a raw stack trace during
    normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except YtdlpApiError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            f"{type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
