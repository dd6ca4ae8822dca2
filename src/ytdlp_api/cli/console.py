"""Shared Rich console for CLI output.

Everything is rendered to stderr so that stdout stays free for
machine-readable output.
"""

from __future__ import annotations

from rich.console import Console

console = Console(stderr=True)
