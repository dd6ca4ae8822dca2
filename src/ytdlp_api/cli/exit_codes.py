"""Process exit codes returned by ``ytdlp-api``."""

from __future__ import annotations

SUCCESS: int = 0
"""Server stopped cleanly, or every doctor check passed."""

GENERAL_ERROR: int = 1
"""A YtdlpApiError reached the CLI boundary, or a doctor check failed."""

UNEXPECTED_ERROR: int = 2
"""Any other exception reached the CLI boundary."""

KEYBOARD_INTERRUPT: int = 130
"""Interrupted with Ctrl+C (128 + SIGINT)."""
