"""Allow ``python -m ytdlp_api`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m ytdlp_api`` behaves identically to the ``ytdlp-api``
console script.
"""

from __future__ import annotations

from ytdlp_api.cli.app import cli

if __name__ == "__main__":
    cli()
