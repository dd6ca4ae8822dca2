"""CLI layer — argument parsing, diagnostics, and the process error boundary.

This package is the outermost layer of the application.  It may import
from ``web``, ``core``, ``infra`` and ``config``, but no other layer may
import from ``cli``.
"""
