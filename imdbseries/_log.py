"""
imdbseries._log
===============
Shared terminal colouring and debug-print helpers.

A single module-level flag `_DEBUG` controls whether `dbg()` prints.
Call `set_debug(True)` to enable verbose output from any entry point.

Concurrent tasks never share a "current" title/season/episode: every call
site passes its own ScrapeContext to `ctx_prefix()` instead.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ScrapeContext

_DEBUG: bool = False


def set_debug(enabled: bool) -> None:
    """Enable or disable verbose debug output package-wide."""
    global _DEBUG
    _DEBUG = enabled


def dbg(*args, **kwargs) -> None:
    """Print to stderr only when debug mode is active."""
    if _DEBUG:
        kwargs.setdefault("file", sys.stderr)
        print(*args, **kwargs)


def ctx_prefix(ctx: ScrapeContext | None) -> str:
    """Render a dim ``[tt0903747 S1 E3]`` tag for *ctx* (empty if None)."""
    if ctx is None:
        return ""
    label = str(ctx)
    return c(f"[{label}]", C.DIM) + " " if label else ""


# ─── ANSI colour helpers ──────────────────────────────────────────────────────

class C:
    """ANSI escape code constants."""
    RESET   = "\033[0m"
    BOLD    = "\033[1m"
    DIM     = "\033[2m"
    RED     = "\033[31m"
    YELLOW  = "\033[33m"
    CYAN    = "\033[36m"
    BRED    = "\033[91m"
    BGREEN  = "\033[92m"
    BYELLOW = "\033[93m"
    BCYAN   = "\033[96m"
    BWHITE  = "\033[97m"
    BG_BLUE = "\033[44m"


def c(text, *codes: str) -> str:
    """Wrap *text* in ANSI colour codes."""
    return "".join(codes) + str(text) + C.RESET
