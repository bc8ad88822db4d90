"""
imdbseries._display
===================
Rich terminal output helpers.

`print_series(series)`        — pretty-prints a full Series to stdout.
`print_episode(episode)`      — prints a single Episode card.
`print_search_results(hits)`  — prints a numbered list of search hits.

These are purely cosmetic; no logic lives here.
"""

from __future__ import annotations

import re
from typing import Optional

from .models import Episode, SearchResult, Series
from ._log import c, C


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _stars(value: Optional[float], out_of: int = 10) -> str:
    """Convert 7.6 → coloured star bar."""
    if value is None:
        return c("─── no rating ───", C.DIM)
    filled = round(value)
    empty  = out_of - filled
    color  = C.BGREEN if value >= 8 else (C.BYELLOW if value >= 6 else C.RED)
    return c("★" * filled, color) + c("☆" * empty, C.DIM)


def _wrap(text: str, width: int = 64) -> list[str]:
    """Word-wrap *text* to lines of at most *width* chars."""
    if not text:
        return [""]
    words, lines, cur = text.split(), [], ""
    for w in words:
        if cur and len(cur) + 1 + len(w) > width:
            lines.append(cur)
            cur = w
        else:
            cur = (cur + " " + w).strip()
    if cur:
        lines.append(cur)
    return lines or [""]


def _box_row(content: str, width: int, color=C.BCYAN) -> None:
    """Print a single ║ … ║ row, padding content to *width*."""
    raw_len = len(re.sub(r"\033\[[^m]*m", "", content))
    pad = width - 2 - raw_len
    print(c("║", color) + content + " " * max(pad, 0) + c("║", color))


def _minutes(series: Series) -> Optional[str]:
    if series.episode_duration is None:
        return None
    total = int(series.episode_duration.total_seconds() // 60)
    hours, minutes = divmod(total, 60)
    return f"{hours}h {minutes}m" if hours else f"{minutes}m"


# ─── Public helpers ───────────────────────────────────────────────────────────

def print_episode(ep: Episode) -> None:
    """Print a compact summary card for a single Episode."""
    W = 72
    code = f"E{ep.number}"
    print(c("  │ ", C.BCYAN) + c(f"{code:<6}", C.BCYAN, C.BOLD) + " " + c(ep.name, C.BWHITE, C.BOLD)
          + "  " + c(ep.airdate.isoformat() if ep.airdate else "no airdate", C.DIM))

    rating = ""
    if ep.rating_value is not None:
        rating = c(f"{ep.rating_value}/10", C.BYELLOW, C.BOLD) + " " + c(f"({ep.rating_count:,})", C.DIM)
    print(c("  │   ", C.BCYAN) + _stars(ep.rating_value) + "  " + rating)

    # Summary (max 2 wrapped lines)
    summary = ep.summary or ""
    lines   = _wrap(summary, width=W - 8)
    for i, line in enumerate(lines[:2]):
        suffix = c(" …", C.DIM) if (i == 1 and len(lines) > 2) else ""
        print(c("  │   ", C.BCYAN) + c(line, C.DIM) + suffix)

    print(c("  │", C.BCYAN))


def print_series(series: Series) -> None:
    """Pretty-print a full Series with header box and per-season blocks."""
    W = 72

    # ── Header box ────────────────────────────────────────────────────────────
    print()
    print(c("╔" + "═" * (W - 2) + "╗", C.BCYAN, C.BOLD))
    _box_row(c(f"  {series.name}  ·  {series.imdb_id}", C.BWHITE, C.BOLD), W)
    if series.original_name:
        _box_row(c(f"  ({series.original_name})", C.DIM), W)

    end   = series.end_year if series.end_year is not None else ""
    parts = [f"{series.start_year}–{end}"]
    if (duration := _minutes(series)):
        parts.append(duration)
    _box_row(c("  " + "  ·  ".join(parts), C.DIM), W)

    if series.rating_value is not None:
        votes = f"  ({series.rating_count:,} votes)" if series.rating_count is not None else ""
        _box_row(c("  ★  ", C.BYELLOW) + c(f"{series.rating_value}/10{votes}", C.BYELLOW), W)

    if series.genres:
        genre_str = "  " + " · ".join(sorted(series.genres))
        if len(genre_str) > W - 2:
            genre_str = genre_str[:W - 5] + "..."
        _box_row(c(genre_str, C.BCYAN), W)

    _box_row(
        "  " + f"Seasons: {c(series.number_seasons, C.BYELLOW, C.BOLD)}   "
               f"Episodes: {c(series.episode_count(), C.BYELLOW, C.BOLD)}",
        W,
    )
    print(c("╚" + "═" * (W - 2) + "╝", C.BCYAN, C.BOLD))

    # ── Season blocks ─────────────────────────────────────────────────────────
    for season in series.sorted_seasons():
        print()
        s_label = f" SEASON {season.number} "
        s_ep    = f" {season.number_episodes} episodes "
        pad     = W - 4 - len(s_label) - len(s_ep)
        print(
            c("  ┌", C.BCYAN) +
            c(s_label, C.BG_BLUE, C.BWHITE, C.BOLD) +
            c("─" * max(pad, 0), C.BCYAN) +
            c(s_ep, C.DIM) +
            c("┐", C.BCYAN)
        )
        for ep in season.sorted_episodes():
            print_episode(ep)
        print(c("  └" + "─" * (W - 4) + "┘", C.BCYAN))

    print()


def print_search_results(results: list[SearchResult]) -> None:
    print()
    for i, hit in enumerate(results, 1):
        print(f"  {c(f'{i:>2}.', C.DIM)} {c(hit.imdb_id, C.BYELLOW)}  {c(hit.name, C.BWHITE, C.BOLD)}")
    print()
