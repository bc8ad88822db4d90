"""
imdbseries
==========
Public API for the IMDbSeries scraper package.

Quick start
-----------
    from imdbseries import series, series_by_name, search

    # ── Full series ───────────────────────────────────────────────────────────
    s = series("tt0903747")          # series page + every season + every episode
    print(s)                         # Breaking Bad  [tt0903747]  2008–2013 — 5 seasons, 62 episodes

    s.name                           # "Breaking Bad"
    s.episode_duration               # timedelta(minutes=49)
    s.get_episode(1, 1).airdate      # Airdate(year=2008, month=1, day=20)
    s.save("breaking_bad.json")      # dump to JSON

    # ── By name (top search hit) ──────────────────────────────────────────────
    s = series_by_name("Breaking Bad")

    # ── Search only ───────────────────────────────────────────────────────────
    for hit in search("Breaking", limit=5):
        print(hit.imdb_id, hit.name)

    # ── Inside an event loop ──────────────────────────────────────────────────
    s = await extract_series_by_id("tt0903747")

Every call performs a fresh scrape.  It returns a fully populated result or
raises exactly one ``imdbseries.errors.ScrapeError`` subclass.

Available symbols
-----------------
Functions
    series(imdb_id, ...)                     → Series
    series_by_name(name, ...)                → Series
    search(query, limit=None, ...)           → list[SearchResult]
    extract_series_by_id / extract_series_by_name / search_series   (async)

Dataclasses
    Series, Season, Episode, Airdate, SearchResult

Debug
    set_debug(True)          enable verbose progress output on stderr
"""

from __future__ import annotations

import asyncio
from typing import Optional
from importlib.metadata import version as _pkg_version, PackageNotFoundError as _PNF

try:
    __version__ = _pkg_version("IMDbSeries")
except _PNF:
    __version__ = "0.0.0.dev"

# ── Re-export public dataclasses and errors ───────────────────────────────────
from .models import Airdate, Episode, Season, Series, SearchResult
from .errors import (
    DataIntegrityError,
    ExtractionError,
    InvalidInputError,
    MissingQueryError,
    NoResultsError,
    NotFoundError,
    ScrapeConnectionError,
    ScrapeError,
    Stage,
    TitleTypeMismatchError,
)

# ── Internal engine ───────────────────────────────────────────────────────────
from . import _config
from ._fields import validate_imdb_id
from ._http import Fetcher
from ._scraper import scrape_search, scrape_series, scrape_series_by_name
from ._log import set_debug

__all__ = [
    # Public functions
    "series",
    "series_by_name",
    "search",
    "extract_series_by_id",
    "extract_series_by_name",
    "search_series",
    "set_debug",
    # Dataclasses
    "Series",
    "Season",
    "Episode",
    "Airdate",
    "SearchResult",
    # Errors
    "ScrapeError",
    "InvalidInputError",
    "MissingQueryError",
    "NotFoundError",
    "TitleTypeMismatchError",
    "ScrapeConnectionError",
    "ExtractionError",
    "DataIntegrityError",
    "NoResultsError",
    "Stage",
]


# ─────────────────────────────────────────────────────────────────────────────
#  Async entry points
# ─────────────────────────────────────────────────────────────────────────────

async def extract_series_by_id(
    imdb_id: str,
    *,
    pool_size: int = _config.DEFAULT_POOL_SIZE,
    timeout: float = _config.DEFAULT_TIMEOUT,
    base_url: str = _config.BASE_URL,
) -> Series:
    """
    Scrape a TV series and all of its seasons and episodes.

    Parameters
    ----------
    imdb_id:
        IMDb title id, ``tt`` followed by 7 or 8 digits.
    pool_size:
        Max concurrent page fetches.
    timeout:
        Per-fetch timeout in seconds.
    base_url:
        Site root; override for mirrors or tests.

    Raises
    ------
    InvalidInputError
        *imdb_id* is malformed (no request is made).
    NotFoundError, TitleTypeMismatchError, ScrapeConnectionError,
    ExtractionError, DataIntegrityError
        See :mod:`imdbseries.errors`.
    """
    imdb_id = validate_imdb_id(imdb_id)
    async with Fetcher(base_url, pool_size=pool_size, timeout=timeout) as fetcher:
        return await scrape_series(fetcher, imdb_id)


async def extract_series_by_name(
    name: str,
    *,
    pool_size: int = _config.DEFAULT_POOL_SIZE,
    timeout: float = _config.DEFAULT_TIMEOUT,
    base_url: str = _config.BASE_URL,
) -> Series:
    """Search for *name* and scrape the most relevant TV result."""
    if name is None or not name.strip():
        raise MissingQueryError("name")
    async with Fetcher(base_url, pool_size=pool_size, timeout=timeout) as fetcher:
        return await scrape_series_by_name(fetcher, name)


async def search_series(
    query: str,
    limit: Optional[int] = None,
    *,
    timeout: float = _config.DEFAULT_TIMEOUT,
    base_url: str = _config.BASE_URL,
) -> list[SearchResult]:
    """
    TV titles matching *query*, most relevant first.

    *limit* is capped at ``IMDBSERIES_SEARCH_LIMIT`` (default 10) and
    defaults to that cap.
    """
    if query is None or not query.strip():
        raise MissingQueryError("query")
    async with Fetcher(base_url, pool_size=1, timeout=timeout) as fetcher:
        return await scrape_search(fetcher, query, limit)


# ─────────────────────────────────────────────────────────────────────────────
#  Blocking wrappers
# ─────────────────────────────────────────────────────────────────────────────

def series(imdb_id: str, **kwargs) -> Series:
    """
    Blocking form of :func:`extract_series_by_id`.

    Examples
    --------
        s = series("tt0903747")
        s = series("tt0903747", pool_size=16, timeout=20)
    """
    return asyncio.run(extract_series_by_id(imdb_id, **kwargs))


def series_by_name(name: str, **kwargs) -> Series:
    """Blocking form of :func:`extract_series_by_name`."""
    return asyncio.run(extract_series_by_name(name, **kwargs))


def search(query: str, limit: Optional[int] = None, **kwargs) -> list[SearchResult]:
    """
    Blocking form of :func:`search_series`.

    Examples
    --------
        hits = search("Dark", limit=3)
        print([h.imdb_id for h in hits])
    """
    return asyncio.run(search_series(query, limit, **kwargs))
