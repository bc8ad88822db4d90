"""
imdbseries._scraper
===================
Orchestration layer: wires together _http and _parse.

    scrape_series ──► extract_seasons ──► extract_season ──► extract_episodes
         ▲                (1 task / season)                    (1 task / row)
    scrape_series_by_name ◄── scrape_search

Every fan-out goes through ``_gather_or_cancel``: the first failing child
cancels its siblings and is re-raised as-is, so a caller never sees a
partial season or episode set.

This module is the internal engine.  End users call the functions in
imdbseries/__init__.py instead.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import Optional, TypeVar

from bs4 import BeautifulSoup

from . import _config
from ._fields import validate_imdb_id
from ._http import Fetcher, search_path, season_path, title_path
from ._log import dbg, c, C, ctx_prefix
from ._parse import (
    find_episode_rows,
    find_search_rows,
    parse_declared_episode_count,
    parse_episode_duration,
    parse_episode_row,
    parse_linked_data,
    parse_run_years,
    parse_search_row,
    parse_season_count,
)
from .errors import (
    InvalidInputError,
    MissingQueryError,
    NoResultsError,
    ScrapeError,
    Stage,
    TitleTypeMismatchError,
)
from .models import Episode, LinkedData, ScrapeContext, SearchResult, Season, Series

T = TypeVar("T")


# ─── Join-or-cancel ───────────────────────────────────────────────────────────

async def _gather_or_cancel(aws: Iterable[Awaitable[T]]) -> list[T]:
    """
    Run *aws* concurrently (started in iteration order) and return their
    results in that order.

    As soon as one fails, every still-running sibling is cancelled and
    awaited, then the failure is re-raised unchanged (never wrapped in an
    ExceptionGroup).  If several fail in the same tick, the one launched
    first wins.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []

    try:
        done, _pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        # Runs on failure and on outer cancellation alike
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    for task in tasks:
        if task in done and not task.cancelled() and task.exception() is not None:
            raise task.exception()  # type: ignore[misc]
    return [task.result() for task in tasks]


# ══════════════════════════════════════════════════════════════════════════════
#  Episodes
# ══════════════════════════════════════════════════════════════════════════════

async def extract_episodes(
    doc: BeautifulSoup,
    declared_count: int,
    ctx: Optional[ScrapeContext] = None,
) -> frozenset[Episode]:
    """
    Parse every row of a season page concurrently on the worker-thread pool.

    *declared_count* is only compared against the result for diagnostics;
    a mismatch is not an error.
    """
    ctx  = ctx or ScrapeContext()
    rows = find_episode_rows(doc, ctx)
    dbg(f"  {ctx_prefix(ctx)}Processing {c(len(rows), C.BWHITE)} episode row(s)")

    episodes = await _gather_or_cancel(
        asyncio.to_thread(parse_episode_row, row, ctx) for row in rows
    )
    result = frozenset(episodes)

    if len(result) != declared_count:
        dbg(c(
            f"  ⚠  {ctx_prefix(ctx)}page declares {declared_count} episode(s), "
            f"extracted {len(result)}",
            C.YELLOW,
        ))
    return result


# ══════════════════════════════════════════════════════════════════════════════
#  Seasons
# ══════════════════════════════════════════════════════════════════════════════

async def extract_season(
    fetcher: Fetcher,
    imdb_id: str,
    season_number: int,
    ctx: Optional[ScrapeContext] = None,
) -> Season:
    """Fetch ``/title/<id>/episodes?season=<n>`` and build that Season."""
    ctx = (ctx or ScrapeContext(imdb_id)).with_season(season_number)

    doc = await fetcher.fetch(season_path(imdb_id, season_number), stage=Stage.SEASON, ctx=ctx)
    declared = parse_declared_episode_count(doc, ctx)
    episodes = await extract_episodes(doc, declared, ctx)

    dbg(f"     {c('✓', C.BGREEN)}  {ctx_prefix(ctx)}Season {c(season_number, C.BYELLOW, C.BOLD)}: "
        f"{c(len(episodes), C.BWHITE, C.BOLD)} episode(s) parsed.")
    return Season(number=season_number, number_episodes=len(episodes), episodes=episodes)


async def extract_seasons(
    fetcher: Fetcher,
    imdb_id: str,
    total_seasons: int,
    ctx: Optional[ScrapeContext] = None,
) -> frozenset[Season]:
    """One concurrent ``extract_season`` per season 1..*total_seasons*."""
    ctx = ctx or ScrapeContext(imdb_id)
    dbg(f"  {ctx_prefix(ctx)}Processing {c(total_seasons, C.BYELLOW)} season(s)")

    seasons = await _gather_or_cancel(
        extract_season(fetcher, imdb_id, number, ctx)
        for number in range(1, total_seasons + 1)
    )
    return frozenset(seasons)


# ══════════════════════════════════════════════════════════════════════════════
#  Series
# ══════════════════════════════════════════════════════════════════════════════

def _resolve_names(linked: LinkedData) -> tuple[str, Optional[str]]:
    """An alternate (localised) name wins; the primary becomes the original."""
    if linked.alternate_name is not None:
        return linked.alternate_name, linked.name
    return linked.name, None


def _validate_title_type(imdb_id: str, linked: LinkedData) -> None:
    if linked.type != _config.TV_SERIES_TYPE:
        dbg(c(f"  ⚠  {imdb_id} is a {linked.type}, not a TV series", C.YELLOW))
        raise TitleTypeMismatchError(imdb_id, linked.type)


async def scrape_series(fetcher: Fetcher, imdb_id: str) -> Series:
    """
    Full scrape for *imdb_id*.

    Series page → linked data, type check, names, run years, duration,
    season count; then every season and every episode concurrently.
    """
    imdb_id = validate_imdb_id(imdb_id)
    ctx = ScrapeContext(imdb_id)
    dbg(f"\n{c('◈  Building series', C.BCYAN, C.BOLD)} {c(imdb_id, C.BYELLOW, C.BOLD)} …")

    try:
        doc = await fetcher.fetch(title_path(imdb_id), stage=Stage.SERIES, ctx=ctx)

        linked = parse_linked_data(doc, ctx)
        _validate_title_type(imdb_id, linked)

        name, original_name  = _resolve_names(linked)
        start_year, end_year = parse_run_years(doc, ctx)
        episode_duration     = parse_episode_duration(doc, ctx)
        number_seasons       = parse_season_count(doc, ctx)

        years = f"{start_year}–{end_year if end_year is not None else ''}"
        dbg(f"  {c(name, C.BWHITE, C.BOLD)}  {c(years, C.DIM)}  "
            f"{c(str(number_seasons) + ' season(s)', C.DIM)}")

        seasons = await extract_seasons(fetcher, imdb_id, number_seasons, ctx)
    except ScrapeError as exc:
        dbg(c(f"  ✗  {exc}", C.RED))
        raise

    rating = linked.aggregate_rating
    return Series(
        imdb_id          = imdb_id,
        name             = name,
        original_name    = original_name,
        summary          = linked.description,
        episode_duration = episode_duration,
        start_year       = start_year,
        end_year         = end_year,
        genres           = linked.genre,
        rating_value     = rating.rating_value if rating else None,
        rating_count     = rating.rating_count if rating else None,
        poster_url       = linked.image,
        number_seasons   = len(seasons),
        seasons          = seasons,
    )


async def scrape_series_by_name(fetcher: Fetcher, name: Optional[str]) -> Series:
    """Resolve *name* through search and scrape the top hit."""
    if name is None or not name.strip():
        raise MissingQueryError("name")
    hits = await scrape_search(fetcher, name, 1)
    if not hits:
        raise NoResultsError(name.strip())
    top = hits[0]
    dbg(f"  {c('↳', C.BCYAN)}  {name!r} → {c(top.imdb_id, C.BYELLOW)} {top.name}")
    return await scrape_series(fetcher, top.imdb_id)


# ══════════════════════════════════════════════════════════════════════════════
#  Search
# ══════════════════════════════════════════════════════════════════════════════

def resolve_limit(limit: Optional[int]) -> int:
    """None → the configured cap; otherwise the request, clamped to the cap."""
    if limit is None:
        return _config.SEARCH_RESULT_LIMIT
    if limit < 1:
        raise InvalidInputError(f"limit must be at least 1, got {limit}", stage=Stage.SEARCH, field="limit", raw=str(limit))
    return min(limit, _config.SEARCH_RESULT_LIMIT)


async def scrape_search(fetcher: Fetcher, query: Optional[str], limit: Optional[int] = None) -> list[SearchResult]:
    """Ordered (most relevant first) TV title hits for *query*."""
    if query is None or not query.strip():
        raise MissingQueryError("query")
    limit = resolve_limit(limit)
    query = query.strip()

    dbg(f"\n{c('◈  Searching', C.BCYAN, C.BOLD)} {c(repr(query), C.BYELLOW)} (limit {limit}) …")
    try:
        doc  = await fetcher.fetch(search_path(query), stage=Stage.SEARCH)
        rows = find_search_rows(doc, query, limit)
        return [parse_search_row(row) for row in rows]
    except ScrapeError as exc:
        dbg(c(f"  ✗  {exc}", C.RED))
        raise
