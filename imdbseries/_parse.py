"""
imdbseries._parse
=================
All BeautifulSoup reading logic.  Synchronous: every function here works on
an already-fetched document and never touches the network.

Series page     parse_linked_data, parse_run_years, parse_episode_duration,
                parse_season_count
Season page     parse_declared_episode_count, find_episode_rows,
                parse_episode_row
Search page     find_search_rows, parse_search_row

Each reader wraps its field parsers in ``_located(stage, ctx)`` so that an
error carries the pipeline stage and the title/season/episode it came from.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import timedelta
from typing import Optional

from bs4 import BeautifulSoup, Tag

from ._fields import (
    parse_airdate,
    parse_count,
    parse_duration,
    parse_int,
    parse_rating_value,
    parse_season_count as _parse_season_count_text,
    parse_title_id,
    parse_year_range,
)
from .errors import DataIntegrityError, ExtractionError, NoResultsError, ScrapeError, Stage
from .models import Episode, LinkedData, ScrapeContext, SearchResult


@contextmanager
def _located(stage: Stage, ctx: Optional[ScrapeContext]) -> Iterator[None]:
    try:
        yield
    except ScrapeError as exc:
        exc.located(stage, ctx)
        raise


def _child_tags(tag: Tag) -> list[Tag]:
    return [child for child in tag.children if isinstance(child, Tag)]


def _text(node: Tag) -> str:
    """All text under *node* with runs of whitespace collapsed to one space."""
    return " ".join(node.get_text().split())


# ══════════════════════════════════════════════════════════════════════════════
#  Series page
# ══════════════════════════════════════════════════════════════════════════════

def parse_linked_data(soup: BeautifulSoup, ctx: Optional[ScrapeContext] = None) -> LinkedData:
    """Deserialize the ``<script type="application/ld+json">`` block."""
    with _located(Stage.SERIES, ctx):
        node = soup.find("script", attrs={"type": re.compile(r"^application/ld\+json")})
        if node is None:
            raise ExtractionError("linkedData")

        text = node.string if node.string is not None else node.get_text()
        try:
            return LinkedData.from_json(text)
        except ValueError as exc:
            raise ExtractionError(
                "linkedData",
                text,
                message=f"An error occurred while deserializing the linkedData element. {exc}",
            ) from exc


def parse_run_years(soup: BeautifulSoup, ctx: Optional[ScrapeContext] = None) -> tuple[int, Optional[int]]:
    """
    Start/end year from the under-title list::

        <ul data-testid="hero-title-block__metadata">
          <li>TV Series</li>
          <li><a>2008–2013</a></li>      ← second item, last element
          ...
    """
    with _located(Stage.SERIES, ctx):
        block = soup.find(attrs={"data-testid": re.compile(r"^hero-title-block__metadata")})
        if block is None:
            raise ExtractionError("underTitle")

        items = _child_tags(block)
        if len(items) < 2:
            raise ExtractionError("runtime")

        inner = _child_tags(items[1])
        node  = inner[-1] if inner else items[1]
        return parse_year_range(node.get_text(strip=True), "runtime")


def parse_episode_duration(soup: BeautifulSoup, ctx: Optional[ScrapeContext] = None) -> Optional[timedelta]:
    """
    Episode runtime from the tech-specs list.  A page without the runtime
    item has no duration; a runtime item with bad text is an error.
    """
    with _located(Stage.SERIES, ctx):
        node = soup.find(attrs={"data-testid": re.compile(r"^title-techspec_runtime")})
        if node is None:
            return None

        items = _child_tags(node)
        if len(items) < 2:
            raise ExtractionError("episodeDuration")
        return parse_duration(items[1].get_text(" ", strip=True), "episodeDuration")


# ── Season count: one strategy per known page layout ──────────────────────────

def _season_count_from_selector(soup: BeautifulSoup) -> Optional[str]:
    """Multi-season layout: ``<label for="browse-episodes-season">2 Seasons</label>``."""
    node = soup.find(attrs={"for": re.compile(r"^browse-episodes-season")})
    return node.get_text(" ", strip=True) if node is not None else None


def _season_count_from_single_link(soup: BeautifulSoup) -> Optional[str]:
    """Single-season layout: a ``?season=1`` link inside the browse container."""
    container = soup.find(attrs={"class": re.compile(r"^BrowseEpisodes__BrowseLinksContainer")})
    if container is None:
        return None
    links = container.find_all(href=re.compile(r"season"))
    if not links:
        return None
    return " ".join(a.get_text(" ", strip=True) for a in links)


SEASON_COUNT_STRATEGIES: tuple[Callable[[BeautifulSoup], Optional[str]], ...] = (
    _season_count_from_selector,
    _season_count_from_single_link,
)


def parse_season_count(soup: BeautifulSoup, ctx: Optional[ScrapeContext] = None) -> int:
    """Try each layout in ``SEASON_COUNT_STRATEGIES``; the first hit wins."""
    with _located(Stage.SERIES, ctx):
        for strategy in SEASON_COUNT_STRATEGIES:
            text = strategy(soup)
            if text is not None:
                return _parse_season_count_text(text, "numberSeasons")
        raise ExtractionError("numberSeasons")


# ══════════════════════════════════════════════════════════════════════════════
#  Season page
# ══════════════════════════════════════════════════════════════════════════════

def parse_declared_episode_count(soup: BeautifulSoup, ctx: Optional[ScrapeContext] = None) -> int:
    with _located(Stage.SEASON, ctx):
        node = soup.find(attrs={"itemprop": "numberofEpisodes"})
        content = node.get("content") if node is not None else None
        return parse_int(content, "numberEpisodes")


def find_episode_rows(soup: BeautifulSoup, ctx: Optional[ScrapeContext] = None) -> list[Tag]:
    """Child rows of ``div.list.detail.eplist``, in page order."""
    with _located(Stage.EPISODE, ctx):
        container = soup.select_one("div.list.detail.eplist")
        if container is None:
            raise ExtractionError("episodeList")
        return _child_tags(container)


def _episode_number(row: Tag) -> int:
    node = row.find(attrs={"itemprop": "episodeNumber"})
    content = node.get("content") if node is not None else None
    return parse_int(content, "episodeNumber")


def _present_text(node: Optional[Tag]) -> Optional[str]:
    if node is None:
        return None
    text = node.get_text(strip=True)
    return text or None


def _rating(row: Tag) -> tuple[Optional[float], Optional[int]]:
    value_text = _present_text(row.find(class_="ipl-rating-star__rating"))
    count_text = _present_text(row.find(class_="ipl-rating-star__total-votes"))

    if value_text is None and count_text is None:
        return None, None
    if value_text is None:
        raise DataIntegrityError("Rating count exists but no rating value", field="ratingValue", raw=count_text)
    if count_text is None:
        raise DataIntegrityError("Rating value exists but no rating count", field="ratingCount", raw=value_text)

    return parse_rating_value(value_text, "ratingValue"), parse_count(count_text, "ratingCount")


def _summary(row: Tag) -> Optional[str]:
    node = row.find(class_="item_description")
    if node is None:
        raise ExtractionError("summaryText")
    # A link inside means the page shows its "add a plot" placeholder
    if node.find("a") is not None:
        return None
    return _text(node)


def parse_episode_row(row: Tag, ctx: Optional[ScrapeContext] = None) -> Episode:
    """
    Build one Episode from an ``eplist`` row.

    Required: episode number, name link (non-blank name, ``/title/<id>/``
    href), airdate element, summary element.  Optional: airdate text, rating
    (value and count together or not at all).
    """
    ctx = ctx or ScrapeContext()
    with _located(Stage.EPISODE, ctx):
        number = _episode_number(row)

    ctx = ctx.with_episode(number)
    with _located(Stage.EPISODE, ctx):
        link = row.find(attrs={"itemprop": "name"})
        if link is None:
            raise ExtractionError("nameAndUrl")

        name = _text(link)
        if not name:
            raise ExtractionError("episodeName", name, message="Episode name text was blank")

        imdb_id = parse_title_id(link.get("href"), "episodeImdbId")

        airdate_node = row.find(class_="airdate")
        if airdate_node is None:
            raise ExtractionError("airdate")
        airdate = parse_airdate(airdate_node.get_text(), "airdate")

        rating_value, rating_count = _rating(row)

        return Episode(
            imdb_id      = imdb_id,
            number       = number,
            name         = name,
            airdate      = airdate,
            rating_value = rating_value,
            rating_count = rating_count,
            summary      = _summary(row),
        )


# ══════════════════════════════════════════════════════════════════════════════
#  Search page
# ══════════════════════════════════════════════════════════════════════════════

def find_search_rows(soup: BeautifulSoup, query: str, limit: int) -> list[Tag]:
    """First *limit* rows of ``.lister-list``; NoResultsError if there are none."""
    container = soup.find(class_="lister-list")
    if container is None:
        raise NoResultsError(query)
    rows = _child_tags(container)
    if not rows:
        raise NoResultsError(query)
    return rows[:limit]


def parse_search_row(row: Tag, ctx: Optional[ScrapeContext] = None) -> SearchResult:
    with _located(Stage.SEARCH, ctx):
        header = row.find(class_="lister-item-header")
        if header is None:
            raise ExtractionError("searchResultHeader")

        link = header.find("a")
        if link is None:
            raise ExtractionError("searchResultALink")

        imdb_id = parse_title_id(link.get("href"), "searchResultImdbId")

        name = _text(link)
        if not name:
            raise ExtractionError("searchResultName", name)

        return SearchResult(imdb_id=imdb_id, name=name)
