"""
imdbseries._fields
==================
Pure text → value parsers.

Every parser takes the raw text (possibly None) plus the field name it is
reading, and either returns a typed value or raises ``ExtractionError``
naming the field and the offending input.  No I/O, no logging, no state:
the same input always gives the same answer.

Parsers never attach a pipeline stage; the page parsers in ``_parse`` do
that at the point where they read the fragment.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Optional

from .errors import ExtractionError, InvalidInputError
from .models import Airdate

_IMDB_ID    = re.compile(r"tt\d{7,8}")
_TITLE_PATH = re.compile(r"/title/([a-zA-Z0-9]+)/.*", re.S)

_SINGLE_YEAR = re.compile(r"(\d{4})")
_YEAR_RANGE  = re.compile(r"(\d{4})\s*–\s*(\d{4})?")

_DURATION = re.compile(
    r"(?:(?P<hours>\d+)h(?:ours?|rs?)?)?"
    r"(?:(?P<minutes>\d+)m(?:in(?:ute)?s?)?)?"
)

_SEASON_COUNT = re.compile(r"(\d+)\s+seasons?")

# Most granular first; the first format that parses wins.
_AIRDATE_FORMATS: tuple[tuple[str, str], ...] = (
    ("%d %b. %Y", "day"),      # 3 Oct. 2017
    ("%d %b %Y",  "day"),      # 3 May 2017
    ("%d %B %Y",  "day"),      # 3 October 2017
    ("%b. %Y",    "month"),    # Oct. 2017
    ("%b %Y",     "month"),    # Oct 2017
    ("%B %Y",     "month"),    # October 2017
    ("%Y",        "year"),     # 2017
)


def _require_text(raw: Optional[str], field: str) -> str:
    if raw is None:
        raise ExtractionError(field)
    text = raw.strip()
    if not text:
        raise ExtractionError(field, raw)
    return text


# ─── Identifiers ──────────────────────────────────────────────────────────────

def validate_imdb_id(imdb_id: Optional[str]) -> str:
    """Check the lexical shape ``tt`` + 7–8 digits. Raises InvalidInputError."""
    if imdb_id is None or not _IMDB_ID.fullmatch(imdb_id.strip()):
        raise InvalidInputError(
            f"{imdb_id!r} is not a valid IMDb id",
            field="imdbId",
            raw=imdb_id,
        )
    return imdb_id.strip()


def parse_title_id(href: Optional[str], field: str) -> str:
    """``/title/tt0959621/?ref_=ttep_ep1`` → ``tt0959621``."""
    if href is None:
        raise ExtractionError(field)
    m = _TITLE_PATH.fullmatch(href.strip())
    if not m:
        raise ExtractionError(field, href)
    return m.group(1)


# ─── Year range ───────────────────────────────────────────────────────────────

def parse_year_range(raw: Optional[str], field: str = "runtime") -> tuple[int, Optional[int]]:
    """
    ``"2014"``       → (2014, 2014)   ended the same year
    ``"2014–2019"``  → (2014, 2019)
    ``"2014–"``      → (2014, None)   still running
    """
    text = _require_text(raw, field)

    single = _SINGLE_YEAR.fullmatch(text)
    if single:
        year = int(single.group(1))
        return year, year

    ranged = _YEAR_RANGE.fullmatch(text)
    if not ranged:
        raise ExtractionError(field, raw)

    start = int(ranged.group(1))
    end   = int(ranged.group(2)) if ranged.group(2) else None
    if end is not None and end < start:
        raise ExtractionError(field, raw, message=f"Could not parse {field}. End year precedes start year in {raw!r}")
    return start, end


# ─── Duration ─────────────────────────────────────────────────────────────────

def parse_duration(raw: Optional[str], field: str = "episodeDuration") -> timedelta:
    """
    ``"1 hour 23 minutes"`` / ``"1h 23m"`` → 83 min, ``"52m"`` → 52 min,
    ``"2 hours"`` → 120 min.  Whitespace is ignored.
    """
    if raw is None:
        raise ExtractionError(field)
    text = re.sub(r"\s+", "", raw.lower())
    m = _DURATION.fullmatch(text)
    if not text or not m or (m.group("hours") is None and m.group("minutes") is None):
        raise ExtractionError(field, raw)

    hours   = int(m.group("hours") or 0)
    minutes = int(m.group("minutes") or 0)
    return timedelta(hours=hours, minutes=minutes)


# ─── Airdate ──────────────────────────────────────────────────────────────────

def parse_airdate(raw: Optional[str], field: str = "airdate") -> Optional[Airdate]:
    """
    Blank → None.  Otherwise try each format in ``_AIRDATE_FORMATS``;
    text that matches none of them is an error, not a missing value.
    """
    if raw is None or not raw.strip():
        return None
    text = " ".join(raw.split())

    for fmt, granularity in _AIRDATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if granularity == "day":
            return Airdate(parsed.year, parsed.month, parsed.day)
        if granularity == "month":
            return Airdate(parsed.year, parsed.month)
        return Airdate(parsed.year)

    raise ExtractionError(field, raw)


# ─── Numbers ──────────────────────────────────────────────────────────────────

def parse_count(raw: Optional[str], field: str) -> int:
    """``"(1,234)"`` → 1234."""
    text = _require_text(raw, field)
    text = text.removeprefix("(").removesuffix(")").replace(",", "").strip()
    if not text.isdigit():
        raise ExtractionError(field, raw)
    return int(text)


def parse_int(raw: Optional[str], field: str) -> int:
    text = _require_text(raw, field)
    try:
        return int(text)
    except ValueError:
        raise ExtractionError(field, raw) from None


def parse_rating_value(raw: Optional[str], field: str = "ratingValue") -> float:
    text = _require_text(raw, field)
    try:
        value = float(text)
    except ValueError:
        raise ExtractionError(field, raw) from None
    if not 0 <= value <= 10:
        raise ExtractionError(field, raw)
    return value


def parse_season_count(raw: Optional[str], field: str = "numberSeasons") -> int:
    """``"2 Seasons"`` / ``"1 season"`` → int."""
    text = _require_text(raw, field)
    m = _SEASON_COUNT.fullmatch(text.lower())
    if not m:
        raise ExtractionError(field, raw)
    return int(m.group(1))
