"""
imdbseries.models
=================
Typed dataclasses that represent every piece of data this package returns.

All of them are frozen: each scrape builds fresh instances and nothing is
mutated after construction.

    from imdbseries import series
    s = series("tt0903747")

    s                       → Series
    s.get_season(1)         → Season
    s.get_episode(1, 1)     → Episode
    s.get_episode(1, 1).airdate → Airdate
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Optional


# ─── ScrapeContext ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScrapeContext:
    """
    Diagnostic coordinates of one unit of work.

    Passed down explicitly (never stored globally) so concurrent season and
    episode tasks each report their own position.
    """

    imdb_id: Optional[str] = None
    season:  Optional[int] = None
    episode: Optional[int] = None

    def with_season(self, season: int) -> ScrapeContext:
        return ScrapeContext(self.imdb_id, season, None)

    def with_episode(self, episode: int) -> ScrapeContext:
        return ScrapeContext(self.imdb_id, self.season, episode)

    def __str__(self) -> str:
        parts = []
        if self.imdb_id:
            parts.append(self.imdb_id)
        if self.season is not None:
            parts.append(f"S{self.season}")
        if self.episode is not None:
            parts.append(f"E{self.episode}")
        return " ".join(parts)


# ─── Airdate ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Airdate:
    """
    A broadcast date whose precision depends on what the page shows:
    year only, month + year, or a full day.
    """

    year:  int
    month: Optional[int] = None
    day:   Optional[int] = None

    def __post_init__(self) -> None:
        if self.day is not None and self.month is None:
            raise ValueError("Airdate with a day must also have a month")
        # Validates month/day ranges
        date(self.year, self.month or 1, self.day or 1)

    @property
    def granularity(self) -> str:
        if self.day is not None:
            return "day"
        if self.month is not None:
            return "month"
        return "year"

    def to_date(self) -> Optional[date]:
        """Full-precision ``date``, or None for partial airdates."""
        if self.day is None:
            return None
        return date(self.year, self.month, self.day)  # type: ignore[arg-type]

    def isoformat(self) -> str:
        if self.day is not None:
            return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
        if self.month is not None:
            return f"{self.year:04d}-{self.month:02d}"
        return f"{self.year:04d}"

    def __str__(self) -> str:
        return self.isoformat()


# ─── Episode ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Episode:
    """A single episode of a TV series."""

    imdb_id: str                        # "tt0959621"
    number:  int                        # in-season episode number
    name:    str                        # "Pilot"

    airdate:      Optional[Airdate] = None
    rating_value: Optional[float]   = None   # 9.0
    rating_count: Optional[int]     = None   # 37_412
    summary:      Optional[str]     = None   # None when the page shows its placeholder

    def __post_init__(self) -> None:
        if (self.rating_value is None) != (self.rating_count is None):
            raise ValueError("rating_value and rating_count must be both set or both None")

    def __str__(self) -> str:
        rating = f"{self.rating_value}/10 ({self.rating_count})" if self.rating_value is not None else "N/A"
        return f"E{self.number} · {self.name}  [{rating}]"

    def to_dict(self) -> dict:
        return {
            "imdb_id":      self.imdb_id,
            "number":       self.number,
            "name":         self.name,
            "airdate":      self.airdate.isoformat() if self.airdate else None,
            "rating_value": self.rating_value,
            "rating_count": self.rating_count,
            "summary":      self.summary,
        }


# ─── Season ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Season:
    """
    One season. ``number`` is assigned by the caller (1..N), and
    ``number_episodes`` is the count that was actually extracted.
    """

    number:          int
    number_episodes: int
    episodes:        frozenset[Episode] = field(default_factory=frozenset)

    def sorted_episodes(self) -> list[Episode]:
        return sorted(self.episodes, key=lambda ep: ep.number)

    def __str__(self) -> str:
        return f"Season {self.number} — {self.number_episodes} episodes"

    def to_dict(self) -> dict:
        return {
            "number":          self.number,
            "number_episodes": self.number_episodes,
            "episodes":        [ep.to_dict() for ep in self.sorted_episodes()],
        }


# ─── Series ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Series:
    """
    Everything scraped for a single TV series.

    Convenience helpers
    -------------------
    .sorted_seasons()       → seasons ordered by number
    .all_episodes()         → flat list of every Episode in season order
    .get_season(n)          → a Season or None
    .get_episode(s, e)      → an Episode or None
    .to_dict()              → plain dict (JSON-serialisable)
    .save(path)             → write JSON to disk
    """

    imdb_id:          str
    name:             str
    start_year:       int
    number_seasons:   int
    seasons:          frozenset[Season] = field(default_factory=frozenset)

    original_name:    Optional[str]       = None
    summary:          Optional[str]       = None
    episode_duration: Optional[timedelta] = None
    end_year:         Optional[int]       = None   # None → still running
    genres:           frozenset[str]      = field(default_factory=frozenset)
    rating_value:     Optional[float]     = None
    rating_count:     Optional[int]       = None
    poster_url:       Optional[str]       = None

    def __post_init__(self) -> None:
        if self.number_seasons != len(self.seasons):
            raise ValueError(
                f"number_seasons={self.number_seasons} but {len(self.seasons)} seasons given"
            )
        if self.end_year is not None and self.start_year > self.end_year:
            raise ValueError(f"start_year {self.start_year} is after end_year {self.end_year}")

    # ── Convenience ───────────────────────────────────────────────────────────

    def sorted_seasons(self) -> list[Season]:
        return sorted(self.seasons, key=lambda s: s.number)

    def all_episodes(self) -> list[Episode]:
        """Return every episode in season order."""
        result: list[Episode] = []
        for season in self.sorted_seasons():
            result.extend(season.sorted_episodes())
        return result

    def get_season(self, number: int) -> Optional[Season]:
        for season in self.seasons:
            if season.number == number:
                return season
        return None

    def get_episode(self, season: int, episode: int) -> Optional[Episode]:
        """Return the Episode for S<season>E<episode>, or None if not found."""
        found = self.get_season(season)
        if found is None:
            return None
        for ep in found.episodes:
            if ep.number == episode:
                return ep
        return None

    def episode_count(self) -> int:
        return sum(s.number_episodes for s in self.seasons)

    # ── Serialisation ─────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        duration = self.episode_duration
        return {
            "imdb_id":          self.imdb_id,
            "name":             self.name,
            "original_name":    self.original_name,
            "summary":          self.summary,
            "episode_duration": int(duration.total_seconds() // 60) if duration is not None else None,
            "start_year":       self.start_year,
            "end_year":         self.end_year,
            "genres":           sorted(self.genres),
            "rating_value":     self.rating_value,
            "rating_count":     self.rating_count,
            "poster_url":       self.poster_url,
            "number_seasons":   self.number_seasons,
            "seasons":          [s.to_dict() for s in self.sorted_seasons()],
        }

    def save(self, path: str | Path) -> Path:
        """Serialise to JSON and write to *path*. Returns the Path."""
        p = Path(path)
        p.write_text(json.dumps(self.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        return p

    def __str__(self) -> str:
        years = f"{self.start_year}–{self.end_year if self.end_year is not None else ''}"
        return (
            f"{self.name}  [{self.imdb_id}]  {years}  "
            f"— {self.number_seasons} seasons, {self.episode_count()} episodes"
        )


# ─── SearchResult ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SearchResult:
    imdb_id: str
    name:    str

    def __str__(self) -> str:
        return f"{self.imdb_id}  {self.name}"

    def to_dict(self) -> dict:
        return {"imdb_id": self.imdb_id, "name": self.name}


# ─── LinkedData ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AggregateRating:
    rating_value: float
    rating_count: int


@dataclass(frozen=True)
class LinkedData:
    """
    Fixed schema for the ``application/ld+json`` block of a title page.

    Only the keys listed here are read; every other key in the block is
    dropped in :meth:`from_dict`.
    """

    type:             str
    name:             str
    alternate_name:   Optional[str]             = None
    image:            Optional[str]             = None
    description:      Optional[str]             = None
    aggregate_rating: Optional[AggregateRating] = None
    genre:            frozenset[str]            = field(default_factory=frozenset)

    @classmethod
    def from_json(cls, text: str) -> LinkedData:
        """Parse the raw script body. Raises ValueError on bad JSON or schema."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LinkedData:
        type_  = _required_str(data, "@type")
        name   = _required_str(data, "name")

        genre_raw = data.get("genre") or []
        if isinstance(genre_raw, str):
            genre_raw = [genre_raw]
        if not isinstance(genre_raw, list) or not all(isinstance(g, str) for g in genre_raw):
            raise ValueError("genre must be a string or a list of strings")

        rating = None
        rating_raw = data.get("aggregateRating")
        if rating_raw is not None:
            if not isinstance(rating_raw, dict):
                raise ValueError("aggregateRating must be an object")
            try:
                rating = AggregateRating(
                    rating_value=float(rating_raw["ratingValue"]),
                    rating_count=int(rating_raw["ratingCount"]),
                )
            except (KeyError, TypeError) as exc:
                raise ValueError(f"aggregateRating is incomplete: {exc}") from exc

        return cls(
            type             = type_,
            name             = name,
            alternate_name   = _optional_str(data, "alternateName"),
            image            = _optional_str(data, "image"),
            description      = _optional_str(data, "description"),
            aggregate_rating = rating,
            genre            = frozenset(genre_raw),
        )


def _required_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string, got {value!r}")
    return value


def _optional_str(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string, got {value!r}")
    return value
