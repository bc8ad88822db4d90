"""
imdbseries._config
==================
Process-wide settings, read once from the environment at import time.

A numeric variable that is malformed or below its minimum falls back to the
default, so a bad environment never stops the package from importing.
"""

from __future__ import annotations

from os import environ
from typing import Callable, TypeVar

from ._log import dbg, c, C

N = TypeVar("N", int, float)


def _env_number(name: str, default: N, cast: Callable[[str], N], minimum: N) -> N:
    raw = environ.get(name)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        dbg(c(f"  ⚠  {name}={raw!r} is not a number, using {default}", C.YELLOW))
        return default
    if value < minimum:
        dbg(c(f"  ⚠  {name}={raw!r} is below {minimum}, using {default}", C.YELLOW))
        return default
    return value


# === Source ===
BASE_URL = environ.get("IMDBSERIES_BASE_URL", "https://www.imdb.com").rstrip("/")

# === Transport ===
DEFAULT_TIMEOUT   = _env_number("IMDBSERIES_TIMEOUT", 10.0, float, 0.001)   # seconds, per fetch
DEFAULT_POOL_SIZE = _env_number("IMDBSERIES_POOL_SIZE", 8, int, 1)          # max in-flight fetches

# === Search ===
SEARCH_RESULT_LIMIT = _env_number("IMDBSERIES_SEARCH_LIMIT", 10, int, 1)

# === Title validation ===
TV_SERIES_TYPE = "TVSeries"
