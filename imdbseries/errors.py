"""
imdbseries.errors
=================
Every failure the scraper can report.

Callers receive either a fully populated result or exactly one of these.
Nothing in the package catches a ``ScrapeError`` to recover from it; fan-outs
re-raise the original exception object, so the class, stage and context a
caller sees are the ones attached where the failure happened.

    ScrapeError
    ├── InvalidInputError          bad id / query, raised before any I/O
    │   └── MissingQueryError
    ├── NotFoundError              source answered 404
    ├── TitleTypeMismatchError     title exists but is not a TV series
    ├── ScrapeConnectionError      transport failure, timeout, other non-2xx
    ├── ExtractionError            fragment missing or malformed
    ├── DataIntegrityError         extracted values contradict each other
    └── NoResultsError             search page had no results list
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import ScrapeContext


class Stage(str, Enum):
    """Pipeline level a failure belongs to."""
    SERIES  = "series"
    SEASON  = "season"
    EPISODE = "episode"
    SEARCH  = "search"


class ScrapeError(Exception):
    """Base class. ``code`` is stable and safe to expose to API clients."""

    code = "111111"

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[Stage] = None,
        context: Optional[ScrapeContext] = None,
        field: Optional[str] = None,
        raw: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage   = stage
        self.context = context
        self.field   = field
        self.raw     = raw

    def located(self, stage: Stage, context: Optional[ScrapeContext]) -> ScrapeError:
        """
        Attach *stage* and *context* unless the error already carries them.
        Returns ``self`` so it can be used as ``raise exc.located(...)``.
        """
        if self.stage is None:
            self.stage = stage
        if self.context is None:
            self.context = context
        return self

    def __str__(self) -> str:
        where = []
        if self.stage is not None:
            where.append(self.stage.value)
        if self.context is not None and str(self.context):
            where.append(str(self.context))
        prefix = f"[{' '.join(where)}] " if where else ""
        return prefix + self.message


class InvalidInputError(ScrapeError):
    code = "000004"


class MissingQueryError(InvalidInputError):
    code = "000006"

    def __init__(self, parameter: str = "query") -> None:
        super().__init__(
            f"Missing the following required parameters: [{parameter}]",
            stage=Stage.SEARCH,
            field=parameter,
        )


class NotFoundError(ScrapeError):
    code = "000005"

    def __init__(self, imdb_id: str, url: str = "") -> None:
        super().__init__(f"TV series {imdb_id} not found", stage=Stage.SERIES)
        self.imdb_id = imdb_id
        self.url     = url


class TitleTypeMismatchError(ScrapeError):
    code = "000001"

    def __init__(self, imdb_id: str, observed_type: str) -> None:
        super().__init__(
            f"The imdb id {imdb_id} given is not a TV Series but a {observed_type}",
            stage=Stage.SERIES,
            field="@type",
            raw=observed_type,
        )
        self.imdb_id       = imdb_id
        self.observed_type = observed_type


class ScrapeConnectionError(ScrapeError):
    code = "000002"

    def __init__(self, message: str, *, url: str = "", status: Optional[int] = None, **kwargs) -> None:
        super().__init__(f"Error while fetching HTML. {message}", **kwargs)
        self.url    = url
        self.status = status


class ExtractionError(ScrapeError):
    """
    A required fragment is missing (``raw is None``) or could not be parsed
    (``raw`` holds the offending text).
    """

    code = "000003"

    def __init__(
        self,
        field: str,
        raw: Optional[str] = None,
        *,
        message: Optional[str] = None,
        stage: Optional[Stage] = None,
        context: Optional[ScrapeContext] = None,
    ) -> None:
        if message is None:
            if raw is None:
                message = f"Could not find {field} element"
            else:
                message = f"Could not parse {field}. Input string was {raw!r}"
        super().__init__(message, stage=stage, context=context, field=field, raw=raw)

    @property
    def missing(self) -> bool:
        return self.raw is None


class DataIntegrityError(ScrapeError):
    code = "000003"


class NoResultsError(ScrapeError):
    code = "000007"

    def __init__(self, query: str) -> None:
        super().__init__(f"Search returned no results for {query!r}", stage=Stage.SEARCH, raw=query)
        self.query = query
