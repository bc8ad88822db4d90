"""
imdbseries._http
================
Layer 1: niquests connection pool → BeautifulSoup documents.

Responsibilities
----------------
• One shared niquests.AsyncSession per top-level scrape (keep-alive pool)
• A semaphore capping in-flight requests at ``pool_size``
• Mapping transport outcomes onto the error taxonomy:
    404                         → NotFoundError
    other non-2xx / timeout /
    connection failure          → ScrapeConnectionError
• Path builders for every page the scraper reads

No retries happen here: a failed fetch surfaces immediately.
"""

from __future__ import annotations

import asyncio
from typing import Optional
from urllib.parse import quote_plus

import niquests
from niquests import AsyncSession
from bs4 import BeautifulSoup

from . import _config
from ._log import dbg, c, C, ctx_prefix
from .errors import NotFoundError, ScrapeConnectionError, Stage
from .models import ScrapeContext


# ─── Shared headers ───────────────────────────────────────────────────────────

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


# ─── Paths ────────────────────────────────────────────────────────────────────

def title_path(imdb_id: str) -> str:
    return f"/title/{imdb_id}/"


def season_path(imdb_id: str, season_number: int) -> str:
    return f"/title/{imdb_id}/episodes?season={season_number}"


def search_path(query: str) -> str:
    return f"/find?q={quote_plus(query)}&s=tt&ttype=tv&ref_=fn_tv"


# ─── Session factory ──────────────────────────────────────────────────────────

def make_session() -> AsyncSession:
    """Return a niquests AsyncSession with the scraper's headers applied."""
    return AsyncSession(headers=dict(HEADERS))


# ─── Fetcher ──────────────────────────────────────────────────────────────────

class Fetcher:
    """
    Turns a site-relative path into a parsed document.

    Safe to share between concurrent tasks: the only state is the session
    and the semaphore, both built for concurrent use.

        async with Fetcher(pool_size=8) as fetcher:
            soup = await fetcher.fetch("/title/tt0903747/", stage=Stage.SERIES)
    """

    def __init__(
        self,
        base_url: str = _config.BASE_URL,
        *,
        pool_size: int = _config.DEFAULT_POOL_SIZE,
        timeout: float = _config.DEFAULT_TIMEOUT,
        session: Optional[AsyncSession] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout  = timeout
        self._session = session
        self._owns_session = session is None
        self._pool_size = max(1, pool_size)
        self._sem = asyncio.Semaphore(self._pool_size)

    async def __aenter__(self) -> Fetcher:
        if self._session is None:
            self._session = make_session()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def fetch(
        self,
        path: str,
        *,
        stage: Stage,
        ctx: Optional[ScrapeContext] = None,
    ) -> BeautifulSoup:
        """
        GET ``base_url + path`` and parse it.

        Raises NotFoundError when the series page answers 404, and
        ScrapeConnectionError on any other non-2xx status, timeout or
        transport failure.
        """
        if self._session is None:
            raise RuntimeError("Fetcher used outside 'async with'")

        url = self.base_url + path
        dbg(f"  {ctx_prefix(ctx)}{c('GET', C.CYAN)} {c(url, C.DIM)}")

        async with self._sem:
            try:
                resp = await self._session.get(url, timeout=self.timeout)
            except niquests.exceptions.RequestException as exc:
                dbg(c(f"  ✗  {ctx_prefix(ctx)}{url} — {exc}", C.RED))
                raise ScrapeConnectionError(
                    f"Could not retrieve {url}. {exc}", url=url, stage=stage, context=ctx,
                ) from exc

        status = resp.status_code or 0
        if status == 404 and stage is Stage.SERIES:
            dbg(c(f"  ✗  {ctx_prefix(ctx)}{url} — 404", C.RED))
            raise NotFoundError(ctx.imdb_id if ctx and ctx.imdb_id else path, url=url).located(stage, ctx)
        if not 200 <= status < 300:
            dbg(c(f"  ✗  {ctx_prefix(ctx)}{url} — HTTP {status}", C.RED))
            raise ScrapeConnectionError(
                f"Unexpected status {status} for {url}",
                url=url, status=status, stage=stage, context=ctx,
            )

        return BeautifulSoup(resp.text or "", "html.parser")
