"""
imdbseries.cli
==============
Command-line interface for IMDbSeries.  Installed as the ``imdbseries`` command.

Usage
-----
    imdbseries tt0903747
    imdbseries tt0903747 --output breaking_bad.json
    imdbseries tt0903747 --json > breaking_bad.json
    imdbseries --name "Breaking Bad"
    imdbseries --search "Breaking" --limit 5
    imdbseries tt0903747 --pool-size 16 --timeout 20 --debug

Exit status: 0 on success, 1 on bad usage, 2 when the scrape fails with a
classified error (printed to stderr with its error code).
"""

from __future__ import annotations

import argparse
import json
import sys

from . import series, series_by_name, search, set_debug, _config
from ._log import c, C
from ._display import print_series, print_search_results
from .errors import ScrapeError


def _fail(exc: ScrapeError) -> None:
    print(
        f"{c('✗', C.BRED, C.BOLD)}  {c(f'[{exc.code}] {type(exc).__name__}', C.BRED, C.BOLD)}: {exc}",
        file=sys.stderr,
    )
    sys.exit(2)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imdbseries",
        description=(
            f"{c('IMDbSeries Scraper', C.BWHITE, C.BOLD)}\n"
            f"{c('Scrape series, season and episode data for any IMDb TV series.', C.DIM)}\n\n"
            f"{c('Examples:', C.BYELLOW)}\n"
            f"  imdbseries tt0903747                   {c('# Breaking Bad, every season', C.DIM)}\n"
            f"  imdbseries tt0903747 -o out.json       {c('# save results to a JSON file', C.DIM)}\n"
            f"  imdbseries --name \"Breaking Bad\"       {c('# scrape the top search hit', C.DIM)}\n"
            f"  imdbseries --search Breaking -l 5      {c('# list matching TV titles', C.DIM)}"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # ── Positional ────────────────────────────────────────────────────────────
    parser.add_argument(
        "imdb_id",
        nargs="?",
        default=None,
        metavar="IMDB_ID",
        help=(
            "The IMDb title id to scrape, the 'tt…' code from any IMDb URL.  "
            "Required unless --name or --search is used."
        ),
    )

    # ── Lookup modes ──────────────────────────────────────────────────────────
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-n", "--name",
        default=None,
        metavar="NAME",
        help="Search for NAME and scrape the most relevant TV series.",
    )
    mode.add_argument(
        "-S", "--search",
        default=None,
        metavar="QUERY",
        help="Only search: print matching TV titles and their ids.",
    )
    parser.add_argument(
        "-l", "--limit",
        type=int,
        default=None,
        metavar="N",
        help=f"Max search results (capped at {_config.SEARCH_RESULT_LIMIT}).",
    )

    # ── Output ────────────────────────────────────────────────────────────────
    parser.add_argument(
        "-o", "--output",
        default=None,
        metavar="FILE",
        help="Save the scraped series to this JSON file.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON to stdout instead of the formatted view.",
    )

    # ── Transport ─────────────────────────────────────────────────────────────
    parser.add_argument(
        "-p", "--pool-size",
        type=int,
        default=_config.DEFAULT_POOL_SIZE,
        dest="pool_size",
        metavar="N",
        help=f"Maximum concurrent page fetches.  Default: {_config.DEFAULT_POOL_SIZE}.",
    )
    parser.add_argument(
        "-t", "--timeout",
        type=float,
        default=_config.DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help=f"Per-request timeout.  Default: {_config.DEFAULT_TIMEOUT:g}.",
    )

    # ── Debug ─────────────────────────────────────────────────────────────────
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        default=False,
        help="Print requests, per-season progress and failures to stderr.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        set_debug(True)

    try:
        # ── Search mode ───────────────────────────────────────────────────────
        if args.search is not None:
            hits = search(args.search, args.limit, timeout=args.timeout)
            if args.json:
                print(json.dumps([h.to_dict() for h in hits], ensure_ascii=False, indent=2))
            else:
                print_search_results(hits)
            return

        # ── Scrape mode ───────────────────────────────────────────────────────
        options = {"pool_size": args.pool_size, "timeout": args.timeout}
        if args.name is not None:
            result = series_by_name(args.name, **options)
        elif args.imdb_id:
            result = series(args.imdb_id, **options)
        else:
            parser.print_help()
            sys.exit(1)
    except ScrapeError as exc:
        _fail(exc)
        return

    if args.output:
        saved = result.save(args.output)
        print(f"\n{c('▸  Saved', C.BGREEN, C.BOLD)} → {c(str(saved), C.BCYAN)}", file=sys.stderr)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_series(result)


if __name__ == "__main__":
    main()
