"""
tests/test_parse_pages.py
=========================
Unit tests for the synchronous page readers in imdbseries._parse.
Uses real-ish HTML fragments, no network.
"""

from datetime import timedelta

import pytest
from bs4 import BeautifulSoup

from imdbseries._parse import (
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
from imdbseries.errors import DataIntegrityError, ExtractionError, NoResultsError, Stage
from imdbseries.models import Airdate, ScrapeContext

from pages import (
    episode_row_html,
    search_page_html,
    search_row_html,
    season_page_html,
    series_page_html,
)


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def row(**kw):
    return find_episode_rows(soup(season_page_html(episode_row_html(**kw))))[0]


CTX = ScrapeContext("tt0903747", 1)


# ══════════════════════════════════════════════════════════════════════════════
#  Series page
# ══════════════════════════════════════════════════════════════════════════════

class TestLinkedDataBlock:

    def test_reads_block(self):
        ld = parse_linked_data(soup(series_page_html()))
        assert ld.type == "TVSeries"
        assert ld.name == "X"

    def test_missing_block(self):
        with pytest.raises(ExtractionError) as info:
            parse_linked_data(soup("<html><body></body></html>"), CTX)
        assert info.value.field == "linkedData"
        assert info.value.stage is Stage.SERIES
        assert info.value.context == CTX

    def test_malformed_json(self):
        with pytest.raises(ExtractionError) as info:
            parse_linked_data(soup(series_page_html(ld='{"@type": "TVSeries", ')))
        assert info.value.field == "linkedData"
        assert "deserializing" in info.value.message


class TestRunYears:

    @pytest.mark.parametrize("text, expected", [
        ("2015–2019", (2015, 2019)),
        ("2015–", (2015, None)),
        ("2015", (2015, 2015)),
    ])
    def test_reads_years(self, text, expected):
        assert parse_run_years(soup(series_page_html(run_years=text))) == expected

    def test_missing_title_block(self):
        with pytest.raises(ExtractionError) as info:
            parse_run_years(soup(series_page_html(title_block=False)))
        assert info.value.field == "underTitle"
        assert info.value.missing

    def test_missing_years_item(self):
        with pytest.raises(ExtractionError) as info:
            parse_run_years(soup(series_page_html(run_years=None)))
        # Second item is now "TV-MA", which is not a year range
        assert info.value.field == "runtime"

    def test_blank_years(self):
        with pytest.raises(ExtractionError) as info:
            parse_run_years(soup(series_page_html(run_years="")))
        assert info.value.stage is Stage.SERIES

    def test_unparseable_years(self):
        with pytest.raises(ExtractionError) as info:
            parse_run_years(soup(series_page_html(run_years="2014---2019")))
        assert info.value.raw == "2014---2019"


class TestEpisodeDuration:

    def test_short_form(self):
        assert parse_episode_duration(soup(series_page_html(duration="52m"))) == timedelta(minutes=52)

    def test_long_form(self):
        assert parse_episode_duration(soup(series_page_html(duration="1 hour 5 minutes"))) == timedelta(minutes=65)

    def test_no_runtime_item_means_no_duration(self):
        assert parse_episode_duration(soup(series_page_html(duration=None))) is None

    def test_blank_duration_rejected(self):
        with pytest.raises(ExtractionError) as info:
            parse_episode_duration(soup(series_page_html(duration="")))
        assert info.value.field == "episodeDuration"
        assert info.value.stage is Stage.SERIES

    def test_unparseable_duration_rejected(self):
        with pytest.raises(ExtractionError):
            parse_episode_duration(soup(series_page_html(duration="long")))


class TestSeasonCount:

    def test_multi_season_layout(self):
        assert parse_season_count(soup(series_page_html(seasons_text="5 Seasons"))) == 5

    def test_single_season_layout(self):
        html = series_page_html(seasons_text="1 Season", single_season_layout=True)
        assert parse_season_count(soup(html)) == 1

    def test_neither_layout(self):
        with pytest.raises(ExtractionError) as info:
            parse_season_count(soup(series_page_html(seasons_text=None)))
        assert info.value.field == "numberSeasons"
        assert info.value.missing

    def test_blank_text(self):
        with pytest.raises(ExtractionError) as info:
            parse_season_count(soup(series_page_html(seasons_text="")))
        assert not info.value.missing

    def test_unparseable_text(self):
        with pytest.raises(ExtractionError) as info:
            parse_season_count(soup(series_page_html(seasons_text="Many Seasons")))
        assert info.value.raw == "Many Seasons"


# ══════════════════════════════════════════════════════════════════════════════
#  Season page
# ══════════════════════════════════════════════════════════════════════════════

class TestDeclaredEpisodeCount:

    def test_reads_count(self):
        assert parse_declared_episode_count(soup(season_page_html(declared="7"))) == 7

    def test_missing(self):
        with pytest.raises(ExtractionError) as info:
            parse_declared_episode_count(soup(season_page_html(declared="")), CTX)
        assert info.value.field == "numberEpisodes"
        assert info.value.stage is Stage.SEASON
        assert info.value.context.season == 1

    def test_not_an_integer(self):
        with pytest.raises(ExtractionError) as info:
            parse_declared_episode_count(soup(season_page_html(declared="seven")))
        assert info.value.raw == "seven"


class TestEpisodeRows:

    def test_rows_in_page_order(self):
        html = season_page_html(episode_row_html(number="1"), episode_row_html(number="2"))
        rows = find_episode_rows(soup(html))
        assert len(rows) == 2

    def test_missing_list(self):
        with pytest.raises(ExtractionError) as info:
            find_episode_rows(soup(season_page_html(with_list=False)), CTX)
        assert info.value.field == "episodeList"
        assert info.value.stage is Stage.EPISODE


class TestParseEpisodeRow:

    def test_all_fields(self):
        ep = parse_episode_row(row(), CTX)
        assert ep.imdb_id == "tt0959621"
        assert ep.number == 1
        assert ep.name == "Pilot"
        assert ep.airdate == Airdate(2008, 1, 20)
        assert ep.rating_value == 9.0
        assert ep.rating_count == 37412
        assert ep.summary == "A chemistry teacher turns to crime."

    def test_airdate_without_dot(self):
        assert parse_episode_row(row(airdate="20 Jan 2008")).airdate == Airdate(2008, 1, 20)

    def test_airdate_month_year(self):
        assert parse_episode_row(row(airdate="Jan. 2008")).airdate == Airdate(2008, 1)

    def test_airdate_year_only(self):
        assert parse_episode_row(row(airdate="2008")).airdate == Airdate(2008)

    def test_blank_airdate_is_absent(self):
        assert parse_episode_row(row(airdate="  ")).airdate is None

    def test_no_rating(self):
        ep = parse_episode_row(row(rating_value=None, rating_count=None))
        assert ep.rating_value is None
        assert ep.rating_count is None

    def test_placeholder_summary_is_absent(self):
        assert parse_episode_row(row(summary_placeholder=True)).summary is None

    def test_blank_summary_allowed(self):
        assert parse_episode_row(row(summary="")).summary == ""

    def test_name_with_inline_markup_keeps_spaces(self):
        assert parse_episode_row(row(name="Pilot <i>(Part 1)</i>")).name == "Pilot (Part 1)"

    def test_multiline_summary_collapsed(self):
        ep = parse_episode_row(row(summary="\n      Walt meets\n      <b>Jesse</b>.\n    "))
        assert ep.summary == "Walt meets Jesse."

    # ── Failures ──────────────────────────────────────────────────────────────

    def test_missing_episode_number(self):
        with pytest.raises(ExtractionError) as info:
            parse_episode_row(row(number=None), CTX)
        assert info.value.field == "episodeNumber"
        assert info.value.stage is Stage.EPISODE
        assert info.value.context.episode is None

    def test_non_integer_episode_number(self):
        with pytest.raises(ExtractionError) as info:
            parse_episode_row(row(number="one"))
        assert info.value.raw == "one"

    def test_missing_name_link(self):
        with pytest.raises(ExtractionError) as info:
            parse_episode_row(row(name=None), CTX)
        assert info.value.field == "nameAndUrl"
        assert info.value.context.episode == 1

    def test_blank_name(self):
        with pytest.raises(ExtractionError) as info:
            parse_episode_row(row(name=" "))
        assert info.value.field == "episodeName"

    def test_unparseable_link(self):
        with pytest.raises(ExtractionError) as info:
            parse_episode_row(row(href="/name/nm0186505/"))
        assert info.value.field == "episodeImdbId"
        assert info.value.raw == "/name/nm0186505/"

    def test_missing_airdate_element(self):
        with pytest.raises(ExtractionError) as info:
            parse_episode_row(row(airdate=None))
        assert info.value.field == "airdate"
        assert info.value.missing

    def test_unparseable_airdate(self):
        with pytest.raises(ExtractionError) as info:
            parse_episode_row(row(airdate="Spring '08"))
        assert info.value.raw == "Spring '08"

    def test_rating_value_without_count(self):
        with pytest.raises(DataIntegrityError) as info:
            parse_episode_row(row(rating_count=None), CTX)
        assert info.value.stage is Stage.EPISODE
        assert info.value.context == CTX.with_episode(1)

    def test_rating_count_without_value(self):
        with pytest.raises(DataIntegrityError):
            parse_episode_row(row(rating_value=None))

    def test_missing_summary_element(self):
        with pytest.raises(ExtractionError) as info:
            parse_episode_row(row(summary=None))
        assert info.value.field == "summaryText"


# ══════════════════════════════════════════════════════════════════════════════
#  Search page
# ══════════════════════════════════════════════════════════════════════════════

class TestSearchRows:

    def test_limit_applied(self):
        html = search_page_html(*[search_row_html(f"/title/tt000000{i}/", f"Show {i}") for i in range(1, 6)])
        assert len(find_search_rows(soup(html), "show", 3)) == 3

    def test_fewer_rows_than_limit(self):
        html = search_page_html(search_row_html())
        assert len(find_search_rows(soup(html), "breaking", 10)) == 1

    def test_no_container_is_no_results(self):
        with pytest.raises(NoResultsError):
            find_search_rows(soup("<html><body>No results</body></html>"), "zzz", 10)

    def test_row_fields(self):
        r = find_search_rows(soup(search_page_html(search_row_html())), "breaking", 1)[0]
        hit = parse_search_row(r)
        assert hit.imdb_id == "tt0903747"
        assert hit.name == "Breaking Bad"

    def test_name_with_inline_markup_keeps_spaces(self):
        r = find_search_rows(soup(search_page_html(search_row_html(name="Breaking <b>Bad</b>"))), "q", 1)[0]
        assert parse_search_row(r).name == "Breaking Bad"

    def test_blank_name(self):
        r = find_search_rows(soup(search_page_html(search_row_html(name=""))), "q", 1)[0]
        with pytest.raises(ExtractionError) as info:
            parse_search_row(r)
        assert info.value.field == "searchResultName"
        assert info.value.stage is Stage.SEARCH

    def test_bad_link(self):
        r = find_search_rows(soup(search_page_html(search_row_html(href="/list/ls000/"))), "q", 1)[0]
        with pytest.raises(ExtractionError) as info:
            parse_search_row(r)
        assert info.value.field == "searchResultImdbId"

    def test_missing_header(self):
        html = search_page_html('<div class="lister-item"><p>promo</p></div>')
        r = find_search_rows(soup(html), "q", 1)[0]
        with pytest.raises(ExtractionError) as info:
            parse_search_row(r)
        assert info.value.field == "searchResultHeader"
