from __future__ import annotations

import pytest

from xl2cal.core.errors import DateParseError
from xl2cal.services.schedule.dates import (
    is_valid_date,
    month_from_name,
    parse_date_text,
    parse_day,
    parse_day_month,
    parse_month,
    resolve_year,
)
from xl2cal.services.schedule.models import ParsedDate


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Sunday 12th March", (12, 3, None)),
        ("Sun 1 Jan 2024", (1, 1, 2024)),
        ("Sun Jan 01 2024", (1, 1, 2024)),
        ("Sat, 4th May", (4, 5, None)),
        ("21 Sept. 2025", (21, 9, 2025)),
        ("12/3/24", (12, 3, 2024)),
        ("1/11/2024", (1, 11, 2024)),
        ("45292", (1, 1, 2024)),
    ],
)
def test_parse_date_text_grammars(text: str, expected: tuple) -> None:
    parsed = parse_date_text(text)
    assert parsed is not None
    assert (parsed.day, parsed.month, parsed.year) == expected


@pytest.mark.parametrize("text", ["", "Date", "Notes for the season", "March"])
def test_parse_date_text_without_day_or_month(text: str) -> None:
    assert parse_date_text(text) is None


def test_month_names_need_three_letters() -> None:
    assert month_from_name("Sep") == 9
    assert month_from_name("september") == 9
    assert month_from_name("Ju") is None
    assert month_from_name("Jun") == 6


def test_parse_month_accepts_numbers_and_names() -> None:
    assert parse_month("4") == 4
    assert parse_month("april") == 4
    assert parse_month("Dec.") == 12
    with pytest.raises(DateParseError):
        parse_month("Xyz")
    with pytest.raises(DateParseError):
        parse_month("Ma")


def test_parse_day_allows_ordinal_suffix() -> None:
    assert parse_day("3rd") == 3
    assert parse_day("21") == 21
    with pytest.raises(DateParseError):
        parse_day("first")


@pytest.mark.parametrize(
    ("day", "month", "year"),
    [(1, 1, 2024), (29, 2, 2024), (31, 12, 2025), (15, 7, 2030)],
)
def test_day_month_round_trip(day: int, month: int, year: int) -> None:
    parsed = parse_day_month(str(day), str(month), year)
    assert parsed.as_text() == f"{day}/{month}/{year}"
    assert parsed.source_defaulted
    assert is_valid_date(parsed)


def test_resolve_year_defaults_and_warns() -> None:
    filled, warning = resolve_year(ParsedDate(day=1, month=5, year=None), 2024)
    assert filled.year == 2024 and filled.source_defaulted
    assert warning is None

    explicit, warning = resolve_year(ParsedDate(day=1, month=5, year=2023), 2024)
    assert explicit.year == 2023
    assert warning == "Different year (2023), is this what you meant?"


def test_is_valid_date_rejects_roll_over() -> None:
    assert not is_valid_date(ParsedDate(day=30, month=2, year=2024))
    assert not is_valid_date(ParsedDate(day=29, month=2, year=2023))
    assert not is_valid_date(ParsedDate(day=1, month=13, year=2024))


@pytest.mark.parametrize("text", ["1/1/024", "1/1/2", "1/1/02024"])
def test_slash_dates_need_two_or_four_digit_years(text: str) -> None:
    assert parse_date_text(text) is None


def test_is_valid_date_rejects_short_years() -> None:
    assert not is_valid_date(ParsedDate(day=1, month=1, year=24))
    assert not is_valid_date(ParsedDate(day=1, month=1, year=999))
    assert is_valid_date(ParsedDate(day=1, month=1, year=1000))
