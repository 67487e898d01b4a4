from __future__ import annotations

import pytest

from xl2cal.core.errors import TimeParseError
from xl2cal.services.schedule.times import (
    TBC_SUFFIX,
    looks_like_start,
    normalize_end,
    parse_duration_spec,
    parse_interval,
    parse_time,
)


def _times(result) -> tuple[int, int, int, int]:
    iv = result.interval
    return iv.start_hour, iv.start_min, iv.end_hour, iv.end_min


@pytest.mark.parametrize(
    ("text", "expected"),
    [("10:00", (10, 0)), ("9.30", (9, 30)), ("930", (9, 30)), ("1415", (14, 15)), ("Race", None)],
)
def test_parse_time_formats(text: str, expected) -> None:
    assert parse_time(text) == expected


def test_default_duration_and_back_to_back_races() -> None:
    single = parse_interval("10:00", title="Race 1")
    double = parse_interval("10:00", title="Race 1, Race 2")

    assert _times(single) == (10, 0, 12, 0)
    assert _times(double) == (10, 0, 13, 0)


def test_end_wins_over_duration() -> None:
    result = parse_interval("10:00", end_text="11:15", duration_text="3:00")
    assert _times(result) == (10, 0, 11, 15)


def test_duration_used_when_end_missing() -> None:
    result = parse_interval("10:45", end_text="", duration_text="1:30")
    assert _times(result) == (10, 45, 12, 15)


def test_unreadable_end_falls_back_with_warning() -> None:
    result = parse_interval("10:00", end_text="late", duration_text="1")
    assert _times(result) == (10, 0, 11, 0)
    assert result.warnings == ("Cannot understand End time 'late', using duration",)


def test_midnight_is_clamped() -> None:
    result = parse_interval("23:30", duration_text="1:00")
    assert _times(result) == (23, 30, 23, 59)
    assert result.warnings == ("Event cannot span midnight, end time set to 23:59",)


def test_end_before_start_is_reported() -> None:
    result = parse_interval("14:00", end_text="13:00")
    assert _times(result) == (14, 0, 13, 0)
    assert "not after start time" in result.warnings[0]


@pytest.mark.parametrize(("start", "suffix"), [("TBA", TBC_SUFFIX), ("tbc", TBC_SUFFIX), ("-", TBC_SUFFIX), ("N/A", ""), ("NA", "")])
def test_placeholders(start: str, suffix: str) -> None:
    result = parse_interval(start, title="Regatta")
    assert _times(result) == (9, 0, 17, 0)
    assert result.title_suffix == suffix


def test_bad_start_raises() -> None:
    with pytest.raises(TimeParseError, match="Cannot understand Start time"):
        parse_interval("garbage")
    with pytest.raises(TimeParseError, match="out of range"):
        parse_interval("25:00")


def test_looks_like_start() -> None:
    assert looks_like_start("10:00")
    assert looks_like_start("TBA")
    assert not looks_like_start("Start")
    assert not looks_like_start("")


def test_normalize_end_carries_minutes() -> None:
    assert normalize_end(10, 75) == (11, 15, None)


@pytest.mark.parametrize("text", ["2", "1:30", "0:45", "23:59"])
def test_duration_spec_accepts(text: str) -> None:
    parse_duration_spec(text)


@pytest.mark.parametrize("text", ["24", "1:60", "two hours", "1:5"])
def test_duration_spec_rejects(text: str) -> None:
    with pytest.raises(ValueError):
        parse_duration_spec(text)
