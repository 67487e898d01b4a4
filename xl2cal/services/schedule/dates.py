"""Date parsing for schedule rows.

Two entry points mirror the two ways a sheet can carry the event date:
separate Day and Month columns, or one free-text Date column such as
``Sunday 12th March``, ``12/3/24`` or ``Sun Jan 01 2024``.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from xl2cal.core.errors import DateParseError

from .cells import serial_to_date
from .models import ParsedDate

MONTH_NAMES = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE",
    "JULY", "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)
DAY_NAMES = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")
MONTH_PREFIX_LEN = 3

_MONTH_NUMBER_RE = re.compile(r"^\d\d?$")
_DAY_RE = re.compile(r"^(\d\d?)(?:st|nd|rd|th)?", re.IGNORECASE)
_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$")
_SLASH_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")
_DELIMITER_RE = re.compile(r"[,\s]+")
_YEAR_TOKEN_RE = re.compile(r"^\d{4}$")
_DAY_TOKEN_RE = re.compile(r"^(\d{1,2})(?:ST|ND|RD|TH)?$")
_WORD_RE = re.compile(r"^[A-Z]{3,}$")


def month_from_name(text: str) -> Optional[int]:
    """Month number for a name or prefix of at least three letters."""

    word = text.strip().upper()
    if not _WORD_RE.match(word):
        return None
    for number, name in enumerate(MONTH_NAMES, start=1):
        if name.startswith(word):
            return number
    return None


def _is_day_name(token: str) -> bool:
    return bool(_WORD_RE.match(token)) and any(name.startswith(token) for name in DAY_NAMES)


def parse_month(text: str) -> int:
    """Month from a bare number or a name matched on its first three letters."""

    value = text.strip()
    if _MONTH_NUMBER_RE.match(value):
        return int(value)
    prefix = value[:MONTH_PREFIX_LEN].upper()
    if len(prefix) == MONTH_PREFIX_LEN:
        for number, name in enumerate(MONTH_NAMES, start=1):
            if name.startswith(prefix):
                return number
    raise DateParseError(f"Invalid month {text!r}")


def parse_day(text: str) -> int:
    match = _DAY_RE.match(text.strip())
    if not match:
        raise DateParseError(f"Cannot understand day number {text!r}")
    return int(match.group(1))


def parse_day_month(day_text: str, month_text: str, default_year: int) -> ParsedDate:
    """Parse separate Day and Month cells; the year always comes from the default.

    Range checks are left to the validator.
    """

    month = parse_month(month_text)
    day = parse_day(day_text)
    return ParsedDate(day=day, month=month, year=default_year, source_defaulted=True)


def _from_serial(text: str) -> Optional[ParsedDate]:
    as_date = serial_to_date(float(text))
    if as_date is None:
        return None
    return ParsedDate(day=as_date.day, month=as_date.month, year=as_date.year)


def _from_slashes(match: re.Match[str]) -> ParsedDate:
    day, month, year_text = match.groups()
    year = int(year_text)
    if len(year_text) == 2:
        year += 2000
    return ParsedDate(day=int(day), month=int(month), year=year)


def _from_tokens(text: str) -> Optional[ParsedDate]:
    tokens = [t.upper().rstrip(".") for t in _DELIMITER_RE.split(text) if t]
    tokens = [t for t in tokens if not _is_day_name(t)]

    day: Optional[int] = None
    month: Optional[int] = None
    year: Optional[int] = None
    for token in tokens:
        if _YEAR_TOKEN_RE.match(token):
            if year is None:
                year = int(token)
            continue
        day_match = _DAY_TOKEN_RE.match(token)
        if day_match:
            if day is None:
                day = int(day_match.group(1))
            continue
        if month is None:
            month = month_from_name(token)

    if day is None or month is None:
        return None
    return ParsedDate(day=day, month=month, year=year)


def parse_date_text(text: str) -> Optional[ParsedDate]:
    """Parse a free-text Date cell; returns None when no day or month is found."""

    value = (text or "").strip()
    if not value:
        return None
    if _NUMBER_RE.match(value):
        return _from_serial(value)
    slash = _SLASH_RE.match(value)
    if slash:
        return _from_slashes(slash)
    return _from_tokens(value)


def resolve_year(parsed: ParsedDate, default_year: int) -> tuple[ParsedDate, Optional[str]]:
    """Fill in a missing year; report an explicit year that differs from the default.

    Returns the completed date and an optional warning message.
    """

    if parsed.year is None:
        return (
            ParsedDate(day=parsed.day, month=parsed.month, year=default_year, source_defaulted=True),
            None,
        )
    if parsed.year != default_year and not parsed.source_defaulted:
        return parsed, f"Different year ({parsed.year}), is this what you meant?"
    return parsed, None


def is_valid_date(parsed: ParsedDate) -> bool:
    """Whether day/month/year name a real calendar date (no roll-over)."""

    if parsed.year is None or not 1000 <= parsed.year <= 9999:
        return False
    if not 1 <= parsed.month <= 12:
        return False
    try:
        built = date(parsed.year, parsed.month, parsed.day)
    except ValueError:
        return False
    return built.month == parsed.month


__all__ = [
    "MONTH_NAMES",
    "is_valid_date",
    "month_from_name",
    "parse_date_text",
    "parse_day",
    "parse_day_month",
    "parse_month",
    "resolve_year",
]
