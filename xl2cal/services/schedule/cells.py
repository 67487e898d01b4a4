"""Cell values and the token normalizer.

Spreadsheet cells arrive as whatever the reader produced (floats, ints,
strings, datetimes, NaN).  ``Cell.from_value`` decides the kind once at
ingestion; ``normalize_cell`` then turns each cell into the canonical string
the parsers work on.
"""

from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable, Sequence

# Day 0 of the Excel 1900 date system (accounts for the 1900 leap-year bug).
EXCEL_EPOCH = date(1899, 12, 30)
# Integral numbers at or above this serial (1 Jan 2020) are read as dates.
DATE_SERIAL_THRESHOLD = (date(2020, 1, 1) - EXCEL_EPOCH).days

_SLASH_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")
_DAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

Row = tuple[str, ...]


class CellKind(str, Enum):
    EMPTY = "empty"
    NUMBER = "number"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class Cell:
    """Tagged union of the cell shapes the parsers understand."""

    kind: CellKind
    number: float | None = None
    text: str = ""

    @classmethod
    def empty(cls) -> "Cell":
        return cls(CellKind.EMPTY)

    @classmethod
    def of_number(cls, value: float) -> "Cell":
        return cls(CellKind.NUMBER, number=float(value))

    @classmethod
    def of_text(cls, value: str) -> "Cell":
        stripped = value.strip()
        if not stripped:
            return cls.empty()
        return cls(CellKind.TEXT, text=stripped)

    @classmethod
    def from_value(cls, value: object) -> "Cell":
        if value is None:
            return cls.empty()
        if isinstance(value, bool):
            return cls.of_text(str(value))
        if isinstance(value, numbers.Real):
            if math.isnan(value):
                return cls.empty()
            return cls.of_number(float(value))
        # datetime is a subclass of date; pandas.Timestamp is a datetime.
        if isinstance(value, datetime):
            if value != value:  # NaT
                return cls.empty()
            return cls.of_text(render_date(value.date()))
        if isinstance(value, date):
            return cls.of_text(render_date(value))
        if isinstance(value, time):
            return cls.of_text(f"{value.hour:02d}:{value.minute:02d}")
        return cls.of_text(str(value))


def render_date(value: date) -> str:
    """Render a date the way serial dates are displayed, e.g. ``Sun Jan 01 2024``."""

    return f"{_DAY_ABBR[value.weekday()]} {_MONTH_ABBR[value.month - 1]} {value.day:02d} {value.year}"


def serial_to_date(serial: float) -> date | None:
    """Convert an Excel date serial into a date, or None when out of range."""

    try:
        return EXCEL_EPOCH + timedelta(days=int(serial))
    except (OverflowError, ValueError):
        return None


def _format_hhmm(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def _decimal_hours(value: float) -> str | None:
    """Read ``12.30`` as 12:30 when the two decimal places form valid minutes."""

    if not 1 <= value < 24:
        return None
    whole, _, frac = f"{value:.2f}".partition(".")
    minute = int(frac)
    if minute > 59 or int(whole) != int(value):
        return None
    return _format_hhmm(int(whole), minute)


def _time_serial(value: float) -> str | None:
    total = (value % 1) * 24
    hour = math.floor(total)
    minute = round((total % 1) * 60)
    if minute == 60:
        hour, minute = hour + 1, 0
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return _format_hhmm(hour, minute)
    return None


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return str(value)


def _normalize_number(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    if not value.is_integer():
        return _decimal_hours(value) or _time_serial(value) or _format_number(value)
    if value >= DATE_SERIAL_THRESHOLD:
        as_date = serial_to_date(value)
        if as_date is not None:
            return render_date(as_date)
    return _format_number(value)


def _normalize_text(text: str) -> str:
    match = _SLASH_DATE_RE.match(text)
    if not match:
        return text
    # Sheets render date cells month-first; display them day-first.
    month, day, year = match.groups()
    if not (1 <= int(month) <= 12 and 1 <= int(day) <= 31):
        return text
    return f"{int(day)}/{int(month)}/{year}"


def normalize_cell(cell: Cell | object) -> str:
    """Return the canonical display string for a cell.

    Pure and total: unrecognized values are stringified unchanged.
    """

    if not isinstance(cell, Cell):
        cell = Cell.from_value(cell)
    if cell.kind is CellKind.EMPTY:
        return ""
    if cell.kind is CellKind.NUMBER and cell.number is not None:
        return _normalize_number(cell.number)
    return _normalize_text(cell.text)


def normalize_row(cells: Iterable[Cell | object]) -> Row:
    return tuple(normalize_cell(cell).strip() for cell in cells)


def normalize_rows(raw_rows: Sequence[Sequence[object]]) -> tuple[Row, ...]:
    return tuple(normalize_row(row or ()) for row in raw_rows)


__all__ = [
    "Cell",
    "CellKind",
    "DATE_SERIAL_THRESHOLD",
    "Row",
    "normalize_cell",
    "normalize_row",
    "normalize_rows",
    "render_date",
    "serial_to_date",
]
