"""Start, end and duration parsing for schedule rows."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from xl2cal.core.errors import TimeParseError

from .models import ParsedInterval

LOGGER = logging.getLogger(__name__)

# Times before 10:00 are sometimes written with three digits (930).
TIME_RE = re.compile(r"^(\d\d?)[:.]?(\d\d)")
DURATION_RE = re.compile(r"^(\d\d?)(?:[:.](\d\d))?")
TBA_RE = re.compile(r"^(?:TB[AC]\b|-)", re.IGNORECASE)
NA_RE = re.compile(r"^N/?A\b", re.IGNORECASE)
# Two separate numbers in a title ("Race 1, Race 2") mean back-to-back races.
MULTI_RACE_RE = re.compile(r"\d\D+\d")

PLACEHOLDER_START = (9, 0)
PLACEHOLDER_END = (17, 0)
TBC_SUFFIX = " (times TBC)"
DEFAULT_DURATION = (2, 0)
LAST_MINUTE = (23, 59)

HourMinute = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class IntervalResult:
    interval: ParsedInterval
    title_suffix: str = ""
    warnings: Tuple[str, ...] = ()


def looks_like_start(text: str) -> bool:
    """Whether a Start cell plausibly holds a time or a placeholder."""

    value = (text or "").strip()
    return bool(TIME_RE.match(value) or TBA_RE.match(value) or NA_RE.match(value))


def parse_time(text: str) -> Optional[HourMinute]:
    match = TIME_RE.match((text or "").strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def parse_duration(text: str) -> Optional[HourMinute]:
    match = DURATION_RE.match((text or "").strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2) or 0)


def parse_duration_spec(text: str) -> HourMinute:
    """Parse a configured default duration such as ``2`` or ``1:30``.

    Raises:
        ValueError: When the text is not ``H`` or ``H:MM`` within 0-23 / 0-59.
    """

    value = str(text).strip()
    match = DURATION_RE.fullmatch(value)
    if not match:
        raise ValueError(f"duration must look like H or H:MM, got {text!r}")
    hours, minutes = int(match.group(1)), int(match.group(2) or 0)
    if hours > 23 or minutes > 59:
        raise ValueError(f"duration out of range (0-23 hours, 0-59 minutes): {text!r}")
    return hours, minutes


def add_minutes(start: HourMinute, extra: HourMinute) -> HourMinute:
    return start[0] + extra[0], start[1] + extra[1]


def normalize_end(hour: int, minute: int) -> tuple[int, int, Optional[str]]:
    """Carry minute overflow into hours and clamp anything past midnight to 23:59."""

    while minute >= 60:
        hour += 1
        minute -= 60
    if hour >= 24:
        return LAST_MINUTE[0], LAST_MINUTE[1], "Event cannot span midnight, end time set to 23:59"
    return hour, minute, None


def _placeholder(start_text: str) -> Optional[IntervalResult]:
    if TBA_RE.match(start_text):
        suffix = TBC_SUFFIX
    elif NA_RE.match(start_text):
        suffix = ""
    else:
        return None
    interval = ParsedInterval(*PLACEHOLDER_START, *PLACEHOLDER_END)
    return IntervalResult(interval=interval, title_suffix=suffix)


def parse_interval(
    start_text: str,
    *,
    end_text: Optional[str] = None,
    duration_text: Optional[str] = None,
    title: str = "",
    default_duration: HourMinute = DEFAULT_DURATION,
) -> IntervalResult:
    """Work out start and end times for one row.

    ``end_text``/``duration_text`` are None when the End/Duration roles are not
    mapped.  End wins over Duration, which wins over the default duration.

    Raises:
        TimeParseError: When the start is neither a time nor a placeholder.
    """

    start_text = (start_text or "").strip()
    start = parse_time(start_text)
    if start is None:
        placeholder = _placeholder(start_text)
        if placeholder is None:
            raise TimeParseError(f"Cannot understand Start time {start_text!r}")
        return placeholder
    if start[0] > 23 or start[1] > 59:
        raise TimeParseError(f"Start time out of range {start_text!r}")

    warnings: list[str] = []
    end: Optional[HourMinute] = None

    if end_text:
        end = parse_time(end_text)
        if end is None:
            LOGGER.debug("Unreadable End time %r", end_text)
            warnings.append(f"Cannot understand End time {end_text!r}, using duration")

    if end is None and duration_text:
        duration = parse_duration(duration_text)
        if duration is not None:
            end = add_minutes(start, duration)

    if end is None:
        hours, minutes = default_duration
        if MULTI_RACE_RE.search(title or ""):
            hours += 1
        end = add_minutes(start, (hours, minutes))

    end_hour, end_min, clamp_warning = normalize_end(*end)
    if clamp_warning:
        warnings.append(clamp_warning)
    elif (end_hour, end_min) <= start:
        warnings.append(
            f"End time {end_hour:02d}:{end_min:02d} is not after start time {start[0]:02d}:{start[1]:02d}"
        )

    interval = ParsedInterval(start[0], start[1], end_hour, end_min)
    return IntervalResult(interval=interval, warnings=tuple(warnings))


__all__ = [
    "DEFAULT_DURATION",
    "IntervalResult",
    "TBC_SUFFIX",
    "looks_like_start",
    "normalize_end",
    "parse_duration",
    "parse_duration_spec",
    "parse_interval",
    "parse_time",
]
