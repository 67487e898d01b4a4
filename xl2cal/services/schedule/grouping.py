"""Calendar-tag discovery for filtered export."""

from __future__ import annotations

from typing import Iterable

from .roles import ColumnRole
from .session import ScheduleSession
from .times import looks_like_start


def find_calendars(session: ScheduleSession) -> list[str]:
    """Distinct calendar tags on data rows, in first-seen order.

    Only rows whose Start cell looks like a time or placeholder are scanned so
    headers and notes do not show up as calendars.
    """

    if not session.roles.has_role(ColumnRole.CALENDAR):
        return []
    found: dict[str, None] = {}
    for _, row in session.numbered_rows():
        if not looks_like_start(session.cell(row, ColumnRole.START)):
            continue
        tag = session.cell(row, ColumnRole.CALENDAR)
        if tag:
            found.setdefault(tag, None)
    return list(found)


def count_by_calendar(session: ScheduleSession) -> dict[str, int]:
    counts: dict[str, int] = {}
    if not session.roles.has_role(ColumnRole.CALENDAR):
        return counts
    for _, row in session.numbered_rows():
        if looks_like_start(session.cell(row, ColumnRole.START)):
            tag = session.cell(row, ColumnRole.CALENDAR)
            if tag:
                counts[tag] = counts.get(tag, 0) + 1
    return counts


def calendar_file_name(selected: Iterable[str]) -> str:
    """``<tags>.ics`` for a filtered export, ``myCalendar.ics`` otherwise."""

    tags = sorted(tag for tag in selected if tag)
    if not tags:
        return "myCalendar.ics"
    stem = "".join(tags)
    safe = "".join(ch if ch.isalnum() or ch in "-_ " else "_" for ch in stem).strip()
    return f"{safe or 'myCalendar'}.ics"


__all__ = ["calendar_file_name", "count_by_calendar", "find_calendars"]
