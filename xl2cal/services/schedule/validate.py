"""Row validation and the bad-record error policy."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from xl2cal.core.errors import DateParseError, TimeParseError

from .cells import Row
from .dates import is_valid_date, parse_date_text, parse_day_month, resolve_year
from .models import BadRecord, Decision, EventRecord, ParsedDate, RowOutcome, RowStatus
from .roles import ColumnRole
from .session import ScheduleSession
from .settings import ExportSettings
from .times import looks_like_start, parse_interval

LOGGER = logging.getLogger(__name__)

BadRecordHandler = Callable[[BadRecord], Decision]


def report_bad_record(bad: BadRecord, handler: Optional[BadRecordHandler]) -> Decision:
    """Log a bad record and ask the handler whether to carry on.

    Without a handler the row is skipped and processing continues.
    """

    LOGGER.warning("%s so ignoring this line", bad.describe())
    if handler is None:
        return Decision.CONTINUE
    return handler(bad)


def _resolve_date(
    session: ScheduleSession, row: Row, settings: ExportSettings
) -> tuple[ParsedDate, Optional[str]]:
    if session.roles.uses_day_month():
        parsed = parse_day_month(
            session.cell(row, ColumnRole.DAY),
            session.cell(row, ColumnRole.MONTH),
            settings.default_year,
        )
        return parsed, None
    text = session.cell(row, ColumnRole.DATE)
    parsed = parse_date_text(text)
    if parsed is None:
        raise DateParseError(f"Bad date {text!r}")
    return resolve_year(parsed, settings.default_year)


def _check_date(parsed: ParsedDate) -> None:
    if not 1 <= parsed.month <= 12:
        raise DateParseError(f"Invalid month {parsed.month}")
    if not is_valid_date(parsed):
        raise DateParseError(f"{parsed.day} is out of range for a day in month {parsed.month}")


def _date_resolves(session: ScheduleSession, row: Row, settings: ExportSettings) -> bool:
    try:
        parsed, _ = _resolve_date(session, row, settings)
        _check_date(parsed)
    except DateParseError:
        return False
    return True


def validate_row(
    session: ScheduleSession, line: int, row: Row, settings: ExportSettings
) -> RowOutcome:
    """Run the row checks in order, stopping at the first failure."""

    start_text = session.cell(row, ColumnRole.START)
    title = session.cell(row, ColumnRole.EVENT)

    if not start_text:
        return RowOutcome(line=line, status=RowStatus.SKIP_SILENT)
    # A row with an unreadable start but a real date is a data row with a typo,
    # anything else is a header or a note.
    if not looks_like_start(start_text) and not _date_resolves(session, row, settings):
        LOGGER.debug("Ignoring line %s: %s", line, row)
        return RowOutcome(line=line, status=RowStatus.SKIP_SILENT)

    tag = session.cell(row, ColumnRole.CALENDAR) if session.roles.has_role(ColumnRole.CALENDAR) else None
    if tag is not None and settings.filter_active and tag not in settings.calendars:
        return RowOutcome(line=line, status=RowStatus.SKIP_SILENT, event=title)

    warnings: list[str] = []
    try:
        parsed_date, year_warning = _resolve_date(session, row, settings)
        _check_date(parsed_date)
    except DateParseError as exc:
        return RowOutcome(line=line, status=RowStatus.BAD_RECORD, message=str(exc), event=title)
    if year_warning:
        warnings.append(f"{year_warning} (line {line})")

    if not title:
        message = f"No event name on line {line}, skipping"
        LOGGER.warning(message)
        return RowOutcome(line=line, status=RowStatus.SKIP_WARN, message=message)

    try:
        timing = parse_interval(
            start_text,
            end_text=session.optional_cell(row, ColumnRole.END),
            duration_text=session.optional_cell(row, ColumnRole.DURATION),
            title=title,
            default_duration=settings.duration,
        )
    except TimeParseError as exc:
        return RowOutcome(line=line, status=RowStatus.BAD_RECORD, message=str(exc), event=title)

    warnings.extend(f"{w} on line {line}: {title}" for w in timing.warnings)
    for warning in warnings:
        LOGGER.warning(warning)

    highwater = session.cell(row, ColumnRole.HW) or None
    record = EventRecord(
        line=line,
        date=parsed_date,
        interval=timing.interval,
        title=title + timing.title_suffix,
        highwater=highwater,
        calendar_tag=tag or None,
        warnings=tuple(warnings),
    )
    return RowOutcome(
        line=line,
        status=RowStatus.ACCEPTED,
        event=title,
        warnings=tuple(warnings),
        record=record,
    )


__all__ = ["BadRecordHandler", "report_bad_record", "validate_row"]
