"""iCalendar generation from validated schedule rows.

Events are built as ``icalendar`` components.  Times are always written in
UTC (``Z`` suffix); emitting ``TZID`` would require a full VTIMEZONE
definition, including daylight-saving rules, for strict RFC 5545 conformance.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from icalendar import Calendar, Event

from xl2cal.core.errors import ConfigError

from .models import (
    BadRecord,
    CalendarEntry,
    CalendarOutput,
    Decision,
    EventRecord,
    GenerationResult,
    RowStatus,
)
from .session import ScheduleSession
from .settings import ExportSettings
from .validate import BadRecordHandler, report_bad_record, validate_row

LOGGER = logging.getLogger(__name__)

ICAL_VERSION = "2.0"
STAMP_FORMAT = "%Y%m%dT%H%M%S"
# Alarm lead time, in HHMM units.
ALARM_ADVANCE = 200


class GeneratorState(str, Enum):
    INIT = "init"
    PER_ROW = "per_row"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DONE = "done"


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Zone used for wall-clock times; None means the host's local zone."""

    if not name:
        return None
    if name.strip().upper() in {"UTC", "Z", "GMT0"}:
        return timezone.utc
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"unknown timezone: {name}") from exc


def to_utc(
    year: int, month: int, day: int, hour: int, minute: int, tz: Optional[tzinfo] = None
) -> datetime:
    """Interpret a wall-clock time in ``tz`` (host local when None) and convert to UTC."""

    local = datetime(year, month, day, hour, minute)
    aware = local.astimezone() if tz is None else local.replace(tzinfo=tz)
    return aware.astimezone(timezone.utc)


def format_stamp(moment: datetime) -> str:
    return moment.strftime(STAMP_FORMAT)


def compute_alarm(start_hhmm: int) -> tuple[str, Optional[str]]:
    """Alarm time two hours before the start, clamped to midnight."""

    alarm = start_hhmm - ALARM_ADVANCE
    if alarm < 0:
        return "000000", "Alarm set for previous day"
    return f"{alarm:04d}00", None


def build_summary(record: EventRecord, prefix: str = "") -> str:
    highwater = f", HW={record.highwater}" if record.highwater else ""
    return f"{prefix}{record.title}{highwater}"


def build_calendar(product_id: str) -> Calendar:
    cal = Calendar()
    cal.add("prodid", product_id)
    cal.add("version", ICAL_VERSION)
    cal.add("calscale", "GREGORIAN")
    return cal


def build_event(uid: str, stamp: datetime, start: datetime, end: datetime, summary: str) -> Event:
    """VEVENT with UTC-aware datetimes, so every time serializes with a ``Z`` suffix."""

    event = Event()
    event.add("created", stamp)
    event.add("uid", uid)
    event.add("dtstamp", stamp)
    event.add("dtstart", start)
    event.add("dtend", end)
    event.add("summary", summary)
    return event


class CalendarGenerator:
    """Turn a schedule session into iCalendar text, row by row in sheet order."""

    def __init__(
        self,
        session: ScheduleSession,
        settings: ExportSettings,
        handler: Optional[BadRecordHandler] = None,
        *,
        now: Optional[Callable[[], datetime]] = None,
        uid_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.session = session
        self.settings = settings
        self.handler = handler
        self._now = now or (lambda: datetime.now(timezone.utc))
        self._uid_factory = uid_factory or (lambda: str(uuid.uuid4()))
        self._tz = resolve_timezone(settings.timezone)
        self.state = GeneratorState.INIT

    def make_entry(self, record: EventRecord, stamp: datetime) -> tuple[CalendarEntry, Optional[str]]:
        d, iv = record.date, record.interval
        year = d.year if d.year is not None else self.settings.default_year
        start = to_utc(year, d.month, d.day, iv.start_hour, iv.start_min, self._tz)
        end = to_utc(year, d.month, d.day, iv.end_hour, iv.end_min, self._tz)
        alarm, alarm_warning = compute_alarm(iv.start_hhmm)
        summary = build_summary(record, self.settings.summary_prefix)
        uid = self._uid_factory()
        entry = CalendarEntry(
            line=record.line,
            uid=uid,
            stamp=format_stamp(stamp),
            dtstart=format_stamp(start),
            dtend=format_stamp(end),
            summary=summary,
            alarm=alarm,
            event=build_event(uid, stamp, start, end, summary),
        )
        return entry, alarm_warning

    def run(self) -> GenerationResult:
        """Generate the calendar; stops and discards output when the handler aborts."""

        self.state = GeneratorState.INIT
        stamp = self._now().astimezone(timezone.utc).replace(microsecond=0)
        entries: list[CalendarEntry] = []
        result = GenerationResult(output=None)

        for line, row in self.session.numbered_rows():
            if not row:
                continue
            self.state = GeneratorState.PER_ROW
            outcome = validate_row(self.session, line, row, self.settings)

            if outcome.status is RowStatus.BAD_RECORD:
                self.state = GeneratorState.REJECTED
                result.outcomes.append(outcome)
                bad = BadRecord(line=line, message=outcome.message, event=outcome.event)
                if report_bad_record(bad, self.handler) is Decision.ABORT:
                    LOGGER.warning("Run aborted by user at line %s", line)
                    result.aborted = True
                    result.aborted_at = bad
                    self.state = GeneratorState.DONE
                    return result
                continue

            if not outcome.accepted or outcome.record is None:
                self.state = GeneratorState.REJECTED
                if outcome.status is not RowStatus.SKIP_SILENT:
                    result.outcomes.append(outcome)
                continue

            self.state = GeneratorState.ACCEPTED
            entry, alarm_warning = self.make_entry(outcome.record, stamp)
            if alarm_warning:
                message = f"{alarm_warning}: {outcome.record.title} (line {line})"
                LOGGER.warning(message)
                outcome = replace(outcome, warnings=outcome.warnings + (message,))
            entries.append(entry)
            result.outcomes.append(outcome)

        self.state = GeneratorState.DONE
        calendar = build_calendar(self.settings.product_id)
        for entry in entries:
            calendar.add_component(entry.event)
        result.output = CalendarOutput(calendar=calendar, entries=tuple(entries))
        LOGGER.info(
            "Generated %s calendar entries (%s bad records, %s warnings)",
            len(entries),
            len(result.with_status(RowStatus.BAD_RECORD)),
            len(result.warnings),
        )
        return result


def generate_calendar(
    session: ScheduleSession,
    settings: ExportSettings,
    handler: Optional[BadRecordHandler] = None,
) -> GenerationResult:
    return CalendarGenerator(session, settings, handler).run()


__all__ = [
    "CalendarGenerator",
    "GeneratorState",
    "build_calendar",
    "build_event",
    "build_summary",
    "compute_alarm",
    "generate_calendar",
    "resolve_timezone",
    "to_utc",
]
