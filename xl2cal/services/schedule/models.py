"""Data models used by the schedule service."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from icalendar import Calendar, Event


@dataclass(frozen=True, slots=True)
class ParsedDate:
    """Calendar date taken from a row; ``source_defaulted`` when the year was filled in."""

    day: int
    month: int
    year: Optional[int]
    source_defaulted: bool = False

    def as_text(self) -> str:
        year = "" if self.year is None else f"/{self.year}"
        return f"{self.day}/{self.month}{year}"


@dataclass(frozen=True, slots=True)
class ParsedInterval:
    """Start and end wall-clock times on the event's day."""

    start_hour: int
    start_min: int
    end_hour: int
    end_min: int

    @property
    def start_hhmm(self) -> int:
        return self.start_hour * 100 + self.start_min

    @property
    def end_hhmm(self) -> int:
        return self.end_hour * 100 + self.end_min


@dataclass(frozen=True, slots=True)
class EventRecord:
    """Accepted row, ready for serialization."""

    line: int
    date: ParsedDate
    interval: ParsedInterval
    title: str
    highwater: Optional[str] = None
    calendar_tag: Optional[str] = None
    warnings: Tuple[str, ...] = ()


class RowStatus(str, Enum):
    ACCEPTED = "accepted"
    SKIP_SILENT = "skip_silent"
    SKIP_WARN = "skip_warn"
    BAD_RECORD = "bad_record"


@dataclass(frozen=True, slots=True)
class RowOutcome:
    """Validation verdict for one source row."""

    line: int
    status: RowStatus
    message: str = ""
    event: str = ""
    warnings: Tuple[str, ...] = ()
    record: Optional[EventRecord] = None

    @property
    def accepted(self) -> bool:
        return self.status is RowStatus.ACCEPTED


@dataclass(frozen=True, slots=True)
class BadRecord:
    """Row whose required fields failed to parse."""

    line: int
    message: str
    event: str = ""

    def describe(self) -> str:
        text = f"BAD RECORD: {self.message} on line {self.line}"
        if self.event:
            text += f" ({self.event})"
        return text


class Decision(str, Enum):
    """Answer of a bad-record handler."""

    CONTINUE = "continue"
    ABORT = "abort"


@dataclass(frozen=True, slots=True)
class CalendarEntry:
    """One VEVENT component plus the values it was built from."""

    line: int
    uid: str
    stamp: str
    dtstart: str
    dtend: str
    summary: str
    alarm: str
    event: Event


@dataclass(frozen=True, slots=True)
class CalendarOutput:
    """The VCALENDAR of one export and the entries it holds."""

    calendar: Calendar
    entries: Tuple[CalendarEntry, ...]

    def to_ical(self) -> bytes:
        return self.calendar.to_ical()

    @property
    def text(self) -> str:
        return self.to_ical().decode("utf-8")

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(slots=True)
class GenerationResult:
    """Outcome of one generator run; ``output`` is None when aborted."""

    output: Optional[CalendarOutput]
    aborted: bool = False
    aborted_at: Optional[BadRecord] = None
    outcomes: list[RowOutcome] = field(default_factory=list)

    @property
    def entry_count(self) -> int:
        return 0 if self.output is None else len(self.output)

    def with_status(self, status: RowStatus) -> list[RowOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def warnings(self) -> list[str]:
        messages: list[str] = []
        for outcome in self.outcomes:
            if outcome.status is RowStatus.SKIP_WARN and outcome.message:
                messages.append(outcome.message)
            messages.extend(outcome.warnings)
        return messages


__all__ = [
    "BadRecord",
    "CalendarEntry",
    "CalendarOutput",
    "Decision",
    "EventRecord",
    "GenerationResult",
    "ParsedDate",
    "ParsedInterval",
    "RowOutcome",
    "RowStatus",
]
