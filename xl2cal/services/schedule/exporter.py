"""iCalendar file writer."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .grouping import calendar_file_name
from .models import CalendarOutput


def export_calendar(output: CalendarOutput, output_dir: Path, calendars: Iterable[str] = ()) -> Path:
    """Write the serialized calendar into ``output_dir``, named after the selected calendars."""

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / calendar_file_name(calendars)
    path.write_bytes(output.to_ical())
    return path
