"""Schedule-to-iCalendar service package."""

from .api import (
    ExportResult,
    build_bad_record_handler,
    discover_calendars,
    export_schedule,
    load_session,
)
from .generator import CalendarGenerator, generate_calendar
from .grouping import find_calendars
from .models import BadRecord, Decision
from .roles import ColumnRole, ColumnRoles
from .session import ScheduleSession
from .settings import ExportSettings

__all__ = [
    "BadRecord",
    "CalendarGenerator",
    "ColumnRole",
    "ColumnRoles",
    "Decision",
    "ExportResult",
    "ExportSettings",
    "ScheduleSession",
    "build_bad_record_handler",
    "discover_calendars",
    "export_schedule",
    "find_calendars",
    "generate_calendar",
    "load_session",
]
