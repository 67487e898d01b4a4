"""Public API for the schedule service."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping
from zipfile import BadZipFile

from pydantic import BaseModel, ConfigDict, Field

from xl2cal.core.errors import ConfigError, ExportAborted, SheetReadError
from xl2cal_io import read_rows

from .exporter import export_calendar
from .generator import CalendarGenerator
from .grouping import count_by_calendar, find_calendars
from .models import BadRecord, Decision, RowStatus
from .report import generate_report
from .roles import ColumnRole, ColumnRoles
from .session import ScheduleSession
from .settings import ExportSettings
from .validate import BadRecordHandler

LOGGER = logging.getLogger(__name__)


class ExportResult(BaseModel):
    """Aggregated outcome returned to callers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    entries: int
    bad_records: int
    skipped_with_warning: int
    warnings: list[str] = Field(default_factory=list)
    calendars_found: list[str] = Field(default_factory=list)
    calendar_path: str
    report_path: str | None = None
    skipped_csv_path: str | None = None


def load_session(
    input_path: str | Path,
    columns: Mapping[str, int] | ColumnRoles,
    sheet: str | int | None = None,
) -> ScheduleSession:
    """Read a sheet and wrap it in a session with the given column roles."""

    path = Path(input_path)
    LOGGER.info("Reading schedule: %s (sheet=%s)", path, sheet)
    try:
        raw_rows = read_rows(path, sheet=sheet)
    except (FileNotFoundError, ValueError, KeyError, BadZipFile) as exc:
        raise SheetReadError(f"cannot read {path}: {exc}") from exc
    return ScheduleSession.from_raw(raw_rows, columns)


def build_bad_record_handler(non_interactive: bool) -> BadRecordHandler | None:
    if non_interactive:
        return None

    def _callback(bad: BadRecord) -> Decision:
        prompt = f"{bad.describe()} so ignoring this line. Continue? [Y/n]: "
        while True:
            choice = input(prompt).strip().lower()
            if choice in {"", "y", "yes"}:
                return Decision.CONTINUE
            if choice in {"n", "no"}:
                print("You have cancelled the run")
                return Decision.ABORT
            print("Please respond with 'y' or 'n'.")

    return _callback


def export_schedule(
    input_path: str | Path,
    output_dir: str | Path,
    settings: ExportSettings,
    roles: Mapping[str, int] | ColumnRoles,
    sheet: str | int | None = None,
    non_interactive: bool = False,
    report: bool = True,
    handler: BadRecordHandler | None = None,
) -> ExportResult:
    """Convert one schedule sheet into an ``.ics`` file (plus an optional report).

    Raises:
        SheetReadError: When the sheet cannot be read.
        ConfigError: When the column roles do not identify a date, start and event.
        ExportAborted: When the bad-record handler chooses to abort.
    """

    session = load_session(input_path, roles, sheet=sheet)
    missing = session.roles.missing_for_export()
    if missing:
        raise ConfigError(f"column roles missing for export: {', '.join(missing)}")

    calendars_found = find_calendars(session)
    if settings.filter_active:
        if not session.roles.has_role(ColumnRole.CALENDAR):
            LOGGER.warning("Calendar filter ignored: no Calendar column is mapped")
        unknown = sorted(settings.calendars - set(calendars_found))
        if unknown:
            LOGGER.warning("Selected calendars not found in sheet: %s", ", ".join(unknown))

    if handler is None:
        handler = build_bad_record_handler(non_interactive)
    result = CalendarGenerator(session, settings, handler).run()
    if result.aborted or result.output is None:
        bad = result.aborted_at
        raise ExportAborted(bad.line if bad else 0, bad.message if bad else "aborted")

    out_dir = Path(output_dir)
    calendar_path = export_calendar(result.output, out_dir, settings.calendars)
    LOGGER.info("Wrote %s entries to %s", result.entry_count, calendar_path)

    report_path: Path | None = None
    skipped_path: Path | None = None
    if report:
        report_path, skipped_path = generate_report(
            out_dir,
            result,
            source_name=Path(input_path).name,
            calendars_found=calendars_found,
            calendar_path=calendar_path,
        )

    return ExportResult(
        entries=result.entry_count,
        bad_records=len(result.with_status(RowStatus.BAD_RECORD)),
        skipped_with_warning=len(result.with_status(RowStatus.SKIP_WARN)),
        warnings=result.warnings,
        calendars_found=calendars_found,
        calendar_path=str(calendar_path),
        report_path=str(report_path) if report_path else None,
        skipped_csv_path=str(skipped_path) if skipped_path else None,
    )


def discover_calendars(
    input_path: str | Path,
    roles: Mapping[str, int] | ColumnRoles,
    sheet: str | int | None = None,
) -> dict[str, int]:
    """Calendar tags found in a sheet with the number of data rows for each."""

    session = load_session(input_path, roles, sheet=sheet)
    if not session.roles.has_role(ColumnRole.CALENDAR):
        raise ConfigError("no Calendar column is mapped")
    counts = count_by_calendar(session)
    return {tag: counts[tag] for tag in find_calendars(session)}
