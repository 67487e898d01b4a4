from __future__ import annotations

from xl2cal.services.schedule.models import BadRecord, Decision, RowStatus
from xl2cal.services.schedule.session import ScheduleSession
from xl2cal.services.schedule.settings import ExportSettings
from xl2cal.services.schedule.validate import report_bad_record, validate_row

COLUMNS = {"Date": 0, "Start": 1, "End": 2, "Event": 3, "HW": 4}


def _validate(row: list, settings: ExportSettings | None = None, columns: dict | None = None):
    session = ScheduleSession.from_raw([row], columns or COLUMNS)
    settings = settings or ExportSettings(default_year=2024)
    line, normalized = next(iter(session.numbered_rows()))
    return validate_row(session, line, normalized, settings)


def test_valid_row_is_accepted() -> None:
    outcome = _validate(["Sun 1 Jan 2024", "10:00", "", "Race A", "10:42"])

    assert outcome.status is RowStatus.ACCEPTED
    record = outcome.record
    assert record is not None
    assert (record.date.day, record.date.month, record.date.year) == (1, 1, 2024)
    assert record.interval.end_hhmm == 1200
    assert record.highwater == "10:42"
    assert record.calendar_tag is None


def test_header_and_blank_rows_are_skipped_silently() -> None:
    assert _validate(["Date", "Start", "End", "Event", "HW"]).status is RowStatus.SKIP_SILENT
    assert _validate(["Notes", "", "", "", ""]).status is RowStatus.SKIP_SILENT


def test_garbage_start_on_dated_row_is_bad_record() -> None:
    outcome = _validate(["Sun 1 Jan 2024", "garbage", "", "Race A", ""])

    assert outcome.status is RowStatus.BAD_RECORD
    assert "Cannot understand Start time" in outcome.message
    assert outcome.event == "Race A"


def test_invalid_day_is_bad_record() -> None:
    outcome = _validate(["30 Feb 2024", "10:00", "", "Race A", ""])

    assert outcome.status is RowStatus.BAD_RECORD
    assert outcome.message == "30 is out of range for a day in month 2"


def test_missing_title_skips_with_warning() -> None:
    outcome = _validate(["1 Jan 2024", "10:00", "", "", ""])

    assert outcome.status is RowStatus.SKIP_WARN
    assert outcome.message == "No event name on line 1, skipping"


def test_year_mismatch_is_a_warning_only() -> None:
    outcome = _validate(["1 Jan 2023", "10:00", "", "Race A", ""])

    assert outcome.accepted
    assert outcome.warnings == ("Different year (2023), is this what you meant? (line 1)",)


def test_placeholder_start_adds_tbc_suffix() -> None:
    outcome = _validate(["2 Mar", "TBA", "", "Prize giving", ""])

    assert outcome.accepted
    assert outcome.record.title == "Prize giving (times TBC)"
    assert outcome.record.interval.start_hhmm == 900


def test_day_month_columns_and_calendar_filter() -> None:
    columns = {"Day": 0, "Month": 1, "Start": 2, "Event": 3, "Calendar": 4}
    settings = ExportSettings(default_year=2024, calendars=["Dinghy"])

    kept = _validate(["5th", "May", "11:00", "Race", "Dinghy"], settings, columns)
    dropped = _validate(["5th", "May", "11:00", "Race", "Keelboat"], settings, columns)

    assert kept.accepted
    assert kept.record.calendar_tag == "Dinghy"
    assert dropped.status is RowStatus.SKIP_SILENT


def test_invalid_month_number_is_bad_record() -> None:
    columns = {"Day": 0, "Month": 1, "Start": 2, "Event": 3}
    outcome = _validate(["5", "13", "11:00", "Race"], columns=columns)

    assert outcome.status is RowStatus.BAD_RECORD
    assert outcome.message == "Invalid month 13"


def test_report_bad_record_uses_handler() -> None:
    bad = BadRecord(line=4, message="Bad date 'x'", event="Race")

    assert report_bad_record(bad, None) is Decision.CONTINUE
    assert report_bad_record(bad, lambda _: Decision.ABORT) is Decision.ABORT
    assert bad.describe() == "BAD RECORD: Bad date 'x' on line 4 (Race)"
