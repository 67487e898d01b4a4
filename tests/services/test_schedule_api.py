from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pandas as pd
import pytest
from openpyxl import Workbook

from xl2cal.core.errors import ConfigError, ExportAborted, SheetReadError
from xl2cal.services.schedule import ExportSettings, discover_calendars, export_schedule

COLUMNS = {"Date": 0, "Start": 1, "End": 2, "Event": 3, "HW": 4, "Calendar": 5}


def _write_workbook(path: Path) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = "Programme"
    ws.append(["Date", "Start", "End", "Event", "HW", "Calendar"])
    ws.append(["Sat 4 May 2024", "10:00", "", "Race 1", "09:12", "Dinghy"])
    ws.append(["Sat 4 May 2024", "garbage", "", "Race 2", "", "Dinghy"])
    ws.append(["Sun 5 May 2024", "14:00", "16:30", "Passage race", "", "Keelboat"])
    ws.append(["Sun 5 May 2024", "18:00", "", "", "", "Keelboat"])
    wb.save(path)
    return path


@pytest.fixture()
def workbook(tmp_path: Path) -> Path:
    return _write_workbook(tmp_path / "programme.xlsx")


@pytest.fixture()
def settings() -> ExportSettings:
    return ExportSettings(default_year=2024, timezone="UTC")


def test_export_non_interactive(tmp_path: Path, workbook: Path, settings: ExportSettings) -> None:
    out_dir = tmp_path / "out"
    result = export_schedule(workbook, out_dir, settings, COLUMNS, non_interactive=True)

    assert result.entries == 2
    assert result.bad_records == 1
    assert result.skipped_with_warning == 1
    assert result.calendars_found == ["Dinghy", "Keelboat"]

    calendar = Path(result.calendar_path)
    assert calendar.name == "myCalendar.ics"
    text = calendar.read_text(encoding="utf-8")
    assert "SUMMARY:Race 1\\, HW=09:12" in text
    assert "DTEND:20240505T163000Z" in text

    report = Path(result.report_path).read_text(encoding="utf-8")
    assert "Calendar entries: 2" in report
    assert "Line 3 (Race 2)" in report

    skipped = pd.read_csv(result.skipped_csv_path)
    assert sorted(skipped["line"].tolist()) == [3, 5]


def test_export_filtered_calendar_file_name(tmp_path: Path, workbook: Path) -> None:
    settings = ExportSettings(default_year=2024, timezone="UTC", calendars=["Keelboat"])
    result = export_schedule(workbook, tmp_path, settings, COLUMNS, non_interactive=True, report=False)

    assert Path(result.calendar_path).name == "Keelboat.ics"
    assert result.entries == 1
    assert result.report_path is None


def test_interactive_abort_writes_nothing(
    tmp_path: Path, workbook: Path, settings: ExportSettings, monkeypatch: pytest.MonkeyPatch
) -> None:
    responses: Iterator[str] = iter(["maybe", "n"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(responses))

    with pytest.raises(ExportAborted) as excinfo:
        export_schedule(workbook, tmp_path / "out", settings, COLUMNS)

    assert excinfo.value.line == 3
    assert not (tmp_path / "out").exists()


def test_interactive_continue(
    tmp_path: Path, workbook: Path, settings: ExportSettings, monkeypatch: pytest.MonkeyPatch
) -> None:
    prompts: list[str] = []

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        return ""

    monkeypatch.setattr("builtins.input", fake_input)
    result = export_schedule(workbook, tmp_path, settings, COLUMNS, report=False)

    assert result.entries == 2
    assert prompts[0].startswith("BAD RECORD: Cannot understand Start time 'garbage' on line 3 (Race 2)")


def test_missing_roles_is_config_error(tmp_path: Path, workbook: Path, settings: ExportSettings) -> None:
    with pytest.raises(ConfigError, match="Event"):
        export_schedule(workbook, tmp_path, settings, {"Date": 0, "Start": 1}, non_interactive=True)


def test_unreadable_source_is_sheet_error(tmp_path: Path, settings: ExportSettings) -> None:
    with pytest.raises(SheetReadError):
        export_schedule(tmp_path / "missing.xlsx", tmp_path, settings, COLUMNS, non_interactive=True)
    text_file = tmp_path / "notes.txt"
    text_file.write_text("hello", encoding="utf-8")
    with pytest.raises(SheetReadError):
        export_schedule(text_file, tmp_path, settings, COLUMNS, non_interactive=True)


def test_discover_calendars(workbook: Path) -> None:
    assert discover_calendars(workbook, COLUMNS) == {"Dinghy": 1, "Keelboat": 2}
    with pytest.raises(ConfigError):
        discover_calendars(workbook, {"Date": 0, "Start": 1, "Event": 3})
