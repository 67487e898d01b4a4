"""Reporting utilities for schedule exports."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from .models import GenerationResult, RowStatus

_SKIPPED_COLUMNS = ["line", "status", "event", "message"]


def _skipped_frame(result: GenerationResult) -> pd.DataFrame:
    records = [
        {"line": o.line, "status": o.status.value, "event": o.event, "message": o.message}
        for o in result.outcomes
        if o.status in (RowStatus.BAD_RECORD, RowStatus.SKIP_WARN)
    ]
    return pd.DataFrame.from_records(records, columns=_SKIPPED_COLUMNS)


def generate_report(
    output_dir: Path,
    result: GenerationResult,
    source_name: str,
    calendars_found: list[str],
    calendar_path: Path | None,
) -> tuple[Path, Path | None]:
    """Write a Markdown summary and a CSV of rows that were left out."""

    output_dir.mkdir(parents=True, exist_ok=True)

    skipped = _skipped_frame(result)
    skipped_path: Path | None = None
    if not skipped.empty:
        skipped_path = output_dir / "schedule_skipped.csv"
        skipped.to_csv(skipped_path, index=False)

    report_path = output_dir / "schedule_report.md"
    lines = ["# Schedule Export Report", ""]
    lines.append(f"- Source: {source_name}")
    lines.append(f"- Calendar entries: {result.entry_count}")
    lines.append(f"- Bad records skipped: {len(result.with_status(RowStatus.BAD_RECORD))}")
    lines.append(f"- Rows skipped with a warning: {len(result.with_status(RowStatus.SKIP_WARN))}")
    if calendars_found:
        lines.append(f"- Calendars found: {', '.join(calendars_found)}")
    if calendar_path is not None:
        lines.append(f"- Output: `{calendar_path.name}`")
    lines.append("")

    bad = result.with_status(RowStatus.BAD_RECORD)
    if bad:
        lines.append("## Bad records")
        for outcome in bad:
            event = f" ({outcome.event})" if outcome.event else ""
            lines.append(f"- Line {outcome.line}{event}: {outcome.message}")
        lines.append("")

    warnings = result.warnings
    if warnings:
        lines.append("## Warnings")
        lines.extend(f"- {message}" for message in warnings)
        lines.append("")

    if skipped_path:
        lines.append(f"Skipped rows exported to `{skipped_path.name}`.")

    report_path.write_text("\n".join(lines), encoding="utf-8")
    return report_path, skipped_path
