"""Typer based command line entry points for xl2cal."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional
from zipfile import BadZipFile

import typer
from pydantic import ValidationError

from xl2cal.core.errors import ConfigError, ExportAborted, SheetReadError
from xl2cal.core.logger import get_logger
from xl2cal.core.profiles import Profile, ensure_work_dirs, env_default, get_profile
from xl2cal.services.schedule import ColumnRoles, ExportSettings, discover_calendars, export_schedule
from xl2cal.services.schedule.settings import DEFAULT_PRODUCT_ID
from xl2cal_io import list_sheets

app = typer.Typer(help="Convert schedule spreadsheets into iCalendar files.")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    logger = get_logger()

    level_value = getattr(logging, log_level.upper(), None)
    if not isinstance(level_value, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}")

    logging.getLogger().setLevel(level_value)
    logger.setLevel(level_value)


def _parse_sheet(value: Optional[str]) -> str | int | None:
    if value is None:
        return None
    value = value.strip()
    return int(value) if value.isdigit() else value


def _parse_columns(items: List[str]) -> dict[str, int]:
    columns: dict[str, int] = {}
    for item in items:
        try:
            role, index = item.split("=")
            columns[role.strip()] = int(index)
        except ValueError as exc:
            raise typer.BadParameter(f"Invalid column mapping: {item} (expected Role=INDEX)") from exc
    return columns


def _resolve_roles(profile: Profile | None, columns: List[str]) -> ColumnRoles:
    mapping: dict[str, int] = dict(profile.columns) if profile else {}
    roles = ColumnRoles.from_mapping(mapping)
    # Explicit --column options are applied on top of the profile layout.
    for role, index in _parse_columns(columns).items():
        roles.assign(role, index)
    return roles


def _load_profile(name: Optional[str], profiles_file: Optional[Path]) -> Profile | None:
    if not name:
        return None
    return get_profile(name, profiles_file)


@app.command("convert")
def cli_convert(
    input_file: Path = typer.Argument(
        ..., exists=True, readable=True, dir_okay=False, resolve_path=True, help="Schedule workbook or CSV"
    ),
    columns: List[str] = typer.Option(
        [],
        "--column",
        "-c",
        help="Column role as ROLE=INDEX, zero-based (repeat for multiple, e.g. Date=0)",
    ),
    profile: Optional[str] = typer.Option(None, "--profile", help="Profile name from profiles.yaml"),
    profiles_file: Optional[Path] = typer.Option(
        None, "--profiles-file", help="Alternative profiles.yaml", exists=True, dir_okay=False, resolve_path=True
    ),
    sheet: Optional[str] = typer.Option(None, "--sheet", help="Sheet name or zero-based index"),
    year: Optional[int] = typer.Option(None, "--year", help="Year used when a date has none"),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Text put in front of every summary"),
    duration: Optional[str] = typer.Option(None, "--duration", help="Default event length as H or H:MM"),
    calendars: List[str] = typer.Option(
        [], "--calendar", help="Only export rows tagged with this calendar (repeat for multiple)"
    ),
    timezone: Optional[str] = typer.Option(
        None, "--timezone", help="Zone of the sheet's wall-clock times (default: host local time)"
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory for generated files", resolve_path=True
    ),
    non_interactive: bool = typer.Option(False, help="Skip bad records without prompting"),
    report: bool = typer.Option(True, "--report/--no-report", help="Write a Markdown report next to the calendar"),
) -> None:
    """Convert a schedule sheet into an .ics file."""

    logger = get_logger()

    try:
        selected = _load_profile(profile, profiles_file)
        roles = _resolve_roles(selected, columns)
        defaults = selected.defaults if selected else {}
        settings_kwargs: dict[str, object] = {
            "prefix": prefix if prefix is not None else defaults.get("prefix", ""),
            "default_duration": duration or defaults.get("duration", "2:00"),
            "calendars": calendars or defaults.get("calendars") or [],
            "timezone": timezone or defaults.get("timezone") or env_default("TIMEZONE"),
            "product_id": env_default("PRODID", DEFAULT_PRODUCT_ID),
        }
        default_year = year or defaults.get("year")
        if default_year:
            settings_kwargs["default_year"] = int(default_year)
        settings = ExportSettings(**settings_kwargs)
    except (ConfigError, ValidationError, ValueError) as exc:
        logger.error("convert config_error: %s", exc)
        typer.secho(f"Invalid configuration: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    sheet_value = _parse_sheet(sheet)
    if sheet_value is None and selected is not None:
        sheet_value = selected.sheet
    target_dir = output_dir or ensure_work_dirs()["out"]

    try:
        result = export_schedule(
            input_path=input_file,
            output_dir=target_dir,
            settings=settings,
            roles=roles,
            sheet=sheet_value,
            non_interactive=non_interactive,
            report=report,
        )
    except ExportAborted as exc:
        typer.secho(str(exc), fg=typer.colors.YELLOW)
        raise typer.Exit(code=1) from exc
    except (ConfigError, SheetReadError) as exc:
        logger.error("convert failed: %s", exc)
        typer.secho(f"Unable to convert {input_file.name}: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    typer.echo("Conversion finished")
    typer.echo(f"Calendar entries: {result.entries}")
    typer.echo(f"Bad records skipped: {result.bad_records}")
    typer.echo(f"Rows skipped with a warning: {result.skipped_with_warning}")
    for message in result.warnings:
        typer.secho(f"WARNING: {message}", fg=typer.colors.YELLOW)
    typer.echo(f"Calendar: {result.calendar_path}")
    if result.report_path:
        typer.echo(f"Report: {result.report_path}")
    if result.skipped_csv_path:
        typer.echo(f"Skipped rows CSV: {result.skipped_csv_path}")
    logger.info("CLI conversion completed: output=%s", result.calendar_path)


@app.command("calendars")
def cli_calendars(
    input_file: Path = typer.Argument(
        ..., exists=True, readable=True, dir_okay=False, resolve_path=True, help="Schedule workbook or CSV"
    ),
    columns: List[str] = typer.Option([], "--column", "-c", help="Column role as ROLE=INDEX"),
    profile: Optional[str] = typer.Option(None, "--profile", help="Profile name from profiles.yaml"),
    profiles_file: Optional[Path] = typer.Option(
        None, "--profiles-file", help="Alternative profiles.yaml", exists=True, dir_okay=False, resolve_path=True
    ),
    sheet: Optional[str] = typer.Option(None, "--sheet", help="Sheet name or zero-based index"),
) -> None:
    """List the calendar tags used in a schedule sheet."""

    logger = get_logger()
    try:
        selected = _load_profile(profile, profiles_file)
        roles = _resolve_roles(selected, columns)
        sheet_value = _parse_sheet(sheet)
        if sheet_value is None and selected is not None:
            sheet_value = selected.sheet
        found = discover_calendars(input_file, roles, sheet=sheet_value)
    except (ConfigError, SheetReadError) as exc:
        logger.error("calendars failed: %s", exc)
        typer.secho(f"Unable to list calendars: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    if not found:
        typer.echo("No calendars found")
        return
    for tag, count in found.items():
        typer.echo(f"{tag}\t{count}")


@app.command("sheets")
def cli_sheets(
    input_file: Path = typer.Argument(
        ..., exists=True, readable=True, dir_okay=False, resolve_path=True, help="Schedule workbook or CSV"
    ),
) -> None:
    """List the sheet names of a workbook."""

    logger = get_logger()
    try:
        names = list_sheets(input_file)
    except (FileNotFoundError, ValueError, BadZipFile) as exc:
        logger.error("sheets failed: %s", exc)
        typer.secho(f"Unable to read {input_file.name}: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    for index, name in enumerate(names):
        typer.echo(f"{index}\t{name}")


if __name__ == "__main__":
    app()
