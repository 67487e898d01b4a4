"""Spreadsheet input helpers."""

# Module responsibilities:
# - Read one sheet of an Excel/CSV file into a header-less 2-D list of cell values.
# - List the sheets of a workbook so callers can pick one.
# - Emit structured logs for traceability.

from __future__ import annotations

import math
from pathlib import Path
from typing import List, Union

import pandas as pd
from openpyxl import load_workbook

from .utils.log import get_logger

logger = get_logger("sheet_reader")

SheetType = Union[str, int, None]
SUPPORTED_SUFFIXES = (".xlsx", ".xlsm", ".csv")


def _check_source(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Source spreadsheet not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported spreadsheet type: {path.suffix or '<none>'}")
    return suffix


def _clean_value(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    return value


def list_sheets(path: Path) -> List[str]:
    """Return the sheet names of a workbook (a CSV file counts as one sheet).

    Raises:
        FileNotFoundError: When the file does not exist.
        ValueError: When the file type is not supported.
        BadZipFile: When a workbook is not a valid xlsx archive.
    """

    suffix = _check_source(path)
    if suffix == ".csv":
        return [path.stem]
    wb = load_workbook(path, read_only=True)
    try:
        return list(wb.sheetnames)
    finally:
        wb.close()


def read_rows(path: Path, sheet: SheetType = None) -> List[List[object]]:
    """Load one sheet as a row-major list of raw cell values.

    The first row is treated as data; header rows are left for the caller to
    recognise.  Empty cells become ``None``.

    Args:
        path: Path to the workbook or CSV file.
        sheet: Sheet name or index; defaults to the first sheet.

    Returns:
        List of rows, each a list of cell values.

    Raises:
        FileNotFoundError: When the file does not exist.
        ValueError: When the file type is unsupported or pandas cannot parse it.
    """

    suffix = _check_source(path)
    logger.info("Reading spreadsheet", extra={"path": str(path), "sheet": sheet})

    try:
        if suffix == ".csv":
            df = pd.read_csv(
                path,
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                encoding="utf-8-sig",
            )
        else:
            df = pd.read_excel(path, sheet_name=0 if sheet is None else sheet, header=None, dtype=object)
    except pd.errors.EmptyDataError:
        logger.info("Spreadsheet is empty", extra={"path": str(path)})
        return []
    except ValueError as exc:
        logger.error("Failed to read spreadsheet", extra={"error": str(exc)})
        raise

    if isinstance(df, dict):
        # pandas returns a dict when sheet_name is a list; this API expects a single sheet.
        raise ValueError("read_rows expects a single sheet; received multiple sheets")

    rows = [[_clean_value(value) for value in record] for record in df.itertuples(index=False, name=None)]
    logger.info(
        "Spreadsheet loaded",
        extra={"rows": len(rows), "columns": int(df.shape[1])},
    )
    return rows
