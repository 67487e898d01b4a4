"""`xl2cal_io` top-level package exports the spreadsheet reading helpers."""

# Module responsibilities:
# - Re-export the sheet reader so consumers have a stable API surface.

from __future__ import annotations

from .sheet_reader import SUPPORTED_SUFFIXES, list_sheets, read_rows

__all__ = [
    "SUPPORTED_SUFFIXES",
    "list_sheets",
    "read_rows",
]
