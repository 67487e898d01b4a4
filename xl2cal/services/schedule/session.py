"""Explicit state for one loaded schedule: column roles plus normalized rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from .cells import Row, normalize_rows
from .roles import ColumnRole, ColumnRoles


@dataclass(slots=True)
class ScheduleSession:
    """Role map and cached rows shared by grouping, validation and generation.

    Both are replaced wholesale on reload; nothing else is shared between runs.
    """

    roles: ColumnRoles = field(default_factory=ColumnRoles)
    rows: tuple[Row, ...] = ()

    @classmethod
    def from_raw(
        cls, raw_rows: Sequence[Sequence[object]], columns: Mapping[str, int] | ColumnRoles
    ) -> "ScheduleSession":
        roles = columns if isinstance(columns, ColumnRoles) else ColumnRoles.from_mapping(columns)
        session = cls(roles=roles)
        session.load(raw_rows)
        return session

    def load(self, raw_rows: Sequence[Sequence[object]]) -> None:
        """Normalize and cache a freshly read sheet."""

        self.rows = normalize_rows(raw_rows)

    def cell(self, row: Row, role: ColumnRole) -> str:
        index = self.roles.index_of(role)
        if index is None or index >= len(row):
            return ""
        return row[index]

    def optional_cell(self, row: Row, role: ColumnRole) -> str | None:
        """Cell text, or None when the role is not mapped."""

        if not self.roles.has_role(role):
            return None
        return self.cell(row, role)

    def is_exportable(self) -> bool:
        return self.roles.is_exportable()

    def numbered_rows(self):
        """Yield ``(line, row)`` with 1-based sheet line numbers."""

        return enumerate(self.rows, start=1)


__all__ = ["ScheduleSession"]
