"""Column role map for schedule sheets."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, Mapping

from xl2cal.core.errors import ConfigError


class ColumnRole(str, Enum):
    """Semantic label that can be bound to one sheet column."""

    DAY = "Day"
    MONTH = "Month"
    DATE = "Date"
    START = "Start"
    END = "End"
    DURATION = "Duration"
    EVENT = "Event"
    HW = "HW"
    CALENDAR = "Calendar"

    @classmethod
    def parse(cls, name: "str | ColumnRole") -> "ColumnRole":
        if isinstance(name, ColumnRole):
            return name
        wanted = str(name).strip().lower()
        for role in cls:
            if role.value.lower() == wanted:
                return role
        raise ConfigError(f"unknown column role: {name!r}")


# Date and Day/Month are alternative ways to give the event date.
_EXCLUSIVE: Dict[ColumnRole, tuple[ColumnRole, ...]] = {
    ColumnRole.DATE: (ColumnRole.DAY, ColumnRole.MONTH),
    ColumnRole.DAY: (ColumnRole.DATE,),
    ColumnRole.MONTH: (ColumnRole.DATE,),
}


class ColumnRoles:
    """Bijective partial mapping between roles and zero-based column indices.

    No two roles share a column, and Date is never mapped together with Day
    or Month. Every mutation restores both invariants before returning.
    """

    def __init__(self) -> None:
        self._by_role: Dict[ColumnRole, int] = {}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, int]) -> "ColumnRoles":
        """Build a role map by assigning each ``role -> index`` pair in order."""

        roles = cls()
        for name, index in mapping.items():
            roles.assign(name, index)
        return roles

    def assign(self, role: "str | ColumnRole", index: int) -> None:
        role = ColumnRole.parse(role)
        if index < 0:
            raise ConfigError(f"column index for {role.value} must be >= 0, got {index}")
        self.clear_column(index)
        self._by_role.pop(role, None)
        for other in _EXCLUSIVE.get(role, ()):
            self._by_role.pop(other, None)
        self._by_role[role] = index

    def unassign(self, role: "str | ColumnRole") -> None:
        self._by_role.pop(ColumnRole.parse(role), None)

    def clear_column(self, index: int) -> None:
        held = self.role_at(index)
        if held is not None:
            del self._by_role[held]

    def has_role(self, role: "str | ColumnRole") -> bool:
        return ColumnRole.parse(role) in self._by_role

    def index_of(self, role: "str | ColumnRole") -> int | None:
        return self._by_role.get(ColumnRole.parse(role))

    def role_at(self, index: int) -> ColumnRole | None:
        for role, col in self._by_role.items():
            if col == index:
                return role
        return None

    def uses_day_month(self) -> bool:
        return self.has_role(ColumnRole.DAY) and self.has_role(ColumnRole.MONTH)

    def is_exportable(self) -> bool:
        """Whether enough roles are mapped to generate a calendar."""

        has_date = self.uses_day_month() or self.has_role(ColumnRole.DATE)
        return has_date and self.has_role(ColumnRole.START) and self.has_role(ColumnRole.EVENT)

    def missing_for_export(self) -> list[str]:
        missing: list[str] = []
        if not (self.uses_day_month() or self.has_role(ColumnRole.DATE)):
            missing.append("Date (or Day and Month)")
        for role in (ColumnRole.START, ColumnRole.EVENT):
            if not self.has_role(role):
                missing.append(role.value)
        return missing

    def as_dict(self) -> Dict[str, int]:
        return {role.value: index for role, index in self}

    def __iter__(self) -> Iterator[tuple[ColumnRole, int]]:
        return iter(sorted(self._by_role.items(), key=lambda item: item[1]))

    def __len__(self) -> int:
        return len(self._by_role)

    def __repr__(self) -> str:
        return f"ColumnRoles({self.as_dict()!r})"


__all__ = ["ColumnRole", "ColumnRoles"]
