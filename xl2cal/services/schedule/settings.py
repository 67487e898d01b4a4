"""Export settings supplied by the caller."""

from __future__ import annotations

from datetime import date
from typing import FrozenSet, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .times import parse_duration_spec

DEFAULT_PRODUCT_ID = "-//xl2cal//Schedule to iCalendar//EN"


def _current_year() -> int:
    return date.today().year


class ExportSettings(BaseModel):
    """Configuration consumed by the parsers and the calendar generator."""

    model_config = ConfigDict(frozen=True)

    default_year: int = Field(default_factory=_current_year)
    prefix: str = ""
    default_duration: str = "2:00"
    calendars: FrozenSet[str] = Field(default_factory=frozenset)
    timezone: str | None = None
    product_id: str = DEFAULT_PRODUCT_ID

    @field_validator("default_year")
    @classmethod
    def _four_digit_year(cls, value: int) -> int:
        if not 1000 <= value <= 9999:
            raise ValueError(f"default_year must have four digits, got {value}")
        return value

    @field_validator("default_duration", mode="before")
    @classmethod
    def _bounded_duration(cls, value: object) -> str:
        text = str(value).strip()
        parse_duration_spec(text)
        return text

    @field_validator("prefix", mode="before")
    @classmethod
    def _strip_prefix(cls, value: object) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("calendars", mode="before")
    @classmethod
    def _clean_calendars(cls, value: object) -> FrozenSet[str]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        return frozenset(str(tag).strip() for tag in value if str(tag).strip())

    @property
    def duration(self) -> Tuple[int, int]:
        return parse_duration_spec(self.default_duration)

    @property
    def summary_prefix(self) -> str:
        """Prefix with a separating space, or empty."""

        return f"{self.prefix} " if self.prefix else ""

    @property
    def filter_active(self) -> bool:
        return bool(self.calendars)


__all__ = ["DEFAULT_PRODUCT_ID", "ExportSettings"]
