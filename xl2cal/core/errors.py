"""Custom exceptions used across xl2cal."""


class Xl2CalError(Exception):
    """Base error for the application."""


class ConfigError(Xl2CalError):
    """Configuration related error."""


class SheetReadError(Xl2CalError):
    """Raised when a spreadsheet cannot be read into rows."""


class ExportAborted(Xl2CalError):
    """Raised when the user declines to continue past a bad record."""

    def __init__(self, line: int, message: str) -> None:
        super().__init__(f"Run aborted at line {line}: {message}")
        self.line = line
        self.message = message


class ScheduleParseError(Xl2CalError):
    """Raised when a schedule field cannot be parsed."""


class DateParseError(ScheduleParseError):
    """Raised when a day or month field is not understood."""


class TimeParseError(ScheduleParseError):
    """Raised when a start time is not understood."""
