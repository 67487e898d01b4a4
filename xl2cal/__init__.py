"""xl2cal converts schedule spreadsheets into iCalendar files."""

__version__ = "2.0.0"
