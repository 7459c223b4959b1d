from __future__ import annotations

from datetime import date, datetime, time

from ..core.constants import DATE_FORMAT, TIME_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_hhmm(value: str) -> time:
    """Parse a wall-clock 'HH:MM' string into a time."""
    return datetime.strptime(value, TIME_FORMAT).time()


def format_hhmm(value: time) -> str:
    return value.strftime(TIME_FORMAT)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into naive local time.

    Offsets (including a trailing ``Z``) are converted to the server's local
    zone; shift windows and stored timestamps are all naive local values.
    """

    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def to_stored_precision(value: datetime) -> datetime:
    """Drop sub-second precision; DATETIME columns keep whole seconds."""
    return value.replace(microsecond=0)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
