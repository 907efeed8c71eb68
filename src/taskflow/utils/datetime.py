"""Utilities for due-date handling."""

from datetime import UTC, date, datetime, time


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def from_iso(value: str) -> datetime:
    """Parse ISO format string to datetime."""
    # Handle both 'Z' suffix and explicit timezone
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_due_date(value: str) -> datetime | None:
    """Parse user input from the task form.

    Accepts ``YYYY-MM-DD`` (end of that day, UTC) or a full ISO timestamp.
    Blank input means no due date.

    Raises:
        ValueError: if the value is not a recognizable date
    """
    value = value.strip()
    if not value:
        return None
    if len(value) == 10:
        day = date.fromisoformat(value)
        return datetime.combine(day, time(23, 59, 59), tzinfo=UTC)
    return _as_utc(from_iso(value))


def format_due_date(dt: datetime | None) -> str:
    """Short display form for the task table."""
    if dt is None:
        return "-"
    return _as_utc(dt).strftime("%Y-%m-%d")


def is_overdue(dt: datetime | None, now: datetime | None = None) -> bool:
    """True when a due date has passed."""
    if dt is None:
        return False
    return _as_utc(dt) < (now or now_utc())
