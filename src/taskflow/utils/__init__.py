"""Utility functions."""

from .datetime import format_due_date, from_iso, is_overdue, now_utc, parse_due_date

__all__ = ["format_due_date", "from_iso", "is_overdue", "now_utc", "parse_due_date"]
