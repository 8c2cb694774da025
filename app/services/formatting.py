"""Display formatting and search helpers shared by the section routers."""
from __future__ import annotations

from datetime import date, datetime, time


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(value: date | datetime) -> str:
    """Format as e.g. ``January 1st, 2025``."""

    return f"{value.strftime('%B')} {_ordinal(value.day)}, {value.year}"


def format_short_date(value: date | datetime) -> str:
    """Format as e.g. ``Jan 01, 2025``."""

    return value.strftime("%b %d, %Y")


def parse_clock_time(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()


def format_clock_time(value: str | time) -> str:
    """Format a 24h ``HH:MM`` string as e.g. ``7:30 PM``."""

    if isinstance(value, str):
        value = parse_clock_time(value)
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {meridiem}"


def combine_date_time(day: date, clock: str | None) -> datetime:
    """Build the stored timestamp; midnight when no time was given."""

    if clock:
        return datetime.combine(day, parse_clock_time(clock))
    return datetime.combine(day, time.min)


def matches_search(term: str | None, *fields: str | None) -> bool:
    """Case-insensitive substring match of ``term`` against any non-empty field."""

    if not term or not term.strip():
        return True
    needle = term.strip().lower()
    return any(field and needle in field.lower() for field in fields)
