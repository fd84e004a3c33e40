"""Date utilities for fintrack.

Pure functions for ISO date parsing and window calculations. The only impure
function is today().
"""

import re
from datetime import date, timedelta

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today() -> date:
    """Return the current local calendar date."""
    return date.today()


def parse_iso_date(value: object) -> date | None:
    """Parse a strict YYYY-MM-DD string into a date.

    Args:
        value: Raw date value.

    Returns:
        The parsed date, or None if the value is not a valid calendar date in
        YYYY-MM-DD form.
    """
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not ISO_DATE_PATTERN.match(text):
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def trailing_window_start(reference: date, days: int = 7) -> date:
    """Calculate the first day of a trailing window.

    Args:
        reference: Last day of the window (usually today).
        days: Window length in days.

    Returns:
        The date `days` days before `reference`. The window is inclusive of
        this boundary.
    """
    return reference - timedelta(days=days)
