"""Clock-time and duration arithmetic — everything is signed integer minutes."""

import re

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"^(<?)(\d{1,2}):(\d{2})(am|pm)?(>?)$", re.IGNORECASE)

# Sign, then hours and minutes in either order, each at most once.
DURATION_PATTERN = re.compile(
    r"^([+-]?)(?:(\d+)h(?:(\d+)m)?|(\d+)m(?:(\d+)h)?)$"
)


def parse_time_to_minutes(token: str) -> int | None:
    """Convert a clock-time token like ``8:00``, ``5:30pm``, ``<23:00`` or ``1:00>``.

    Returns minutes relative to midnight of the record's day. A leading ``<``
    moves the time to the previous day, a trailing ``>`` to the next one.
    Returns None when the token is not a clock time.
    """
    match = TIME_PATTERN.match(token.strip())
    if not match:
        return None

    shift_prev, hours_str, minutes_str, suffix, shift_next = match.groups()
    hours = int(hours_str)
    minutes = int(minutes_str)
    if minutes > 59:
        return None

    suffix = (suffix or "").lower()
    if suffix == "pm" and hours != 12:
        hours += 12
    elif suffix == "am" and hours == 12:
        hours = 0

    total = hours * 60 + minutes
    if shift_prev:
        total -= MINUTES_PER_DAY
    if shift_next:
        total += MINUTES_PER_DAY
    return total


def parse_duration_string(token: str) -> int | None:
    """Convert ``2h30m``, ``-1h``, ``45m``, ``+30m4h`` to signed minutes.

    Returns None when the token has neither an hours nor a minutes part.
    """
    if not token:
        return None
    match = DURATION_PATTERN.match(token.strip())
    if not match:
        return None

    sign, h_first, m_after_h, m_first, h_after_m = match.groups()
    hours = int(h_first or h_after_m or 0)
    minutes = int(m_after_h or m_first or 0)
    total = hours * 60 + minutes
    return -total if sign == "-" else total


def range_minutes(start: int, end: int) -> int:
    """Length of a start-end range; an end before the start wraps past midnight once."""
    duration = end - start
    if duration < 0:
        duration += MINUTES_PER_DAY
    return duration


def format_minutes(minutes: int) -> str:
    """Render minutes as ``[-]<h>h<m>m``, omitting zero parts (``0m`` for zero)."""
    sign = "-" if minutes < 0 else ""
    hours, mins = divmod(abs(minutes), 60)
    if hours == 0:
        return f"{sign}{mins}m"
    if mins == 0:
        return f"{sign}{hours}h"
    return f"{sign}{hours}h{mins}m"


def minutes_to_decimal_hours(minutes: int | float) -> float:
    """Minutes as hours rounded to two decimals (Python's round-half-even)."""
    return round(minutes / 60, 2)
