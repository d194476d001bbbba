"""Wall-clock time parsing and countdown formatting.

All time strings in a schedule pass through normalize_to_24_hour(); nothing
else parses them.
"""

import re

from .errors import ParseError

_PERIOD_RE = re.compile(r"am|pm", re.IGNORECASE)
_TWELVE_HOUR_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(am|pm)", re.IGNORECASE)


def normalize_to_24_hour(text: str) -> str:
    """Convert "9:00 AM" / "1:30 pm" to "09:00" / "13:30".

    Text without an AM/PM marker is assumed to be 24-hour already and is
    returned stripped but otherwise unchanged.
    """
    trimmed = text.strip()
    if not _PERIOD_RE.search(trimmed):
        return trimmed

    match = _TWELVE_HOUR_RE.search(trimmed)
    if not match:
        raise ParseError(f"Invalid 12-hour time format: {text}")

    hours = int(match.group(1))
    minutes = match.group(2)
    period = match.group(3).lower()
    if period == "pm" and hours != 12:
        hours += 12
    elif period == "am" and hours == 12:
        hours = 0
    return f"{hours:02d}:{minutes}"


def time_to_minutes(text: str) -> int:
    """Minutes since midnight for a 12-hour or 24-hour time string."""
    normalized = normalize_to_24_hour(text)
    hours, _, minutes = normalized.partition(":")
    try:
        return int(hours) * 60 + int(minutes)
    except ValueError:
        raise ParseError(f"Invalid time format: {text}") from None


def format_to_12_hour(text: str) -> str:
    """Render a 24-hour "HH:MM" string as "H:MM AM/PM"."""
    hours_str, _, minutes_str = text.partition(":")
    hours = int(hours_str)
    minutes = int(minutes_str)
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {period}"


def format_countdown(seconds: int) -> str:
    """Format a remaining-seconds count as "H:MM:SS", or "M:SS" under an hour.

    Zero and negative counts collapse to "0:00:00".
    """
    if seconds <= 0:
        return "0:00:00"
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_duration(minutes: int) -> str:
    """Block length as "H:MM" (e.g. "1:05"), or bare minutes under an hour."""
    if minutes >= 60:
        return f"{minutes // 60}:{minutes % 60:02d}"
    return str(minutes)
