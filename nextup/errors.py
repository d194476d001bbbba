"""Error types for schedule loading and watching, plus load-failure classification.

ParseError and ValidationError fail a load or reload. MissingSourceError is
kept distinct so the host can run its first-run flow. WatcherError is only
ever logged; the source restarts its watch.
"""

from dataclasses import dataclass


class ScheduleError(Exception):
    """Base class for all schedule errors."""


class ParseError(ScheduleError):
    """A time string does not match its format."""


class ValidationError(ScheduleError):
    """The schedule document is missing required fields or has the wrong shape."""


class MissingSourceError(ScheduleError):
    """No candidate schedule file exists in the schedule folder."""


class WatcherError(ScheduleError):
    """The file-system watch failed."""


class NotLoadedError(ScheduleError):
    """A query was made before any schedule document was loaded."""


@dataclass
class LoadFailure:
    """Structured view of a failed load, for the host to act on."""

    first_run: bool  # No schedule file yet; show setup guidance
    category: str  # "missing", "parse", "validation", "io", "unknown"
    text: str  # The error text for logging


def classify_load_error(error: Exception) -> LoadFailure:
    """Classify an exception raised by a load or reload."""
    text = str(error)
    if isinstance(error, MissingSourceError):
        return LoadFailure(first_run=True, category="missing", text=text)
    if isinstance(error, ParseError):
        return LoadFailure(first_run=False, category="parse", text=text)
    if isinstance(error, ValidationError):
        return LoadFailure(first_run=False, category="validation", text=text)
    if isinstance(error, OSError):
        return LoadFailure(first_run=False, category="io", text=text)
    return LoadFailure(first_run=False, category="unknown", text=text)
