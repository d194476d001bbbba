"""Type definitions for schedule documents.

Documents are immutable once built: a reload builds a new ScheduleDocument
and replaces the previous one wholesale.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from typing_extensions import Self

from .config import DEFAULT_COUNTDOWN_THRESHOLD, DEFAULT_NO_CLASS_TEXT
from .errors import ValidationError
from .timefmt import time_to_minutes

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def day_name(moment: datetime) -> str:
    """Weekday name of a moment, independent of locale."""
    return WEEKDAYS[moment.weekday()]


def _time_text(value: Any, key: str) -> str:
    """Coerce a raw startTime/endTime value to text.

    YAML 1.1 reads an unquoted 9:00 as the base-60 integer 540, which is
    already minutes since midnight.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid schedule format: {key} must be a time string")
    if isinstance(value, int):
        return f"{value // 60:02d}:{value % 60:02d}"
    if isinstance(value, str):
        return value
    raise ValidationError(f"Invalid schedule format: {key} must be a time string, got {type(value).__name__}")


@dataclass(frozen=True)
class Config:
    """Display settings carried by a schedule document."""

    countdown_threshold_minutes: int = DEFAULT_COUNTDOWN_THRESHOLD
    no_class_text: str = DEFAULT_NO_CLASS_TEXT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Create from dict, filling defaults for missing keys."""
        threshold = data.get("countdownThreshold")
        if threshold is None:
            threshold = data.get("countdownThresholdMinutes")
        no_class_text = data.get("noClassText")
        if threshold is None:
            threshold = DEFAULT_COUNTDOWN_THRESHOLD
        elif isinstance(threshold, bool) or not isinstance(threshold, int) or threshold <= 0:
            raise ValidationError(
                f"Invalid schedule format: countdown threshold must be a positive integer, got {threshold!r}"
            )
        if no_class_text is None:
            no_class_text = DEFAULT_NO_CLASS_TEXT
        return cls(countdown_threshold_minutes=threshold, no_class_text=str(no_class_text))


@dataclass(frozen=True)
class Block:
    """One scheduled interval within a day.

    start_minutes/end_minutes are derived at construction, so a bad time
    string fails the load rather than a later query.
    """

    block_name: str
    description: str
    start_time: str
    end_time: str
    start_minutes: int = field(init=False, repr=False, compare=False)
    end_minutes: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_minutes", time_to_minutes(self.start_time))
        object.__setattr__(self, "end_minutes", time_to_minutes(self.end_time))

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        """Create from a raw block mapping.

        Raises ValidationError on a wrong shape and ParseError on a bad time.
        """
        if not isinstance(data, Mapping):
            raise ValidationError(f"Invalid schedule format: block must be an object, got {type(data).__name__}")
        for key in ("startTime", "endTime"):
            if key not in data:
                raise ValidationError(f"Invalid schedule format: block missing {key}")
        name = data.get("blockName")
        description = data.get("description")
        return cls(
            block_name=str(name) if name is not None else "Unknown",
            description=str(description) if description is not None else "",
            start_time=_time_text(data["startTime"], "startTime"),
            end_time=_time_text(data["endTime"], "endTime"),
        )


@dataclass(frozen=True)
class ScheduleDocument:
    """A whole parsed schedule: per-weekday block lists plus config."""

    days: Mapping[str, tuple[Block, ...]]
    config: Config = field(default_factory=Config)

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", MappingProxyType(dict(self.days)))

    def blocks_for(self, day: str) -> tuple[Block, ...]:
        """Blocks for a weekday name, in document order; empty if the day is absent."""
        return self.days.get(day, ())

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        """Validate a parsed document and build it.

        Raises ValidationError if the top level, `schedule` or `config` is
        missing or not a mapping.
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Invalid schedule format: expected object")
        schedule = data.get("schedule")
        if not isinstance(schedule, Mapping):
            raise ValidationError("Invalid schedule format: missing or invalid schedule property")
        config = data.get("config")
        if not isinstance(config, Mapping):
            raise ValidationError("Invalid schedule format: missing or invalid config property")

        days: dict[str, tuple[Block, ...]] = {}
        for day, entries in schedule.items():
            if entries is None:
                entries = []
            if not isinstance(entries, list):
                raise ValidationError(f"Invalid schedule format: {day} must be a list of blocks")
            days[str(day)] = tuple(Block.from_dict(entry) for entry in entries)

        return cls(days=days, config=Config.from_dict(config))


@dataclass(frozen=True)
class BlockDetails:
    """What the host shows for a current or upcoming block."""

    block_name: str
    description: str
    description_lines: tuple[str, ...]
    start_time: str
    end_time: str
    time_remaining: str | None = None
