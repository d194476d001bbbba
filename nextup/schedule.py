"""Schedule engine: answers "what is on now, and what is next?".

Holds one active ScheduleDocument. reload() builds a fresh document and swaps
it in with a single assignment, so a query sees either the old document or
the new one, never a mix. A failed reload leaves the old document in place.
"""

from datetime import datetime
from pathlib import Path

import yaml

from .errors import MissingSourceError, NotLoadedError, ValidationError
from .logging_config import get_logger
from .source import ScheduleSource
from .template import render_description
from .timefmt import format_countdown
from .types import Block, BlockDetails, Config, ScheduleDocument, day_name

logger = get_logger(__name__)


def load_document(path: Path) -> ScheduleDocument:
    """Read and validate a schedule file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValidationError(f"Invalid schedule format: {path.name} is not UTF-8 text") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid schedule format: {path.name} is not valid YAML ({e})") from e
    return ScheduleDocument.from_dict(data)


def _minutes_of(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def _seconds_until(target_minutes: int, moment: datetime) -> int:
    return target_minutes * 60 - (_minutes_of(moment) * 60 + moment.second)


class ScheduleEngine:
    """Query engine over the active schedule document."""

    def __init__(self, source: ScheduleSource, document: ScheduleDocument | None = None) -> None:
        self._source = source
        self._document = document
        self._path: Path | None = None

    @property
    def source(self) -> ScheduleSource:
        return self._source

    @property
    def loaded(self) -> bool:
        return self._document is not None

    @property
    def path(self) -> Path | None:
        """File the active document was loaded from, if any."""
        return self._path

    @property
    def document(self) -> ScheduleDocument:
        document = self._document
        if document is None:
            raise NotLoadedError("No schedule loaded")
        return document

    @property
    def config(self) -> Config:
        return self.document.config

    def reload(self) -> ScheduleDocument:
        """Load the newest schedule file and make it active.

        Raises MissingSourceError, ValidationError, ParseError or OSError;
        on any of these the previous document stays active.
        """
        self._source.ensure_folder_exists()
        path = self._source.get_most_recent_candidate_file()
        if path is None:
            raise MissingSourceError(f"No schedule file found in {self._source.folder}")
        document = load_document(path)
        self._document, self._path = document, path
        logger.info("Loaded schedule from %s", path)
        return document

    # --- Matching ---

    def get_todays_blocks(self, moment: datetime | None = None) -> tuple[Block, ...]:
        """Blocks for the weekday of `moment` (default: now), in document order."""
        moment = moment or datetime.now()
        return self.document.blocks_for(day_name(moment))

    def get_current_block(self, moment: datetime | None = None) -> Block | None:
        """First block of the day with start <= now < end."""
        moment = moment or datetime.now()
        m = _minutes_of(moment)
        for block in self.get_todays_blocks(moment):
            if block.start_minutes <= m < block.end_minutes:
                return block
        return None

    def get_next_block(self, moment: datetime | None = None) -> Block | None:
        """First block in list order that starts after now.

        This is a first-match scan, not a search for the earliest start: an
        out-of-order day can yield a later block than the nearest one.
        """
        moment = moment or datetime.now()
        m = _minutes_of(moment)
        for block in self.get_todays_blocks(moment):
            if block.start_minutes > m:
                return block
        return None

    def get_minutes_until_next_block(self, moment: datetime | None = None) -> int | None:
        moment = moment or datetime.now()
        block = self.get_next_block(moment)
        if block is None:
            return None
        return block.start_minutes - _minutes_of(moment)

    def get_minutes_from_end_of_current_to_next(self, moment: datetime | None = None) -> int | None:
        """Gap between the end of the current block and the start of the next one.

        None unless both exist. The host uses this to decide on an "on deck"
        preview while the current block is still running.
        """
        moment = moment or datetime.now()
        current = self.get_current_block(moment)
        upcoming = self.get_next_block(moment)
        if current is None or upcoming is None:
            return None
        return upcoming.start_minutes - current.end_minutes

    # --- Countdowns ---

    def get_time_remaining(self, moment: datetime | None = None) -> str | None:
        moment = moment or datetime.now()
        block = self.get_current_block(moment)
        if block is None:
            return None
        return format_countdown(_seconds_until(block.end_minutes, moment))

    def get_time_until_next(self, moment: datetime | None = None) -> str | None:
        moment = moment or datetime.now()
        block = self.get_next_block(moment)
        if block is None:
            return None
        return format_countdown(_seconds_until(block.start_minutes, moment))

    def get_display_time(self, moment: datetime | None = None) -> str:
        """Summary line for the host: time left, countdown to next, or idle text."""
        moment = moment or datetime.now()
        cfg = self.config

        remaining = self.get_time_remaining(moment)
        if remaining is not None:
            return "Done In: " + remaining

        minutes_until = self.get_minutes_until_next_block(moment)
        if minutes_until is not None and minutes_until <= cfg.countdown_threshold_minutes:
            return "Next In: " + (self.get_time_until_next(moment) or "0:00:00")

        return cfg.no_class_text

    # --- Details ---

    def get_current_block_details(self, moment: datetime | None = None) -> BlockDetails | None:
        moment = moment or datetime.now()
        block = self.get_current_block(moment)
        if block is None:
            return None
        return BlockDetails(
            block_name=block.block_name,
            description=block.description,
            description_lines=tuple(render_description(block.description, block)),
            start_time=block.start_time,
            end_time=block.end_time,
            time_remaining=self.get_time_remaining(moment),
        )

    def get_next_block_details(self, moment: datetime | None = None) -> BlockDetails | None:
        moment = moment or datetime.now()
        block = self.get_next_block(moment)
        if block is None:
            return None
        return BlockDetails(
            block_name=block.block_name,
            description=block.description,
            description_lines=tuple(render_description(block.description, block)),
            start_time=block.start_time,
            end_time=block.end_time,
        )
