"""Schedule source: finds the active schedule file and watches its folder.

The folder persists across reinstalls and may hold several schedule files;
the most recently modified one is authoritative. Change events are debounced
and handed to the consumer through a queue, never called from inside the
watch loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from pathlib import Path

from watchfiles import Change, awatch

from . import config
from .config import DEBOUNCE_SECONDS, is_schedule_file
from .errors import WatcherError
from .logging_config import get_logger

logger = get_logger(__name__)


def _is_suspicious_name(name: str) -> bool:
    return ".." in name or "/" in name or "\\" in name


class ScheduleSource:
    """Owns the schedule folder: discovery, watching, debounced change events."""

    def __init__(self, folder: Path | None = None, debounce: float = DEBOUNCE_SECONDS) -> None:
        self._folder = Path(folder) if folder is not None else config.schedule_dir()
        self._debounce = debounce
        # One pending event is enough: a reload always reads the newest file.
        self._queue: asyncio.Queue[Path] = asyncio.Queue(maxsize=1)
        self._tasks: list[asyncio.Task[None]] = []
        self._timer: asyncio.TimerHandle | None = None
        self._stop_event: asyncio.Event | None = None
        self._on_change: Callable[[], Awaitable[object]] | None = None
        self._last_path: Path | None = None
        self._restarts = 0
        self._running = False

    @property
    def folder(self) -> Path:
        return self._folder

    @property
    def watching(self) -> bool:
        """Whether watch() is active."""
        return self._running

    @property
    def restart_count(self) -> int:
        """How many times the watch has been recreated after an error."""
        return self._restarts

    # --- Discovery ---

    def ensure_folder_exists(self) -> bool:
        """Create the schedule folder if needed. Returns False if that failed."""
        if self._folder.is_dir():
            return True
        try:
            self._folder.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.exception("Error creating schedule folder %s", self._folder)
            return False
        logger.info("Created schedule folder: %s", self._folder)
        return True

    def get_most_recent_candidate_file(self) -> Path | None:
        """Newest .yaml/.yml file in the folder, or None if there isn't one."""
        if not self._folder.is_dir():
            return None

        most_recent: Path | None = None
        most_recent_mtime = 0.0
        try:
            entries = list(self._folder.iterdir())
        except OSError:
            logger.exception("Error listing schedule folder %s", self._folder)
            return None

        for path in entries:
            if not is_schedule_file(path.name):
                continue
            if _is_suspicious_name(path.name):
                logger.warning("Skipping suspicious filename: %s", path.name)
                continue
            try:
                st = path.stat()
            except OSError:
                continue  # Removed between listing and stat
            if not path.is_file():
                continue
            if st.st_mtime > most_recent_mtime:
                most_recent_mtime = st.st_mtime
                most_recent = path

        return most_recent

    def has_candidate_file(self) -> bool:
        return self.get_most_recent_candidate_file() is not None

    # --- Watching ---

    async def watch(self, on_change: Callable[[], Awaitable[object]]) -> None:
        """Start watching the folder; on_change runs once per quiet period after changes."""
        if self._running:
            await self.stop_watching()
        self._on_change = on_change
        self.ensure_folder_exists()
        self._running = True
        self._stop_event = asyncio.Event()
        self._tasks = [
            asyncio.create_task(self._dispatch_loop()),
            asyncio.create_task(self._watch_loop()),
        ]
        logger.info("Started watching schedule folder for changes")

    async def stop_watching(self) -> None:
        """Cancel the pending debounce and release the watch. Safe to call twice."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._stop_event is not None:
            self._stop_event.set()
        was_running = self._running
        self._running = False
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tasks.clear()
        # Events left undelivered belong to this session, not the next one.
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
        self._on_change = None
        if was_running:
            logger.info("Stopped watching schedule folder")

    async def _watch_loop(self) -> None:
        """Run the folder watch, recreating it whenever it fails.

        There is no retry cap: a folder that keeps failing is retried for as
        long as the source is watching.
        """
        while self._running:
            try:
                async for changes in awatch(self._folder, stop_event=self._stop_event, recursive=False):
                    if not self._running:
                        break
                    self._handle_changes(changes)
                if self._running:
                    raise WatcherError(f"watch on {self._folder} ended unexpectedly")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if not self._running:
                    break
                self._restarts += 1
                logger.error("File watcher error (restarting): %s: %s", type(e).__name__, e)
                self.ensure_folder_exists()
                await asyncio.sleep(0)

    def _handle_changes(self, changes: Iterable[tuple[Change, str]]) -> None:
        """Restart the debounce timer for any change naming a schedule file."""
        for _change, path_str in changes:
            path = Path(path_str)
            if not is_schedule_file(path.name):
                continue
            self._last_path = path
            self._restart_timer()

    def _restart_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce, self._timer_fired)

    def _timer_fired(self) -> None:
        self._timer = None
        if not self._running:
            return
        if self._queue.full():
            logger.debug("Change event already pending, skipping")
            return
        logger.debug("Schedule folder settled after change to %s", self._last_path)
        self._queue.put_nowait(self._last_path or self._folder)

    async def _dispatch_loop(self) -> None:
        """Drain change events and deliver them via the callback."""
        while self._running:
            try:
                await asyncio.wait_for(self._queue.get(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            callback = self._on_change
            if callback is None:
                continue
            try:
                await callback()
            except Exception:
                logger.exception("Error in schedule change callback")
