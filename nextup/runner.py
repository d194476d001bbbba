"""Runner: keeps the display summary live and reloads on schedule changes.

This is the host-side heartbeat: a 1-second tick re-evaluates the display
summary, and change events from the ScheduleSource trigger a reload. Both
run as tasks on one event loop, so they never overlap.
"""

import asyncio
import signal
import sys
from collections.abc import Callable

from . import config
from .config import TICK_INTERVAL
from .errors import ScheduleError, classify_load_error
from .logging_config import get_logger, level_from_env, setup_logging
from .schedule import ScheduleEngine
from .source import ScheduleSource

logger = get_logger(__name__)


class ScheduleRunner:
    """Drives an engine from a tick loop and its source's change events."""

    def __init__(
        self,
        engine: ScheduleEngine,
        on_tick: Callable[[str], object] | None = None,
        on_reload: Callable[[], object] | None = None,
        interval: float = TICK_INTERVAL,
    ) -> None:
        self._engine = engine
        self._on_tick = on_tick
        self._on_reload = on_reload
        self._interval = interval
        self._tick_task: asyncio.Task[None] | None = None
        self._stop: asyncio.Event | None = None

    @property
    def engine(self) -> ScheduleEngine:
        return self._engine

    def load(self) -> bool:
        """Try to (re)load the schedule. Returns False and logs on failure."""
        try:
            self._engine.reload()
            return True
        except (ScheduleError, OSError) as e:
            failure = classify_load_error(e)
            if failure.first_run:
                logger.warning(
                    "No schedule file found. Add a .yaml schedule to %s",
                    self._engine.source.folder,
                )
            elif self._engine.loaded:
                logger.error("Error reloading schedule (%s), keeping previous: %s", failure.category, failure.text)
            else:
                logger.error("Failed to load schedule (%s): %s", failure.category, failure.text)
            return False

    def tick(self) -> str | None:
        """Evaluate the display summary once and pass it to on_tick."""
        if not self._engine.loaded:
            return None
        text = self._engine.get_display_time()
        if self._on_tick is not None:
            self._on_tick(text)
        return text

    async def _handle_change(self) -> None:
        logger.info("Schedule file changed, reloading...")
        if not self.load():
            return
        if self._on_reload is not None:
            self._on_reload()
        self.tick()

    async def _tick_loop(self) -> None:
        while True:
            try:
                self.tick()
            except ScheduleError:
                logger.exception("Tick error")
            await asyncio.sleep(self._interval)

    async def start(self) -> None:
        """Initial load, then start watching and ticking.

        A missing or broken schedule does not stop the runner: the watch
        stays up so a later file can be picked up.
        """
        self.load()
        await self._engine.source.watch(self._handle_change)
        self._tick_task = asyncio.create_task(self._tick_loop())

    async def stop(self) -> None:
        """Stop ticking and watching. Safe to call twice."""
        if self._tick_task is not None:
            self._tick_task.cancel()
            try:
                await self._tick_task
            except asyncio.CancelledError:
                pass
            self._tick_task = None
        await self._engine.source.stop_watching()

    async def run_forever(self) -> None:
        """Run until SIGINT/SIGTERM."""
        self._stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._stop.set)
            except NotImplementedError:
                pass  # Windows

        await self.start()
        try:
            await self._stop.wait()
        finally:
            logger.info("Shutting down...")
            await self.stop()


def _print_display(text: str) -> None:
    sys.stdout.write(f"\r\033[K{text}")
    sys.stdout.flush()


def run_console(interval: float = TICK_INTERVAL) -> None:
    """Console host: prints the live display summary on one line."""
    setup_logging(level=level_from_env(), live_line=True)
    config.ensure_dirs()

    engine = ScheduleEngine(ScheduleSource())
    runner = ScheduleRunner(engine, on_tick=_print_display, interval=interval)

    logger.info("=== Next Up ===")
    logger.info("Schedule folder: %s", engine.source.folder)
    logger.info("Press Ctrl+C to stop")

    asyncio.run(runner.run_forever())
    sys.stdout.write("\n")
    logger.info("Runner stopped.")
