"""Logging setup for Next Up.

Records go to stderr and to {app_dir}/logs/next-up.log (size-capped, with
a few numbered backups). The console runner keeps a live summary on the
current terminal line, so console records clear that line first; the next
tick redraws it below the record.

Entry points call setup_logging() once; modules use get_logger(__name__).
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from .config import log_dir

LOG_FILE = "next-up.log"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUPS = 5

_CLEAR_LINE = "\r\033[K"


def level_from_env(default: int = logging.INFO) -> int:
    """Log level named by $NEXT_UP_LOG_LEVEL (e.g. "DEBUG"), else the default."""
    name = os.environ.get("NEXT_UP_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


class ConsoleHandler(logging.StreamHandler):
    """Stream handler that flushes every record.

    With clear_line set, each record starts by erasing the terminal line, so
    it never lands after a live summary that was written without a newline.
    """

    def __init__(self, stream=None, clear_line: bool = False):
        super().__init__(stream if stream is not None else sys.stderr)
        self.clear_line = clear_line

    def emit(self, record):
        if self.clear_line:
            try:
                self.stream.write(_CLEAR_LINE)
            except Exception:
                self.handleError(record)
                return
        super().emit(record)
        self.flush()


def setup_logging(
    level: int = logging.INFO,
    console: bool = True,
    file: bool = True,
    live_line: bool = False,
) -> logging.Logger:
    """Configure the root logger. Call once per entry point.

    Args:
        level: Minimum log level
        console: Log to stderr
        file: Log to logs/next-up.log under the app dir
        live_line: The console shares the terminal with a live summary line
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if console:
        console_handler = ConsoleHandler(clear_line=live_line)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S")
        )
        root.addHandler(console_handler)

    if file:
        logs = log_dir()
        logs.mkdir(parents=True, exist_ok=True)
        # A watch folder that keeps failing logs on every restart; cap the size.
        file_handler = RotatingFileHandler(
            logs / LOG_FILE,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        root.addHandler(file_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """Module logger; call at module level as logger = get_logger(__name__)."""
    return logging.getLogger(name)
