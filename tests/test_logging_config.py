"""Tests for logging setup."""

import io
import logging

import pytest

from nextup.logging_config import ConsoleHandler, level_from_env, setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def _record(msg="hello"):
    return logging.LogRecord("nextup.test", logging.INFO, __file__, 1, msg, None, None)


class TestLevelFromEnv:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("NEXT_UP_LOG_LEVEL", raising=False)
        assert level_from_env() == logging.INFO

    def test_named_level(self, monkeypatch):
        monkeypatch.setenv("NEXT_UP_LOG_LEVEL", "debug")
        assert level_from_env() == logging.DEBUG

    def test_unknown_name_falls_back(self, monkeypatch):
        monkeypatch.setenv("NEXT_UP_LOG_LEVEL", "chatty")
        assert level_from_env(logging.WARNING) == logging.WARNING


class TestConsoleHandler:
    def test_plain_record(self):
        stream = io.StringIO()
        ConsoleHandler(stream).emit(_record())
        assert stream.getvalue() == "hello\n"

    def test_clears_live_line_first(self):
        stream = io.StringIO()
        stream.write("Done In: 5:00")
        ConsoleHandler(stream, clear_line=True).emit(_record())
        assert stream.getvalue() == "Done In: 5:00\r\033[Khello\n"


class TestSetupLogging:
    def test_writes_log_file(self, app_dir, root_logger):
        setup_logging(console=False)
        logging.getLogger("nextup.test").info("hello")
        for handler in root_logger.handlers:
            handler.flush()
        assert "hello" in (app_dir / "logs" / "next-up.log").read_text()

    def test_live_line_console(self, app_dir, root_logger):
        setup_logging(file=False, live_line=True)
        (handler,) = root_logger.handlers
        assert isinstance(handler, ConsoleHandler)
        assert handler.clear_line

    def test_replaces_previous_handlers(self, app_dir, root_logger):
        setup_logging(file=False)
        setup_logging(file=False)
        assert len(root_logger.handlers) == 1
