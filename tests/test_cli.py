"""Tests for the CLI subcommands."""

import sys
import textwrap
from types import SimpleNamespace

import pytest

from nextup.cli import main

from tests.conftest import MONDAY, at, write_schedule


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["next-up", *argv])
    main()


def _freeze(monkeypatch, moment):
    monkeypatch.setattr("nextup.cli.datetime", SimpleNamespace(now=lambda: moment))


class TestFolder:
    def test_prints_folder(self, app_dir, monkeypatch, capsys):
        _run(monkeypatch, "--dir", str(app_dir), "folder")
        out = capsys.readouterr().out
        assert str(app_dir.resolve() / "schedules") in out
        assert "No schedule file yet." in out

    def test_reports_active_file(self, app_dir, schedule_dir, monkeypatch, capsys):
        write_schedule(schedule_dir, "term2.yaml")
        _run(monkeypatch, "--dir", str(app_dir), "folder")
        assert "Active schedule: term2.yaml" in capsys.readouterr().out


class TestStatus:
    def test_first_run(self, app_dir, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--dir", str(app_dir), "status")
        assert exc.value.code == 1
        assert "No schedule file found" in capsys.readouterr().out

    def test_invalid_schedule(self, app_dir, schedule_dir, monkeypatch, capsys):
        write_schedule(schedule_dir, "bad.yaml", "schedule: {}\n")
        with pytest.raises(SystemExit):
            _run(monkeypatch, "--dir", str(app_dir), "status")
        assert "config property" in capsys.readouterr().out

    def test_current_block_with_on_deck(self, app_dir, schedule_dir, monkeypatch, capsys):
        write_schedule(schedule_dir)
        _freeze(monkeypatch, at(MONDAY, 9, 30))
        _run(monkeypatch, "--dir", str(app_dir), "status")
        assert capsys.readouterr().out == (
            "Done In: 35:00\n"
            "\n"
            "Now: A1 (35:00 left)\n"
            "  A1 (1:05)\n"
            "  9:00 AM-10:05 AM\n"
            "\n"
            "On Deck: B2\n"
            "  Room 12\n"
        )

    def test_on_deck_hidden_past_threshold(self, app_dir, schedule_dir, monkeypatch, capsys):
        # B2 ends 11:00, Lunch starts 12:00: a 60 minute gap against a threshold of 30
        write_schedule(schedule_dir)
        _freeze(monkeypatch, at(MONDAY, 10, 30))
        _run(monkeypatch, "--dir", str(app_dir), "status")
        assert capsys.readouterr().out == "Done In: 30:00\n\nNow: B2 (30:00 left)\n  Room 12\n"

    def test_on_deck_shown_at_threshold(self, app_dir, schedule_dir, monkeypatch, capsys):
        write_schedule(
            schedule_dir,
            content=textwrap.dedent(
                """\
                config: {countdownThreshold: 30}
                schedule:
                  Monday:
                    - {blockName: P1, startTime: "08:00", endTime: "09:00"}
                    - {blockName: P2, startTime: "09:30", endTime: "10:00"}
                """
            ),
        )
        _freeze(monkeypatch, at(MONDAY, 8, 59, 30))
        _run(monkeypatch, "--dir", str(app_dir), "status")
        assert capsys.readouterr().out == "Done In: 0:30\n\nNow: P1 (0:30 left)\n  P1\n\nOn Deck: P2\n  P2\n"

    def test_next_up_between_blocks(self, app_dir, schedule_dir, monkeypatch, capsys):
        write_schedule(schedule_dir)
        _freeze(monkeypatch, at(MONDAY, 10, 10))
        _run(monkeypatch, "--dir", str(app_dir), "status")
        assert capsys.readouterr().out == "Next In: 5:00\n\nNext Up:\n  Room 12\n"

    def test_next_up_empty_description_shows_name(self, app_dir, schedule_dir, monkeypatch, capsys):
        write_schedule(schedule_dir)
        _freeze(monkeypatch, at(MONDAY, 11, 30))
        _run(monkeypatch, "--dir", str(app_dir), "status")
        assert capsys.readouterr().out == "Next In: 30:00\n\nNext Up:\n  Lunch\n"

    def test_no_class(self, app_dir, schedule_dir, monkeypatch, capsys):
        write_schedule(schedule_dir)
        _freeze(monkeypatch, at(MONDAY, 13, 0))
        _run(monkeypatch, "--dir", str(app_dir), "status")
        assert capsys.readouterr().out == "Free\n\nNo Class\n"


class TestToday:
    def test_lists_blocks(self, app_dir, schedule_dir, monkeypatch, capsys):
        write_schedule(
            schedule_dir,
            content="config: {}\nschedule:\n"
            + "".join(
                f"  {day}:\n    - {{blockName: Everyday, startTime: '08:00', endTime: '09:00'}}\n"
                for day in ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
            ),
        )
        _run(monkeypatch, "--dir", str(app_dir), "today")
        assert "Everyday" in capsys.readouterr().out
