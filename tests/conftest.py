"""Shared fixtures for Next Up tests."""

import tempfile
import textwrap
from datetime import datetime
from pathlib import Path

import pytest

from nextup.config import init as _config_init

# Module-level setup: point config at a throwaway dir so modules that read
# paths at construction time never touch the real app folder.
_tmp = Path(tempfile.mkdtemp(prefix="next-up-test-"))
_config_init(_tmp)

# 2026-10-19 is a Monday
MONDAY = datetime(2026, 10, 19)
TUESDAY = datetime(2026, 10, 20)
SATURDAY = datetime(2026, 10, 24)

SAMPLE_SCHEDULE = textwrap.dedent(
    """\
    config:
      countdownThreshold: 30
      noClassText: "Free"
    schedule:
      Monday:
        - blockName: A1
          description: |
            $Block ($Duration)
            $StartTime-$EndTime
          startTime: "9:00 AM"
          endTime: "10:05 AM"
        - blockName: B2
          description: "Room 12"
          startTime: "10:15 AM"
          endTime: "11:00 AM"
        - blockName: Lunch
          description: ""
          startTime: "12:00 PM"
          endTime: "12:45 PM"
      Tuesday:
        - blockName: C3
          description: "$Block"
          startTime: "13:00"
          endTime: "14:30"
    """
)


def at(day: datetime, hour: int, minute: int = 0, second: int = 0) -> datetime:
    """A moment on the given day."""
    return day.replace(hour=hour, minute=minute, second=second)


def write_schedule(folder: Path, name: str = "schedule.yaml", content: str = SAMPLE_SCHEDULE) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / name
    path.write_text(content)
    return path


@pytest.fixture
def app_dir(tmp_path):
    """A temporary app directory with config initialized to it."""
    import nextup.config as config

    d = tmp_path / "app"
    (d / "schedules").mkdir(parents=True)
    old = config._app_dir
    config.init(d)
    yield d
    config._app_dir = old


@pytest.fixture
def schedule_dir(app_dir):
    return app_dir / "schedules"
