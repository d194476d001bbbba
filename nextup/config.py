"""Configuration and path helpers: safe to import from anywhere.

Call init(app_dir) once at startup before accessing any paths.
"""

import os
from pathlib import Path

# Recognized schedule file extensions (lowercase, with dot)
SCHEDULE_EXTENSIONS = (".yaml", ".yml")

DEBOUNCE_SECONDS = 0.3  # Quiet period after the last file event before reloading
TICK_INTERVAL = 1.0  # Display refresh period (seconds)

# Defaults for the optional `config` section of a schedule document
DEFAULT_COUNTDOWN_THRESHOLD = 30
DEFAULT_NO_CLASS_TEXT = ":)"

_DEFAULT_APP_DIR = Path(os.path.expanduser("~/.local/share/next-up"))

_app_dir: Path | None = None


def default_app_dir() -> Path:
    """App folder from $NEXT_UP_DIR, falling back to ~/.local/share/next-up."""
    env = os.environ.get("NEXT_UP_DIR")
    if env:
        return Path(env).expanduser().resolve()
    return _DEFAULT_APP_DIR


def init(app_dir: Path) -> None:
    """Set the application directory. Must be called before any other config access."""
    global _app_dir
    _app_dir = Path(app_dir)


def app_dir() -> Path:
    """Get the application directory. Raises if init() hasn't been called."""
    if _app_dir is None:
        raise RuntimeError("config.init() not called")
    return _app_dir


def schedule_dir() -> Path:
    """Folder holding candidate schedule files. Persists across reinstalls."""
    return app_dir() / "schedules"


def log_dir() -> Path:
    return app_dir() / "logs"


def ensure_dirs() -> None:
    """Ensure all required directories exist."""
    schedule_dir().mkdir(parents=True, exist_ok=True)
    log_dir().mkdir(parents=True, exist_ok=True)


def is_schedule_file(name: str) -> bool:
    """Whether a filename carries a recognized schedule extension."""
    return name.lower().endswith(SCHEDULE_EXTENSIONS)
