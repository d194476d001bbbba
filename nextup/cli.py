"""CLI interface for Next Up.

Entry point: next-up [--dir PATH] <subcommand> [args...]
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

from .types import BlockDetails


def _resolve_dir_arg(dir_arg: str | None) -> Path:
    """Resolve --dir to an absolute path, falling back to $NEXT_UP_DIR or the default."""
    from .config import default_app_dir

    if dir_arg:
        return Path(dir_arg).expanduser().resolve()
    return default_app_dir()


def _load_engine():
    """Build an engine and load the current schedule, exiting on failure."""
    from .errors import ScheduleError, classify_load_error
    from .schedule import ScheduleEngine
    from .source import ScheduleSource

    engine = ScheduleEngine(ScheduleSource())
    try:
        engine.reload()
    except (ScheduleError, OSError) as e:
        failure = classify_load_error(e)
        if failure.first_run:
            print(f"No schedule file found in {engine.source.folder}")
            print("  Drop a .yaml schedule into that folder, then run again.")
        else:
            print(f"Error: {failure.text}")
        sys.exit(1)
    return engine


def _print_details(header: str, details: BlockDetails) -> None:
    print(header)
    lines = details.description_lines or (details.block_name,)
    for line in lines:
        print(f"  {line}")


# --- Subcommands ---


def cmd_run(args):
    """Show the live display summary until interrupted."""
    from .runner import run_console

    run_console(interval=args.interval)


def cmd_status(args):
    """Print the display summary and block details once."""
    engine = _load_engine()
    now = datetime.now()

    print(engine.get_display_time(now))
    current = engine.get_current_block_details(now)
    if current:
        print()
        _print_details(f"Now: {current.block_name} ({current.time_remaining} left)", current)
        gap = engine.get_minutes_from_end_of_current_to_next(now)
        if gap is not None and gap <= engine.config.countdown_threshold_minutes:
            upcoming = engine.get_next_block_details(now)
            if upcoming:
                print()
                _print_details(f"On Deck: {upcoming.block_name}", upcoming)
    else:
        upcoming = engine.get_next_block_details(now)
        print()
        if upcoming:
            _print_details("Next Up:", upcoming)
        else:
            print("No Class")


def cmd_today(args):
    """List today's blocks."""
    engine = _load_engine()
    blocks = engine.get_todays_blocks()
    if not blocks:
        print("Nothing scheduled today.")
        return
    for block in blocks:
        print(f"  {block.start_time:>8} - {block.end_time:<8}  {block.block_name}")


def cmd_folder(args):
    """Create (if needed) and print the schedule folder."""
    from .source import ScheduleSource

    source = ScheduleSource()
    if not source.ensure_folder_exists():
        print(f"Error: could not create {source.folder}")
        sys.exit(1)
    print(source.folder)
    active = source.get_most_recent_candidate_file()
    if active:
        print(f"  Active schedule: {active.name}")
    else:
        print("  No schedule file yet.")


def main():
    from . import config

    parser = argparse.ArgumentParser(
        prog="next-up",
        description="What's on now and what's next, from a weekly schedule file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--dir", "-d", help="App directory (default: $NEXT_UP_DIR or ~/.local/share/next-up)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Show the live countdown")
    run_parser.add_argument("--interval", "-i", type=float, default=config.TICK_INTERVAL, help="Refresh interval")
    run_parser.set_defaults(func=cmd_run)

    status_parser = subparsers.add_parser("status", help="Print what's on now and next")
    status_parser.set_defaults(func=cmd_status)

    today_parser = subparsers.add_parser("today", help="List today's blocks")
    today_parser.set_defaults(func=cmd_today)

    folder_parser = subparsers.add_parser("folder", help="Print the schedule folder")
    folder_parser.set_defaults(func=cmd_folder)

    args = parser.parse_args()
    config.init(_resolve_dir_arg(args.dir))

    args.func(args)


if __name__ == "__main__":
    main()
