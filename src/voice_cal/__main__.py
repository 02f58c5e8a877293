"""Entry point for ``python -m voice_cal``.

Uses stdlib :mod:`argparse` for argument parsing (no extra dependencies).

Subcommands:
    run      -- Default. Open an interactive voice session.
    extract  -- Print the draft entry extracted from a sentence.

Exit codes:
    0 -- Completed successfully.
    1 -- An error occurred (configuration, Google authentication).
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date

from voice_cal.calendar.exceptions import CalendarAuthError
from voice_cal.config import ConfigError, load_settings
from voice_cal.console import Console
from voice_cal.extractor import extract
from voice_cal.log import setup_logging
from voice_cal.session import create_session


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="voice-cal",
        description="Voice calendar assistant: dictate reminders, get a reply.",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- "run" subcommand (default) -----------------------------------
    run_parser = subparsers.add_parser(
        "run",
        help="Open an interactive voice session.",
    )
    run_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )

    # --- "extract" subcommand -----------------------------------------
    extract_parser = subparsers.add_parser(
        "extract",
        help="Print the date, time and text extracted from a sentence.",
    )
    extract_parser.add_argument(
        "text",
        help='The sentence, e.g. "call mom on 2024-06-01 at 15:30".',
    )
    extract_parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Date to use as 'today' for the default date (YYYY-MM-DD).",
    )
    extract_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )

    return parser


def _resolve_command(
    parser: argparse.ArgumentParser,
    argv: list[str],
) -> argparse.Namespace:
    """Parse *argv*, treating a missing subcommand as ``run``."""
    if not argv:
        argv = ["run"]
    elif argv[0] not in {"run", "extract", "-h", "--help"}:
        argv = ["run", *argv]
    return parser.parse_args(argv)


def _handle_run(args: argparse.Namespace) -> int:
    """Execute the ``run`` subcommand."""
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        setup_logging("DEBUG" if args.verbose else settings.log_level)
    except ValueError as exc:
        print(f"Error: LOG_LEVEL: {exc}", file=sys.stderr)
        return 1

    try:
        session = create_session(settings)
    except CalendarAuthError as exc:
        print(f"Error: Google Calendar authentication failed: {exc}", file=sys.stderr)
        return 1

    with session:
        Console(session).run()
    return 0


def _handle_extract(args: argparse.Namespace) -> int:
    """Execute the ``extract`` subcommand."""
    today = (lambda: args.today) if args.today is not None else date.today
    draft = extract(args.text, today=today)
    print(json.dumps(draft.to_payload(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the voice-cal CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``
            when ``None`` (the normal case).

    Returns:
        Exit code: ``0`` on success, ``1`` on error.
    """
    parser = build_parser()
    args = _resolve_command(parser, argv if argv is not None else sys.argv[1:])

    # Provisional level; `run` re-applies LOG_LEVEL once settings load.
    setup_logging("DEBUG" if getattr(args, "verbose", False) else "INFO")

    if args.command == "extract":
        return _handle_extract(args)
    return _handle_run(args)


if __name__ == "__main__":
    raise SystemExit(main())
