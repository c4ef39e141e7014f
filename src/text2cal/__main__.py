"""Entry point for ``python -m text2cal``.

Turns a piece of text into an ``.ics`` file.  Uses stdlib :mod:`argparse`
for argument parsing.

Usage:
    text2cal "lunch with Bob tomorrow 1pm at Blue Bottle" -o ./out
    echo "standup at 9:30" | text2cal

Exit codes:
    0 -- The calendar file was written.
    1 -- The extraction failed, or configuration/input was invalid.
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from text2cal.calendar.handoff import write_artifact
from text2cal.config import ConfigError, Settings, load_settings
from text2cal.llm import ChatCompletionClient
from text2cal.log import get_logger, setup_logging
from text2cal.models.event import DEFAULT_FILENAME
from text2cal.output import format_draft, format_failure, format_progress
from text2cal.pipeline import Completed, ExtractionOrchestrator, Failed, Progress

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="text2cal",
        description="Extract a calendar event from text and write an .ics file.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "text",
        nargs="?",
        default=None,
        help="Text describing the event (read from stdin when omitted).",
    )
    source.add_argument(
        "-f",
        "--input-file",
        type=str,
        default=None,
        help="Read the event text from this file instead.",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=".",
        help="Directory to write the calendar file to (default: current directory).",
    )
    parser.add_argument(
        "--filename",
        type=str,
        default=DEFAULT_FILENAME,
        help=f"Name of the calendar file (default: {DEFAULT_FILENAME}).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )
    return parser


def _read_text(args: argparse.Namespace) -> str:
    """Return the input text from the argument, the input file or stdin."""
    if args.text is not None:
        return args.text
    if args.input_file is not None:
        return Path(args.input_file).read_text(encoding="utf-8")
    return sys.stdin.read()


async def _extract(
    text: str,
    settings: Settings,
    output_dir: Path,
    filename: str,
) -> int:
    """Run one extraction attempt and report it on the console."""
    async with ChatCompletionClient() as client:
        orchestrator = ExtractionOrchestrator(
            client,
            settings_provider=lambda: settings,
            filename=filename,
        )
        async for update in orchestrator.submit(text):
            if isinstance(update, Progress):
                print(format_progress(update), file=sys.stderr)
            elif isinstance(update, Failed):
                print(format_failure(update.error), file=sys.stderr)
                return 1
            elif isinstance(update, Completed):
                path = write_artifact(update.artifact, output_dir)
                print(format_draft(update.draft, path))
                return 0
    return 1


def main(argv: list[str] | None = None) -> int:
    """Run the text2cal CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``
            when ``None`` (the normal case).

    Returns:
        Exit code: ``0`` on success, ``1`` on error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    log_level = "DEBUG" if args.verbose else settings.log_level
    try:
        setup_logging(log_level)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        text = _read_text(args)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not text.strip():
        print("Error: No event text given", file=sys.stderr)
        return 1

    logger.debug("Loaded %r", settings)
    return asyncio.run(
        _extract(text, settings, Path(args.output_dir), args.filename)
    )


if __name__ == "__main__":
    raise SystemExit(main())
