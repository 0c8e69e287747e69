"""Console entrypoint for checktext.

Truncates a file or stdin to a size budget without splitting chunks, and
prints config helpers.
"""

from __future__ import annotations

import argparse
import io
import sys
import tomllib
from typing import Any

from pydantic import ValidationError

from checktext import __version__
from checktext.config import ChunkMode, LogLevel, Measure, Settings, TruncateDirection, default_config_path, load_settings
from checktext.fold import BudgetTooSmallError
from checktext.logging import configure_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="checktext",
        description="Fit text into a size budget without tearing lines or markdown blocks",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version and exit.",
    )
    parser.add_argument(
        "--log-level",
        choices=[e.value for e in LogLevel],
        dest="log_level",
        help="Log level override",
    )
    parser.add_argument("--config-path", dest="config_path", help="Path to config.toml")

    subparsers = parser.add_subparsers(dest="command")

    truncate_parser = subparsers.add_parser("truncate", help="Truncate a file or stdin")
    truncate_parser.add_argument("path", nargs="?", default="-", help="Input file ('-' for stdin)")
    truncate_parser.add_argument("--max-size", type=int, dest="max_size", help="Size budget")
    truncate_parser.add_argument("--unit", choices=[e.value for e in Measure], dest="measure", help="Size unit")
    truncate_parser.add_argument("--marker", dest="truncation_text", help="Text appended when truncating")
    truncate_parser.add_argument(
        "--lines",
        action="store_const",
        const=ChunkMode.LINES.value,
        dest="chunk_mode",
        help="Treat each line as one chunk",
    )
    truncate_parser.add_argument(
        "--truncate-start",
        action="store_const",
        const=TruncateDirection.START.value,
        dest="direction",
        help="Drop the earliest content instead of the latest",
    )

    config_parser = subparsers.add_parser("config", help="Config helpers")
    config_sub = config_parser.add_subparsers(dest="config_cmd", required=True)
    config_sub.add_parser("path", help="Print config path")
    config_sub.add_parser("print", help="Print resolved settings")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(cli_overrides=_collect_overrides(args), config_path=args.config_path)
    except (ValidationError, tomllib.TOMLDecodeError) as exc:
        print(f"error: invalid settings: {exc}", file=sys.stderr)
        return 1
    configure_logger(settings.log_level)

    command = args.command
    if command == "truncate":
        return _run_truncate(settings, args)
    if command == "config":
        return _run_config(settings, args)

    parser.print_help()
    return 1


def _run_truncate(settings: Settings, args: argparse.Namespace) -> int:
    try:
        content = _read_input(args.path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    document = settings.builder().add_text(content).build()
    try:
        result = settings.render(document)
    except BudgetTooSmallError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(result)
    return 0


def _read_input(path: str) -> str:
    """Read UTF-8 input without newline translation so CRLF survives."""

    if path != "-":
        with open(path, encoding="utf-8", newline="") as handle:
            return handle.read()
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is None:
        return sys.stdin.read()
    wrapper = io.TextIOWrapper(buffer, encoding="utf-8", newline="")
    try:
        return wrapper.read()
    finally:
        # leave sys.stdin usable
        wrapper.detach()


def _run_config(settings: Settings, args: argparse.Namespace) -> int:
    if args.config_cmd == "path":
        print(args.config_path or default_config_path())
        return 0
    if args.config_cmd == "print":
        print(settings.model_dump_json(indent=2))
        return 0
    return 1


def _collect_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "log_level": args.log_level,
        "max_size": getattr(args, "max_size", None),
        "measure": getattr(args, "measure", None),
        "truncation_text": getattr(args, "truncation_text", None),
        "chunk_mode": getattr(args, "chunk_mode", None),
        "direction": getattr(args, "direction", None),
    }


if __name__ == "__main__":
    sys.exit(main())
