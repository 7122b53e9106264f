"""Command-line interface for logtally."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from time import perf_counter
from typing import List, Optional

from logtally.aggregate import aggregate_file
from logtally.config import DEFAULT_CONFIG, SORT_KEYS, AggregatorConfig, load_config
from logtally.exceptions import ConfigError, SourceError
from logtally.logging import apply_verbosity, get_logger
from logtally.report import (
    elapsed_microseconds,
    format_completion,
    render_report,
    to_json,
    write_csv,
    write_json,
)

logger = get_logger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def _program_name(argv0: Optional[str] = None) -> str:
    """Return the name the program was invoked as."""
    name = Path(argv0 if argv0 is not None else sys.argv[0]).name
    if name in ("", "__main__.py"):
        return "python -m logtally"
    return name


def _usage_message(prog: str) -> str:
    return (
        "No input provided as an argument. "
        f'Expected usage is: "{prog} [filename]"'
    )


def _resolve_config(args: argparse.Namespace) -> AggregatorConfig:
    """Defaults, then the YAML file, then command-line flags."""
    config = DEFAULT_CONFIG
    if args.config is not None:
        config = load_config(args.config)
    try:
        return config.with_overrides(
            workers=args.workers,
            chunk_lines=args.chunk_lines,
            encoding=args.encoding,
            sort_by=args.sort,
            max_type_width=args.max_type_width,
        )
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def _run(path: Path, args: argparse.Namespace, start: float) -> None:
    try:
        config = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"Failed to load config: {e}")
        if args.config is not None:
            print(f"Error loading config {args.config}: {e}")
        else:
            print(f"Error: invalid settings: {e}")
        sys.exit(1)

    try:
        result = aggregate_file(path, config)
    except SourceError as e:
        logger.error(f"Failed to read {path}: {e.cause}")
        print(f"Error reading file {path}: {e.cause}")
        sys.exit(1)

    if args.json:
        print(to_json(result))
    else:
        print(
            render_report(
                result,
                sort_by=config.sort_by,
                max_type_width=config.max_type_width,
            )
        )

    if args.results is not None:
        write_json(result, args.results)
    if args.csv is not None:
        write_csv(result, args.csv, sort_by=config.sort_by)

    print(format_completion(elapsed_microseconds(start)))


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``logtally`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    start = perf_counter()
    prog = _program_name()

    parser = argparse.ArgumentParser(
        prog=prog,
        description=(
            "Classify newline-delimited JSON log lines by their 'type' field "
            "and report instance counts and byte sizes per type."
        ),
    )
    parser.add_argument(
        "path", nargs="?", type=Path, default=None, help="Path to the log file"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Only log warnings and errors"
    )
    parser.add_argument(
        "--config", "-c", type=Path, default=None, help="YAML settings file"
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=_positive_int,
        default=None,
        help=f"Worker threads (default: {DEFAULT_CONFIG.workers})",
    )
    parser.add_argument(
        "--chunk-lines",
        type=_positive_int,
        default=None,
        help=(
            "Lines per chunk when --workers > 1 "
            f"(default: {DEFAULT_CONFIG.chunk_lines})"
        ),
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help=f"Input text encoding (default: {DEFAULT_CONFIG.encoding})",
    )
    parser.add_argument(
        "--sort",
        choices=SORT_KEYS,
        default=None,
        help=f"Table row order (default: {DEFAULT_CONFIG.sort_by})",
    )
    parser.add_argument(
        "--max-type-width",
        type=_positive_int,
        default=None,
        help="Clip type names longer than this many characters in the table",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of a table",
    )
    parser.add_argument(
        "--results",
        "-r",
        type=Path,
        default=None,
        help="Also write the result as JSON to this file",
    )
    parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Also write the type table as CSV to this file",
    )

    effective_args = sys.argv[1:] if argv is None else argv
    args = parser.parse_args(effective_args)

    apply_verbosity(verbose=args.verbose, quiet=args.quiet)
    logger.debug("Debug logging enabled")

    if args.path is None:
        print(_usage_message(prog))
        return

    _run(args.path, args, start)


if __name__ == "__main__":
    main()
