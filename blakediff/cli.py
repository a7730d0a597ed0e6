"""Command-line interface: generate, analyze and compare hash reports."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from blakediff.input import hash_file
from blakediff.reports import (
    OutputFormat,
    compare_reports,
    find_duplicates_in_report,
    format_comparison_csv,
    format_comparison_json,
    format_comparison_text,
    format_duplicates_csv,
    format_duplicates_json,
    format_duplicates_text,
)

__all__ = ["visit_dirs", "generate", "analyze", "compare", "main"]

_LOG = logging.getLogger("blakediff")
_PRINT_LOCK = threading.Lock()
_handler: logging.Handler | None = None

Callback = Callable[[str], None]


def _process_entry(path: str, callback: Callback, parallel: bool) -> None:
    if os.path.isdir(path):
        visit_dirs(path, callback, parallel)
        return
    try:
        callback(path)
    except OSError as exc:
        raise OSError(f'Failed to process file "{path}": {exc}') from exc


def _entry_error(path: str, callback: Callback, parallel: bool) -> str | None:
    try:
        _process_entry(path, callback, parallel)
    except OSError as exc:
        return str(exc)
    return None


def visit_dirs(
    path: str | os.PathLike[str], callback: Callback, parallel: bool = False
) -> None:
    """Call ``callback`` on every file below ``path`` (or on ``path`` itself).

    With ``parallel`` the entries of each directory are processed on a
    thread pool and all failures are gathered into one error.
    """
    root = os.fspath(path)
    if os.path.isdir(root):
        try:
            with os.scandir(root) as scanner:
                entries = [entry.path for entry in scanner]
        except OSError as exc:
            raise OSError(f'Failed to read directory "{root}": {exc}') from exc

        if parallel:
            with ThreadPoolExecutor() as pool:
                results = pool.map(
                    lambda entry: _entry_error(entry, callback, parallel), entries
                )
                errors = [error for error in results if error is not None]
            if errors:
                raise OSError("Multiple errors occurred:\n" + "\n".join(errors))
        else:
            for entry in entries:
                _process_entry(entry, callback, parallel)

    if os.path.isfile(root):
        callback(root)


def _print_hash(path: str) -> None:
    digest = hash_file(path)
    with _PRINT_LOCK:
        print(f"{digest} {path}", flush=True)


def generate(directory: str | os.PathLike[str], parallel: bool = False) -> None:
    """Print ``<hash> <path>`` for every file below ``directory``."""
    started = time.perf_counter()
    visit_dirs(directory, _print_hash, parallel)
    _LOG.info("elapsed time : %.2f s", time.perf_counter() - started)


def analyze(
    report_file: str | os.PathLike[str],
    output_format: OutputFormat = OutputFormat.TEXT,
) -> None:
    """Print the groups of duplicate files found in one report."""
    duplicates = find_duplicates_in_report(report_file)
    formatters = {
        OutputFormat.TEXT: format_duplicates_text,
        OutputFormat.JSON: format_duplicates_json,
        OutputFormat.CSV: format_duplicates_csv,
    }
    sys.stdout.write(formatters[OutputFormat(output_format)](duplicates))


def compare(
    report_1: str | os.PathLike[str],
    report_2: str | os.PathLike[str],
    output_format: OutputFormat = OutputFormat.TEXT,
) -> None:
    """Print files unique to each report and files present in both."""
    comparison = compare_reports(report_1, report_2)
    fmt = OutputFormat(output_format)
    if fmt is OutputFormat.TEXT:
        text = format_comparison_text(report_1, report_2, comparison)
    elif fmt is OutputFormat.JSON:
        text = format_comparison_json(report_1, report_2, comparison)
    else:
        text = format_comparison_csv(comparison)
    sys.stdout.write(text)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blakediff",
        description="blakediff - a tool to find duplicates/missing files",
    )
    parser.add_argument("-V", "--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase logging verbosity"
    )
    parser.add_argument(
        "-q", "--quiet", action="count", default=0, help="Decrease logging verbosity"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    formats = [f.value for f in OutputFormat]

    gen = commands.add_parser(
        "generate",
        help="Read all files in a directory and output hashes for each file with their paths",
    )
    gen.add_argument("dir", help="Directory to analyze")
    gen.add_argument(
        "-p",
        "--parallel",
        action="store_true",
        help="Use multi-threading for walking directories (recommended for SSDs only)",
    )

    ana = commands.add_parser(
        "analyze", help="Read a report file and display all duplicate hashes with paths"
    )
    ana.add_argument("report_file", help="Report file to analyze, searching for duplicates")
    ana.add_argument("-f", "--format", choices=formats, default="text", help="Output format")

    cmp_ = commands.add_parser(
        "compare", help="Compare two report files and display unique/duplicate files"
    )
    cmp_.add_argument("report_1", help="First report to analyze")
    cmp_.add_argument("report_2", help="Second report file")
    cmp_.add_argument("-f", "--format", choices=formats, default="text", help="Output format")
    return parser


def _configure_logging(verbosity: int) -> None:
    global _handler
    levels = {0: logging.ERROR, 1: logging.WARNING, 2: logging.INFO}
    if verbosity < 0:
        level = logging.CRITICAL + 10
    else:
        level = levels.get(verbosity, logging.DEBUG)
    if _handler is not None:
        _LOG.removeHandler(_handler)
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    _LOG.addHandler(_handler)
    _LOG.setLevel(level)
    _LOG.propagate = False


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose - args.quiet)
    try:
        if args.command == "generate":
            generate(args.dir, args.parallel)
        elif args.command == "analyze":
            analyze(args.report_file, OutputFormat(args.format))
        else:
            compare(args.report_1, args.report_2, OutputFormat(args.format))
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())