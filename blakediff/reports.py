"""Read hash reports, find duplicates within one, compare two, and format results.

A report holds one ``<hash> <path>`` pair per line.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping, Set
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = [
    "OutputFormat",
    "ReportFormatError",
    "Comparison",
    "parse_report_file",
    "find_duplicates_in_report",
    "compare_reports",
    "format_duplicates_text",
    "format_duplicates_json",
    "format_duplicates_csv",
    "format_comparison_text",
    "format_comparison_json",
    "format_comparison_csv",
]

_EQUALS = "\U0001f7f0"


class OutputFormat(str, Enum):
    """How results are written."""

    TEXT = "text"
    JSON = "json"
    CSV = "csv"


class ReportFormatError(ValueError):
    """A report line is not of the form ``<hash> <path>``."""


@dataclass
class Comparison:
    """The outcome of comparing two reports, each list sorted by path."""

    only_in_1: list[str] = field(default_factory=list)
    only_in_2: list[str] = field(default_factory=list)
    common: list[tuple[str, str]] = field(default_factory=list)


PathLike = str | os.PathLike[str]


def _lines(path: PathLike) -> Iterator[tuple[int, str]]:
    """Yield numbered lines, split on ``\\n`` with one trailing ``\\r`` removed."""
    with open(Path(path), encoding="utf-8", newline="") as handle:
        text = handle.read()
    pieces = text.split("\n")
    if pieces and pieces[-1] == "":
        pieces.pop()
    for number, line in enumerate(pieces, start=1):
        yield number, line.removesuffix("\r")


def _split_entry(line: str) -> tuple[str, str] | None:
    hash_part, sep, path_part = line.partition(" ")
    if not sep:
        return None
    return hash_part.strip(), path_part.strip()


def parse_report_file(path: PathLike) -> dict[str, str]:
    """Map each hash in the report to its path; later lines win."""
    entries: dict[str, str] = {}
    for number, line in _lines(path):
        entry = _split_entry(line)
        if entry is None:
            raise ReportFormatError(
                f"Invalid format at line {number} in \"{path}\": "
                f"expected '<hash> <path>', got '{line}'"
            )
        hash_value, file_path = entry
        entries[hash_value] = file_path
    return entries


def find_duplicates_in_report(path: PathLike) -> dict[str, set[str]]:
    """Return every hash seen more than once with the set of its paths."""
    first_seen: dict[str, str] = {}
    duplicates: dict[str, set[str]] = {}
    for number, line in _lines(path):
        entry = _split_entry(line)
        if entry is None:
            raise ReportFormatError(
                f"Invalid format at line {number}: "
                f"expected '<hash> <path>', got '{line}'"
            )
        hash_value, file_path = entry
        if hash_value in duplicates:
            duplicates[hash_value].add(file_path)
        elif hash_value in first_seen:
            duplicates[hash_value] = {first_seen[hash_value], file_path}
        else:
            first_seen[hash_value] = file_path
    return duplicates


def compare_reports(report_1: PathLike, report_2: PathLike) -> Comparison:
    """Compare two reports by hash."""
    if Path(report_1).is_dir() or Path(report_2).is_dir():
        raise IsADirectoryError(
            "Comparison should be performed on report files, not directories"
        )
    first = parse_report_file(report_1)
    second = parse_report_file(report_2)

    only_in_1 = sorted(p for h, p in first.items() if h not in second)
    only_in_2 = sorted(p for h, p in second.items() if h not in first)
    common = sorted((p, second[h]) for h, p in first.items() if h in second)
    return Comparison(only_in_1=only_in_1, only_in_2=only_in_2, common=common)


def _sorted_groups(
    duplicates: Mapping[str, Set[str]],
) -> list[tuple[str, list[str]]]:
    groups = [(h, sorted(paths)) for h, paths in duplicates.items()]
    groups.sort(key=lambda item: item[1])
    return groups


def _escape_json(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _escape_csv(text: str) -> str:
    if any(ch in text for ch in ',"\n'):
        return '"' + text.replace('"', '""') + '"'
    return text


def _join_lines(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def _json_items(items: list[str]) -> list[str]:
    return [f"    {item}," for item in items[:-1]] + [f"    {item}" for item in items[-1:]]


def format_duplicates_text(duplicates: Mapping[str, Set[str]]) -> str:
    """One ``duplicates : ...`` line per group, groups ordered by first path."""
    return _join_lines(
        [
            f"duplicates : {f' {_EQUALS} '.join(files)}"
            for _, files in _sorted_groups(duplicates)
        ]
    )


def format_duplicates_json(duplicates: Mapping[str, Set[str]]) -> str:
    """A JSON object whose ``duplicates`` key lists the groups of paths."""
    items = [
        "[" + ", ".join(f'"{_escape_json(f)}"' for f in files) + "]"
        for _, files in _sorted_groups(duplicates)
    ]
    return _join_lines(["{", '  "duplicates": [', *_json_items(items), "  ]", "}"])


def format_duplicates_csv(duplicates: Mapping[str, Set[str]]) -> str:
    """CSV rows of a hash followed by its paths, after a header line."""
    rows = [
        f"{h}," + ",".join(_escape_csv(f) for f in files)
        for h, files in _sorted_groups(duplicates)
    ]
    return _join_lines(["hash,file1,file2,file3,...", *rows])


def format_comparison_text(
    report_1: PathLike, report_2: PathLike, comparison: Comparison
) -> str:
    """Human-readable comparison lines."""
    lines = [f"only in {report_1} : {p}" for p in comparison.only_in_1]
    lines += [f"only in {report_2} : {p}" for p in comparison.only_in_2]
    lines += [f"duplicates : {a} {_EQUALS} {b}" for a, b in comparison.common]
    return _join_lines(lines)


def format_comparison_json(
    report_1: PathLike, report_2: PathLike, comparison: Comparison
) -> str:
    """The comparison as a JSON object."""
    only_1 = [f'"{_escape_json(p)}"' for p in comparison.only_in_1]
    only_2 = [f'"{_escape_json(p)}"' for p in comparison.only_in_2]
    common = [
        f'{{"path1": "{_escape_json(a)}", "path2": "{_escape_json(b)}"}}'
        for a, b in comparison.common
    ]
    return _join_lines(
        [
            "{",
            f'  "report_1": "{_escape_json(str(report_1))}",',
            f'  "report_2": "{_escape_json(str(report_2))}",',
            '  "only_in_report_1": [',
            *_json_items(only_1),
            "  ],",
            '  "only_in_report_2": [',
            *_json_items(only_2),
            "  ],",
            '  "duplicates": [',
            *_json_items(common),
            "  ]",
            "}",
        ]
    )


def format_comparison_csv(comparison: Comparison) -> str:
    """The comparison as CSV rows of status and paths."""
    lines = ["status,path1,path2"]
    lines += [f"only_in_first,{_escape_csv(p)}," for p in comparison.only_in_1]
    lines += [f"only_in_second,,{_escape_csv(p)}" for p in comparison.only_in_2]
    lines += [
        f"duplicate,{_escape_csv(a)},{_escape_csv(b)}" for a, b in comparison.common
    ]
    return _join_lines(lines)