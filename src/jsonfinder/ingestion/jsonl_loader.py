"""JSONL line sources and per-line parsing."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

from jsonfinder.errors import DocumentParseError

LOGGER = logging.getLogger(__name__)

DEFAULT_SUFFIXES = (".jsonl", ".ndjson", ".json", ".log")


def iter_jsonl_paths(
    inputs: Iterable[Path], suffixes: Iterable[str] = DEFAULT_SUFFIXES
) -> Iterator[Path]:
    """Yield JSONL paths from input paths, descending into directories.

    Files named explicitly are yielded whatever their suffix.
    """
    wanted = {suffix.lower() for suffix in suffixes}
    for item in inputs:
        if item.is_dir():
            for child in sorted(item.rglob("*")):
                if child.is_file() and child.suffix.lower() in wanted:
                    yield child
        elif item.is_file():
            yield item


def iter_lines(path: Path, *, encoding: str = "utf-8") -> Iterator[str]:
    """Lazily yield the lines of ``path`` without their terminators."""
    with path.open("r", encoding=encoding) as handle:
        for line in handle:
            yield line.rstrip("\r\n")


def parse_line(line: str) -> dict[str, Any]:
    """Parse one JSONL line into a document."""
    try:
        value = json.loads(line)
    except json.JSONDecodeError as exc:
        raise DocumentParseError(f"Invalid JSON: {exc.msg} (column {exc.colno})") from exc
    if not isinstance(value, dict):
        raise DocumentParseError(f"Expected a JSON object, got {type(value).__name__}")
    return value
