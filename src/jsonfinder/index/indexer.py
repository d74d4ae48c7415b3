"""Document indexing pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

from jsonfinder.errors import DocumentParseError
from jsonfinder.index.storage import DocumentStore
from jsonfinder.ingestion.jsonl_loader import DEFAULT_SUFFIXES, iter_jsonl_paths, iter_lines, parse_line

LOGGER = logging.getLogger(__name__)


def find_jsonl_files(paths: Sequence[Path], suffixes: Iterable[str] = DEFAULT_SUFFIXES) -> list[Path]:
    """Find all JSONL files under the given paths."""
    return list(iter_jsonl_paths(paths, suffixes))


@dataclass(slots=True)
class IndexStats:
    inserted: int = 0
    skipped: int = 0
    failed: int = 0
    blank: int = 0
    unreadable: int = 0
    processed_files: list[Path] = field(default_factory=list)

    def increment(self, status: str) -> None:
        if status == "inserted":
            self.inserted += 1
        elif status == "skipped":
            self.skipped += 1
        elif status == "blank":
            self.blank += 1
        else:
            self.failed += 1

    def as_dict(self) -> dict[str, Any]:
        return {
            "inserted": self.inserted,
            "skipped": self.skipped,
            "failed": self.failed,
            "blank": self.blank,
            "unreadable": self.unreadable,
            "processed_files": [str(path) for path in self.processed_files],
        }


class Indexer:
    """Feeds parsed JSONL records into a document store."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        suffixes: Iterable[str] = DEFAULT_SUFFIXES,
        encoding: str = "utf-8",
    ) -> None:
        self.store = store
        self.suffixes = tuple(suffixes)
        self.encoding = encoding

    def index(self, paths: Sequence[Path]) -> IndexStats:
        """Index all JSONL files found under the given paths."""
        files = find_jsonl_files(paths, self.suffixes)
        if not files:
            LOGGER.warning("No JSONL files found")
            return IndexStats()

        stats = IndexStats()
        for path in files:
            LOGGER.info("Processing: %s", path)
            try:
                self.index_lines(
                    iter_lines(path, encoding=self.encoding), source=str(path), stats=stats
                )
            except (OSError, UnicodeDecodeError) as exc:
                LOGGER.error("Failed to read %s: %s", path, exc)
                stats.unreadable += 1
            stats.processed_files.append(path)
        return stats

    def index_lines(
        self,
        lines: Iterable[str],
        *,
        source: str | None = None,
        stats: IndexStats | None = None,
    ) -> IndexStats:
        """Parse and ingest each line; malformed lines are logged and skipped."""
        if stats is None:
            stats = IndexStats()
        label = source or "<stream>"
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                stats.increment("blank")
                continue
            try:
                document = parse_line(line)
            except DocumentParseError as exc:
                LOGGER.warning("%s:%d: %s", label, number, exc)
                stats.increment("failed")
                continue
            stats.increment(self._ingest(document))
        return stats

    def index_documents(self, documents: Iterable[Any]) -> IndexStats:
        """Ingest documents that are already parsed."""
        stats = IndexStats()
        for document in documents:
            stats.increment(self._ingest(document))
        return stats

    def _ingest(self, document: Any) -> str:
        result = self.store.ingest(document)
        return "inserted" if result.inserted else "skipped"
