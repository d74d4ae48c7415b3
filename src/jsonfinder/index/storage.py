"""In-memory document store and inverted index."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Iterator

from jsonfinder.models import IngestResult, StoreStats
from jsonfinder.utils.hashing import compute_document_id
from jsonfinder.utils.paths import clone_tree, flatten

LOGGER = logging.getLogger(__name__)


class InvertedIndex:
    """Maps each flattened path to the ids of the documents holding a leaf there."""

    def __init__(self) -> None:
        self._postings: defaultdict[str, set[str]] = defaultdict(set)

    def add(self, path: str, document_id: str) -> None:
        self._postings[path].add(document_id)

    def postings(self, path: str) -> frozenset[str]:
        return frozenset(self._postings.get(path, ()))

    def paths(self) -> list[str]:
        return sorted(self._postings)

    def posting_count(self) -> int:
        return sum(len(ids) for ids in self._postings.values())

    def clear(self) -> None:
        self._postings.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._postings

    def __len__(self) -> int:
        return len(self._postings)


class DocumentStore:
    """Owns the deduplicated documents, their inverted index and the key catalogue.

    All three containers change together under one lock, so the index never
    references a document that is not stored.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Any] = {}
        self._index = InvertedIndex()
        self._available_keys: set[str] = set()
        self._lock = threading.RLock()

    @property
    def index(self) -> InvertedIndex:
        return self._index

    @contextmanager
    def transaction(self) -> Iterator[DocumentStore]:
        with self._lock:
            yield self

    def ingest(self, document: Any) -> IngestResult:
        """Store ``document`` unless identical content is already present."""
        document_id = compute_document_id(document)
        with self.transaction():
            if document_id in self._documents:
                LOGGER.debug("Skipping duplicate document %s", document_id)
                return IngestResult(inserted=False, document_id=document_id)

            stored = clone_tree(document)
            self._documents[document_id] = stored
            for path, _ in flatten(stored):
                self._index.add(path, document_id)
                self._available_keys.add(path)

        return IngestResult(inserted=True, document_id=document_id)

    def get(self, document_id: str) -> Any | None:
        """Return a copy of the stored document, or ``None`` if unknown."""
        with self.transaction():
            if document_id not in self._documents:
                return None
            return clone_tree(self._documents[document_id])

    def iter_documents(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(document_id, document)`` pairs in insertion order.

        The pairs come from a snapshot taken under the lock; the documents are
        the stored objects and must not be mutated by callers.
        """
        with self.transaction():
            snapshot = list(self._documents.items())
        yield from snapshot

    def available_keys(self) -> list[str]:
        with self.transaction():
            return sorted(self._available_keys)

    def postings(self, path: str) -> frozenset[str]:
        with self.transaction():
            return self._index.postings(path)

    def stats(self) -> StoreStats:
        with self.transaction():
            return StoreStats(
                document_count=len(self._documents),
                key_count=len(self._available_keys),
                posting_count=self._index.posting_count(),
            )

    def clear(self) -> None:
        with self.transaction():
            self._documents.clear()
            self._index.clear()
            self._available_keys.clear()

    def __contains__(self, document_id: object) -> bool:
        with self.transaction():
            return document_id in self._documents

    def __len__(self) -> int:
        with self.transaction():
            return len(self._documents)
