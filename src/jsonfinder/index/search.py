"""Clause evaluation and full-scan query engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable, List, Mapping, Sequence

from jsonfinder.index.storage import DocumentStore
from jsonfinder.models import Clause, ClauseOperator, QueryOperator
from jsonfinder.utils.paths import ABSENT, clone_tree, extract

LOGGER = logging.getLogger(__name__)

DEFAULT_ID_FIELD = "documentId"


@dataclass(slots=True)
class SearchResult:
    document_id: str
    document: Any

    def to_dict(self, id_field: str = DEFAULT_ID_FIELD) -> dict[str, Any]:
        """Return the document content with its id attached under ``id_field``."""
        if isinstance(self.document, Mapping):
            return {**self.document, id_field: self.document_id}
        return {"value": self.document, id_field: self.document_id}


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _strict_equal(left: Any, right: Any) -> bool:
    """Structural equality that keeps booleans apart from numbers at every depth."""
    if left is ABSENT or right is ABSENT:
        return False
    pending = [(left, right)]
    while pending:
        left, right = pending.pop()
        if isinstance(left, Mapping) or isinstance(right, Mapping):
            if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
                return False
            if left.keys() != right.keys():
                return False
            pending.extend((left[key], right[key]) for key in left)
        elif _is_sequence(left) or _is_sequence(right):
            if not (_is_sequence(left) and _is_sequence(right)) or len(left) != len(right):
                return False
            pending.extend(zip(left, right))
        elif isinstance(left, bool) or isinstance(right, bool):
            if not (isinstance(left, bool) and isinstance(right, bool) and left is right):
                return False
        elif left != right:
            return False
    return True


def _member(value: Any, operand: Any) -> bool:
    if isinstance(operand, (list, tuple, set, frozenset)):
        return any(_strict_equal(value, item) for item in operand)
    return _strict_equal(value, operand)


def _contains(value: Any, operand: Any) -> bool:
    return isinstance(value, str) and isinstance(operand, str) and operand in value


def _comparable(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return True
    return isinstance(left, str) and isinstance(right, str)


def matches(value: Any, clause: Clause) -> bool:
    """Apply ``clause`` to a field value extracted from a document.

    ``value`` may be ``ABSENT``. Absent fields never satisfy ``==``, ``in``,
    ``~`` or an ordering comparison; the negated operators are the exact
    complement of their positive form.
    """
    operand = clause.value
    match clause.operator:
        case ClauseOperator.EQ:
            return _strict_equal(value, operand)
        case ClauseOperator.NE:
            return not _strict_equal(value, operand)
        case ClauseOperator.IN:
            return _member(value, operand)
        case ClauseOperator.NOT_IN:
            return not _member(value, operand)
        case ClauseOperator.CONTAINS:
            return _contains(value, operand)
        case ClauseOperator.NOT_CONTAINS:
            return not _contains(value, operand)
        case ClauseOperator.GT:
            return _comparable(value, operand) and value > operand
        case ClauseOperator.LT:
            return _comparable(value, operand) and value < operand
        case ClauseOperator.GE:
            return _comparable(value, operand) and value >= operand
        case ClauseOperator.LE:
            return _comparable(value, operand) and value <= operand


def document_passes(document: Any, clauses: Sequence[Clause], operator: QueryOperator) -> bool:
    outcomes = (matches(extract(document, clause.key), clause) for clause in clauses)
    match operator:
        case QueryOperator.AND:
            return all(outcomes)
        case QueryOperator.OR:
            return any(outcomes)
        case QueryOperator.NOT:
            return not any(outcomes)


def build_clauses(clauses: Iterable[Clause | Mapping[str, Any]]) -> List[Clause]:
    """Accept clauses as ``Clause`` objects or plain mappings."""
    return [
        clause if isinstance(clause, Clause) else Clause.from_dict(clause) for clause in clauses
    ]


def run_query(
    documents: Iterable[tuple[str, Any]],
    clauses: Iterable[Clause | Mapping[str, Any]],
    operator: QueryOperator | str = QueryOperator.AND,
) -> List[SearchResult]:
    """Scan ``documents`` and return those passing the clause set.

    Operators are validated before the first document is examined.
    """
    query_operator = QueryOperator.parse(operator)
    parsed = build_clauses(clauses)
    results: List[SearchResult] = []
    for document_id, document in documents:
        if document_passes(document, parsed, query_operator):
            results.append(SearchResult(document_id=document_id, document=clone_tree(document)))
    return results


class Searcher:
    """High-level API to query a document store."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def search(
        self,
        clauses: Iterable[Clause | Mapping[str, Any]],
        operator: QueryOperator | str = QueryOperator.AND,
        *,
        limit: int | None = None,
    ) -> List[SearchResult]:
        query_operator = QueryOperator.parse(operator)
        parsed = build_clauses(clauses)
        results = run_query(self.store.iter_documents(), parsed, query_operator)
        LOGGER.debug(
            "Query %s over %d clause(s) matched %d document(s)",
            query_operator.value,
            len(parsed),
            len(results),
        )
        if limit is not None:
            return results[: max(limit, 0)]
        return results
