"""Core JsonFinder data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from jsonfinder.errors import InvalidOperator


class ClauseOperator(str, Enum):
    """Comparison applied between a document field and a clause operand."""

    EQ = "=="
    NE = "!="
    IN = "in"
    NOT_IN = "!in"
    CONTAINS = "~"
    NOT_CONTAINS = "!~"
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    @classmethod
    def parse(cls, value: ClauseOperator | str) -> ClauseOperator:
        try:
            return cls(value)
        except ValueError:
            raise InvalidOperator(value) from None


class QueryOperator(str, Enum):
    """How clause outcomes combine into a document verdict."""

    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    @classmethod
    def parse(cls, value: QueryOperator | str) -> QueryOperator:
        """Operator names are matched case-insensitively."""
        try:
            return cls(value.upper() if isinstance(value, str) else value)
        except ValueError:
            raise InvalidOperator(value) from None


@dataclass(frozen=True, slots=True)
class Clause:
    """Single field predicate addressed by a dot-delimited path."""

    key: str
    operator: ClauseOperator
    value: Any = None

    def __post_init__(self) -> None:
        # frozen dataclass: normalise the operator through object.__setattr__
        object.__setattr__(self, "operator", ClauseOperator.parse(self.operator))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Clause:
        """Build a clause from a ``{"key", "operator", "value"}`` mapping."""
        if "key" not in data or "operator" not in data:
            raise ValueError("Clause requires 'key' and 'operator' entries")
        return cls(key=str(data["key"]), operator=data["operator"], value=data.get("value"))

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "operator": self.operator.value, "value": self.value}


@dataclass(frozen=True, slots=True)
class IngestResult:
    """Outcome of offering one document to the store."""

    inserted: bool
    document_id: str


@dataclass(slots=True)
class StoreStats:
    document_count: int
    key_count: int
    posting_count: int

    def as_dict(self) -> dict[str, int]:
        return {
            "document_count": self.document_count,
            "key_count": self.key_count,
            "posting_count": self.posting_count,
        }
