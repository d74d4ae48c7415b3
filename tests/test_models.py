"""Tests for core data models."""

from __future__ import annotations

import dataclasses

import pytest

from jsonfinder.errors import InvalidOperator, JsonFinderError
from jsonfinder.models import Clause, ClauseOperator, IngestResult, QueryOperator, StoreStats


class TestClauseOperator:
    """Test ClauseOperator enum."""

    @pytest.mark.parametrize(
        "symbol", ["==", "!=", "in", "!in", "~", "!~", ">", "<", ">=", "<="]
    )
    def test_parse_known(self, symbol: str) -> None:
        """Should parse every supported operator."""
        assert ClauseOperator.parse(symbol).value == symbol

    def test_parse_member(self) -> None:
        """Should accept an enum member as-is."""
        assert ClauseOperator.parse(ClauseOperator.GE) is ClauseOperator.GE

    def test_parse_unknown(self) -> None:
        """Should raise InvalidOperator for unknown symbols."""
        with pytest.raises(InvalidOperator, match="Invalid operator: ==="):
            ClauseOperator.parse("===")


class TestQueryOperator:
    """Test QueryOperator enum."""

    def test_parse_known(self) -> None:
        assert QueryOperator.parse("AND") is QueryOperator.AND
        assert QueryOperator.parse("OR") is QueryOperator.OR
        assert QueryOperator.parse("NOT") is QueryOperator.NOT

    def test_parse_unknown(self) -> None:
        """Should raise InvalidOperator for XOR."""
        with pytest.raises(InvalidOperator) as excinfo:
            QueryOperator.parse("XOR")

        assert excinfo.value.operator == "XOR"
        assert isinstance(excinfo.value, JsonFinderError)
        assert isinstance(excinfo.value, ValueError)

    def test_parse_is_case_insensitive(self) -> None:
        assert QueryOperator.parse("and") is QueryOperator.AND
        assert QueryOperator.parse("Not") is QueryOperator.NOT

    def test_parse_lowercase_unknown(self) -> None:
        with pytest.raises(InvalidOperator, match="Invalid operator: xor"):
            QueryOperator.parse("xor")


class TestClause:
    """Test Clause dataclass."""

    def test_operator_normalised(self) -> None:
        """Should store the operator as an enum member."""
        clause = Clause(key="a.b", operator="==", value=1)

        assert clause.operator is ClauseOperator.EQ

    def test_invalid_operator(self) -> None:
        """Should reject unknown operators at construction."""
        with pytest.raises(InvalidOperator):
            Clause(key="a", operator="like", value="x")

    def test_frozen(self) -> None:
        """Should be immutable."""
        clause = Clause(key="a", operator="==", value=1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            clause.key = "b"  # type: ignore[misc]

    def test_from_dict(self) -> None:
        clause = Clause.from_dict({"key": "items", "operator": "in", "value": [1, 2]})

        assert clause == Clause(key="items", operator=ClauseOperator.IN, value=[1, 2])

    def test_from_dict_missing_value(self) -> None:
        """Should default the operand to None."""
        assert Clause.from_dict({"key": "a", "operator": "!="}).value is None

    def test_from_dict_missing_key(self) -> None:
        with pytest.raises(ValueError, match="requires"):
            Clause.from_dict({"operator": "=="})

    def test_to_dict(self) -> None:
        clause = Clause(key="a", operator="~", value="err")

        assert clause.to_dict() == {"key": "a", "operator": "~", "value": "err"}


class TestResultModels:
    """Test IngestResult and StoreStats."""

    def test_ingest_result(self) -> None:
        result = IngestResult(inserted=True, document_id="abc")

        assert result.inserted is True
        assert result.document_id == "abc"

    def test_store_stats_as_dict(self) -> None:
        stats = StoreStats(document_count=2, key_count=3, posting_count=4)

        assert stats.as_dict() == {"document_count": 2, "key_count": 3, "posting_count": 4}
