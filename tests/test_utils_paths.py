"""Tests for dot-path flattening and field extraction."""

from __future__ import annotations

import json

import pytest

from jsonfinder.utils.paths import ABSENT, clone_tree, extract, flatten, split_path

DEEP = 600


class TestFlatten:
    """Test flatten function."""

    def test_nested_mapping(self) -> None:
        """Should join nested keys with dots."""
        pairs = list(flatten({"a": {"b": 1, "c": "x"}}))

        assert pairs == [("a.b", 1), ("a.c", "x")]

    def test_sequence_indices(self) -> None:
        """Should use array positions as path segments."""
        pairs = list(flatten({"items": [{"q": 3}, {"q": 5}]}))

        assert pairs == [("items.0.q", 3), ("items.1.q", 5)]

    def test_scalar_array(self) -> None:
        """Should emit each scalar element under its index."""
        assert list(flatten({"tags": ["a", "b"]})) == [("tags.0", "a"), ("tags.1", "b")]

    def test_null_values_skipped(self) -> None:
        """Should not emit null leaves."""
        assert list(flatten({"a": None, "b": 0})) == [("b", 0)]

    def test_falsy_scalars_kept(self) -> None:
        """Should emit zero, false and empty strings."""
        pairs = dict(flatten({"zero": 0, "no": False, "empty": ""}))

        assert pairs == {"zero": 0, "no": False, "empty": ""}

    def test_empty_containers(self) -> None:
        """Should emit nothing for empty mappings and lists."""
        assert list(flatten({"a": {}, "b": []})) == []

    def test_none_document(self) -> None:
        """Should emit nothing for None."""
        assert list(flatten(None)) == []

    def test_top_level_scalar(self) -> None:
        """Should address a scalar root with the empty path."""
        assert list(flatten(42)) == [("", 42)]

    def test_prefix(self) -> None:
        """Should prepend the given prefix."""
        assert list(flatten({"b": 1}, "a.")) == [("a.b", 1)]

    def test_deep_nesting(self) -> None:
        """Should handle deeply nested values."""
        document: dict = {"leaf": True}
        for _ in range(50):
            document = {"n": document}

        pairs = list(flatten(document))

        assert pairs == [(".".join(["n"] * 50 + ["leaf"]), True)]

    def test_nesting_beyond_interpreter_stack(self) -> None:
        """Should flatten any depth that json.loads accepts."""
        document = json.loads('{"n":' * DEEP + "1" + "}" * DEEP)

        pairs = list(flatten(document))

        assert pairs == [(".".join(["n"] * DEEP), 1)]

    def test_document_order(self) -> None:
        """Should emit pairs in document order across mixed containers."""
        pairs = list(flatten({"b": [1, {"c": 2}], "a": 3}))

        assert pairs == [("b.0", 1), ("b.1.c", 2), ("a", 3)]

    def test_root_empty_key(self) -> None:
        assert list(flatten({"": 5})) == [("", 5)]


class TestExtract:
    """Test extract function."""

    def test_mapping_path(self) -> None:
        """Should follow mapping keys."""
        assert extract({"a": {"b": 1}}, "a.b") == 1

    def test_sequence_index(self) -> None:
        """Should index into sequences with numeric segments."""
        assert extract({"items": [{"q": 3}, {"q": 5}]}, "items.1.q") == 5

    def test_missing_key(self) -> None:
        """Should return ABSENT for an unknown key."""
        assert extract({"a": 1}, "b") is ABSENT

    def test_index_out_of_range(self) -> None:
        """Should return ABSENT for an index past the end."""
        assert extract({"items": [1]}, "items.3") is ABSENT

    def test_non_numeric_segment_on_sequence(self) -> None:
        """Should return ABSENT when a sequence is addressed by name."""
        assert extract({"items": [1]}, "items.first") is ABSENT

    def test_negative_index(self) -> None:
        """Should not support negative indices."""
        assert extract({"items": [1, 2]}, "items.-1") is ABSENT

    def test_descend_into_scalar(self) -> None:
        """Should return ABSENT when walking past a leaf."""
        assert extract({"a": "text"}, "a.b") is ABSENT
        assert extract({"a": "text"}, "a.0") is ABSENT

    def test_null_value_is_present(self) -> None:
        """Should return None for an explicit null."""
        assert extract({"a": None}, "a") is None

    def test_empty_path_returns_scalar_or_sequence_root(self) -> None:
        """Should return a non-mapping document itself for the empty path."""
        document = [1, 2]
        assert extract(document, "") is document
        assert extract(7, "") == 7

    def test_empty_path_on_mapping_root(self) -> None:
        """Should address the empty key of a mapping root."""
        assert extract({"": 5, "a": 1}, "") == 5
        assert extract({"a": 1}, "") is ABSENT

    def test_non_container_intermediate(self) -> None:
        """Should never raise on odd intermediate values."""
        assert extract({"a": 5}, "a.b.c") is ABSENT
        assert extract(None, "a") is ABSENT

    @pytest.mark.parametrize(
        "document",
        [
            {"a": {"b": 1}},
            {"items": [{"q": 3}, {"q": 5, "tags": ["x", "y"]}]},
            {"body": {"shipments": [{"customsItems": [{"quantity": 3, "ok": False}]}]}},
            {"mixed": [1, "two", 3.5, True, [4, [5]]]},
            {"": 5, "x": {"": [1]}},
        ],
    )
    def test_flatten_round_trip(self, document: dict) -> None:
        """Every flattened pair should resolve back to its leaf."""
        for path, leaf in flatten(document):
            assert extract(document, path) == leaf


class TestAbsent:
    """Test the ABSENT marker."""

    def test_singleton(self) -> None:
        """Should always be the same object."""
        assert type(ABSENT)() is ABSENT

    def test_falsy(self) -> None:
        """Should be falsy and render readably."""
        assert not ABSENT
        assert repr(ABSENT) == "ABSENT"


class TestSplitPath:
    """Test split_path function."""

    def test_split(self) -> None:
        assert split_path("a.0.b") == ["a", "0", "b"]

    def test_empty(self) -> None:
        assert split_path("") == []


class TestCloneTree:
    """Test clone_tree function."""

    def test_copies_containers(self) -> None:
        """Should return fresh containers with equal content."""
        document = {"a": [1, {"b": "x"}], "c": None}

        copied = clone_tree(document)

        assert copied == document
        assert copied is not document
        assert copied["a"] is not document["a"]
        assert copied["a"][1] is not document["a"][1]

    def test_preserves_key_order(self) -> None:
        assert list(clone_tree({"z": 1, "a": 2})) == ["z", "a"]

    def test_scalars_returned_as_is(self) -> None:
        assert clone_tree(5) == 5
        assert clone_tree("text") == "text"
        assert clone_tree(None) is None

    def test_tuples_become_lists(self) -> None:
        assert clone_tree({"a": (1, 2)}) == {"a": [1, 2]}

    def test_deep_nesting(self) -> None:
        """Should copy any depth that json.loads accepts."""
        document = json.loads('[' * DEEP + "1" + ']' * DEEP)

        copied = clone_tree(document)

        for _ in range(DEEP):
            assert isinstance(copied, list)
            copied = copied[0]
        assert copied == 1
