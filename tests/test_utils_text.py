"""Tests for text helpers."""

from __future__ import annotations

import pytest

from jsonai.utils.text import (
    canonical_text,
    collect_all_text,
    fuzzy_prefix_match,
    iter_leaf_paths,
    scalar_text,
)


class TestScalarText:
    """Test scalar_text function."""

    def test_scalars(self) -> None:
        """Should render strings, numbers and booleans."""
        assert scalar_text("hi") == "hi"
        assert scalar_text(3) == "3"
        assert scalar_text(2.5) == "2.5"
        assert scalar_text(True) == "true"
        assert scalar_text(False) == "false"

    def test_null_and_containers(self) -> None:
        """Should skip null, lists and objects."""
        assert scalar_text(None) is None
        assert scalar_text([1]) is None
        assert scalar_text({"a": 1}) is None


class TestCollectAllText:
    """Test collect_all_text function."""

    def test_preorder_join(self) -> None:
        """Should join leaves in document order, descending into containers."""
        value = {"a": "x", "b": {"c": 1, "d": [True, None, "y"]}, "e": "z"}

        assert collect_all_text(value) == "x 1 true y z"

    def test_empty(self) -> None:
        """Should return an empty string when there are no leaves."""
        assert collect_all_text({"a": None, "b": []}) == ""


class TestIterLeafPaths:
    """Test iter_leaf_paths function."""

    def test_dotted_paths_with_transparent_arrays(self) -> None:
        """Should join object keys and ignore array positions."""
        value = {"a": {"b": 1, "c": [2, {"d": "x"}]}, "tags": ["p", "q"]}

        assert list(iter_leaf_paths(value)) == [
            ("a.b", "1"),
            ("a.c", "2"),
            ("a.c.d", "x"),
            ("tags", "p"),
            ("tags", "q"),
        ]

    def test_nulls_skipped(self) -> None:
        """Should not report null leaves."""
        assert list(iter_leaf_paths({"a": None})) == []


class TestCanonicalText:
    """Test canonical_text function."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("open", "open"),
            (7, "7"),
            (1.5, "1.5"),
            (True, "true"),
            (False, "false"),
            (None, "null"),
            ([1, "a"], '[1,"a"]'),
            ({"k": "v"}, '{"k":"v"}'),
        ],
    )
    def test_values(self, value: object, expected: str) -> None:
        """Should normalize each JSON type."""
        assert canonical_text(value) == expected


class TestFuzzyPrefixMatch:
    """Test fuzzy_prefix_match function."""

    def test_exact_and_prefix(self) -> None:
        """Should match the term itself and longer terms sharing the prefix."""
        assert fuzzy_prefix_match("apple", "apple", 2)
        assert fuzzy_prefix_match("app", "application", 2)

    def test_typos_within_distance(self) -> None:
        """Should accept substitutions and transpositions up to the limit."""
        assert fuzzy_prefix_match("aple", "apple", 2)
        assert fuzzy_prefix_match("appel", "apple", 2)
        assert fuzzy_prefix_match("bxnxna", "banana", 2)

    def test_too_far(self) -> None:
        """Should reject terms needing more edits."""
        assert not fuzzy_prefix_match("apple", "banana", 2)
        assert not fuzzy_prefix_match("zzzzz", "apple", 2)
        assert not fuzzy_prefix_match("bxnxnx", "banana", 1)

    def test_short_query_matches_everything(self) -> None:
        """Should match any term when the query fits in the edit budget."""
        assert fuzzy_prefix_match("ab", "zebra", 2)
