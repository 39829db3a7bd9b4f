"""Tests for jq filter evaluation."""

from __future__ import annotations

import json

import pytest

from jsonai.errors import FilterError
from jsonai.filtering import ESCAPED_BANG_HINT, UNARY_BANG_HINT, evaluate, render_outputs

DOCUMENT = {"items": [{"n": 1, "ok": True}, {"n": 2, "ok": False}, {"n": 3, "ok": True}]}


class TestEvaluate:
    """Test evaluate function."""

    def test_single_output(self) -> None:
        """Should return the filter result."""
        assert evaluate(".items | length", DOCUMENT) == [3]

    def test_stream_of_outputs(self) -> None:
        """Should collect every emitted value."""
        assert evaluate(".items[] | select(.ok) | .n", DOCUMENT) == [1, 3]

    def test_not_equal(self) -> None:
        """Should support != comparisons."""
        assert evaluate('[.items[] | select(.n != 2) | .n]', DOCUMENT) == [[1, 3]]

    def test_escaped_bang_hint(self) -> None:
        """Should explain shell-escaped !=."""
        with pytest.raises(FilterError) as excinfo:
            evaluate(".items[] | select(.n \\!= 2)", DOCUMENT)

        assert str(excinfo.value) == ESCAPED_BANG_HINT

    def test_unary_bang_hint(self) -> None:
        """Should suggest not for a leading !."""
        with pytest.raises(FilterError) as excinfo:
            evaluate("!.ok", DOCUMENT)

        assert str(excinfo.value) == UNARY_BANG_HINT

    def test_parse_error(self) -> None:
        """Should report filters that do not compile."""
        with pytest.raises(FilterError, match="Parse error"):
            evaluate(".items[", DOCUMENT)

    def test_runtime_error(self) -> None:
        """Should report failures while running the filter."""
        with pytest.raises(FilterError, match="Runtime error"):
            evaluate(".items + 1", DOCUMENT)


class TestRenderOutputs:
    """Test render_outputs function."""

    def test_empty(self) -> None:
        """Should render nothing."""
        assert render_outputs([]) is None

    def test_single_and_many(self) -> None:
        """Should unwrap a single output and wrap several in an array."""
        assert json.loads(render_outputs([{"a": 1}])) == {"a": 1}
        assert json.loads(render_outputs([1, 2])) == [1, 2]
