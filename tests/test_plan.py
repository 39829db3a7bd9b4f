"""Tests for overflow detection and plan building."""

from __future__ import annotations

import json
from collections import Counter
from typing import Any, Dict, List

import pytest

from jsonai.models import Record, SearchResult
from jsonai.output.plan import (
    build_plan,
    follow_up_command,
    format_plan_output,
    should_plan,
    tally_values,
    top_values,
)


def _results(values: List[Any]) -> List[SearchResult]:
    return [
        SearchResult(record=Record(pointer=f"/{i}", file="f.json", value=value), score=1.0)
        for i, value in enumerate(values)
    ]


class TestShouldPlan:
    """Test should_plan function."""

    @pytest.mark.parametrize(
        "total, force_plan, no_overflow, expected",
        [
            (50, False, False, False),
            (51, False, False, True),
            (51, False, True, False),
            (0, True, False, True),
            (10, True, True, True),
        ],
    )
    def test_decision(self, total: int, force_plan: bool, no_overflow: bool, expected: bool) -> None:
        """Should plan strictly above the threshold unless bypassed or forced."""
        assert should_plan(total, 50, force_plan=force_plan, no_overflow=no_overflow) is expected


class TestTallies:
    """Test value tallies and ranking."""

    def test_counts_canonical_values(self) -> None:
        """Should tally top-level keys of object records only."""
        results = _results([{"s": "open", "n": 1}, {"s": "open", "n": True}, [1, 2], {"s": "x"}])

        tallies = tally_values(results)

        assert tallies["s"] == Counter({"open": 2, "x": 1})
        assert tallies["n"] == Counter({"1": 1, "true": 1})

    def test_top_values_tie_break(self) -> None:
        """Should rank by count then lexicographic value."""
        ranked = top_values(Counter({"b": 2, "a": 2, "c": 5, "d": 1}), 3)

        assert [(item.value, item.count) for item in ranked] == [("c", 5), ("a", 2), ("b", 2)]


class TestFollowUpCommand:
    """Test follow_up_command function."""

    def test_quotes_arguments(self) -> None:
        """Should shell-quote the placeholder, field and source."""
        command = follow_up_command("jsonai", "status", "data dir")

        assert command == "jsonai search -q '<value>' -f status 'data dir'"


class TestBuildPlan:
    """Test build_plan function."""

    def test_fields_sorted_by_cardinality(self) -> None:
        """Should list fields by distinct count then name."""
        values = [{"id": i, "status": "open" if i % 2 else "closed", "kind": "task"} for i in range(6)]

        plan = build_plan(_results(values), source="data.json")

        assert [(f.name, f.distinct_count) for f in plan.fields] == [
            ("kind", 1),
            ("status", 2),
            ("id", 6),
        ]
        assert plan.fields[0].pointer_path == "/kind"

    def test_facets_and_commands_for_low_cardinality(self) -> None:
        """Should facet only fields within the distinct limit."""
        values = [{"id": i, "status": "open" if i < 4 else "closed"} for i in range(6)]

        plan = build_plan(_results(values), source="data.json", max_distinct=3)

        assert set(plan.facets) == {"status"}
        assert [(v.value, v.count) for v in plan.facets["status"]] == [("open", 4), ("closed", 2)]
        assert plan.commands == ["jsonai search -q '<value>' -f status data.json"]

    def test_value_limit(self) -> None:
        """Should keep at most max_values facet entries."""
        values = [{"n": i % 8} for i in range(16)]

        plan = build_plan(_results(values), source="-", max_values=5)

        assert len(plan.facets["n"]) == 5

    def test_pointer_path_escapes_key(self) -> None:
        """Should escape the key into a pointer segment."""
        plan = build_plan(_results([{"a/b": 1}]), source="x")

        assert plan.fields[0].pointer_path == "/a~1b"


class TestFormatPlanOutput:
    """Test format_plan_output function."""

    def test_envelope(self) -> None:
        """Should mark overflow and return no results."""
        plan = build_plan(_results([{"k": "v"}]), source="f.json")

        output: Dict[str, Any] = json.loads(
            format_plan_output(plan, total=60, limit=20, threshold=50, files_searched=1)
        )

        assert output["meta"] == {
            "total": 60,
            "returned": 0,
            "limit": 20,
            "truncated": False,
            "files_searched": 1,
            "overflow": True,
            "threshold": 50,
        }
        assert output["results"] == []
        assert output["plan"]["fields"] == [{"name": "k", "pointer_path": "/k", "distinct_count": 1}]
        assert output["plan"]["facets"] == {"k": [{"value": "v", "count": 1}]}
