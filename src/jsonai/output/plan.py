"""Overflow detection and the field/facet plan returned in place of results."""

from __future__ import annotations

import shlex
from collections import Counter
from typing import Dict, List, Sequence

from jsonai.models import FacetValue, FieldSummary, Meta, Plan, SearchResult
from jsonai.output.formatter import render_envelope
from jsonai.utils.pointer import escape_segment
from jsonai.utils.text import canonical_text

VALUE_PLACEHOLDER = "<value>"


def should_plan(total: int, threshold: int, *, force_plan: bool, no_overflow: bool) -> bool:
    """PLAN when forced, or when overflow is not bypassed and ``total`` exceeds ``threshold``."""
    return force_plan or (not no_overflow and total > threshold)


def tally_values(results: Sequence[SearchResult]) -> Dict[str, Counter]:
    """Count canonical values per top-level key across object records."""
    tallies: Dict[str, Counter] = {}
    for result in results:
        value = result.record.value
        if not isinstance(value, dict):
            continue
        for key, item in value.items():
            tallies.setdefault(key, Counter())[canonical_text(item)] += 1
    return tallies


def top_values(counts: Counter, limit: int) -> List[FacetValue]:
    ranked = sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))
    return [FacetValue(value=value, count=count) for value, count in ranked[:limit]]


def follow_up_command(program: str, field_name: str, source: str) -> str:
    return " ".join(
        [
            program,
            "search",
            "-q",
            shlex.quote(VALUE_PLACEHOLDER),
            "-f",
            shlex.quote(field_name),
            shlex.quote(source),
        ]
    )


def build_plan(
    results: Sequence[SearchResult],
    *,
    source: str,
    program: str = "jsonai",
    max_distinct: int = 20,
    max_values: int = 5,
) -> Plan:
    """Summarize the fields of every matched record.

    Fields are listed from lowest to highest cardinality; low-cardinality
    fields additionally get a facet and a narrowing command.
    """
    tallies = tally_values(results)
    summaries = sorted(
        (
            FieldSummary(
                name=name,
                pointer_path="/" + escape_segment(name),
                distinct_count=len(counts),
            )
            for name, counts in tallies.items()
        ),
        key=lambda summary: (summary.distinct_count, summary.name),
    )

    plan = Plan(fields=summaries)
    for summary in summaries:
        if summary.distinct_count > max_distinct:
            continue
        plan.facets[summary.name] = top_values(tallies[summary.name], max_values)
        plan.commands.append(follow_up_command(program, summary.name, source))
    return plan


def format_plan_output(
    plan: Plan,
    *,
    total: int,
    limit: int,
    threshold: int,
    files_searched: int | None = None,
    pretty: bool = False,
) -> str:
    meta = Meta(
        total=total,
        returned=0,
        limit=limit,
        truncated=False,
        files_searched=files_searched,
        overflow=True,
        threshold=threshold,
    )
    return render_envelope({"meta": meta.to_dict(), "plan": plan.to_dict(), "results": []}, pretty)
