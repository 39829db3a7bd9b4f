"""Text helpers: leaf flattening, canonical value text and fuzzy prefix matching."""

from __future__ import annotations

import json
from typing import Any, Iterator, List, Tuple


def scalar_text(value: Any) -> str | None:
    """Searchable text of a scalar leaf; ``None`` for null and containers."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return None


def collect_all_text(value: Any) -> str:
    """Join every string, number and boolean leaf of ``value`` in pre-order."""
    texts: List[str] = []
    stack = [value]
    while stack:
        current = stack.pop()
        if isinstance(current, dict):
            stack.extend(reversed(list(current.values())))
        elif isinstance(current, list):
            stack.extend(reversed(current))
        else:
            text = scalar_text(current)
            if text is not None:
                texts.append(text)
    return " ".join(texts)


def iter_leaf_paths(value: Any, prefix: str = "") -> Iterator[Tuple[str, str]]:
    """Yield ``(path, text)`` for every scalar leaf below an object.

    Paths join object keys with ``.``; array positions do not appear in them,
    so every element of ``{"tags": ["a", "b"]}`` is reported under ``tags``.
    """
    if isinstance(value, dict):
        for key, child in value.items():
            path = f"{prefix}.{key}" if prefix else key
            yield from iter_leaf_paths(child, path)
    elif isinstance(value, list):
        for item in value:
            yield from iter_leaf_paths(item, prefix)
    elif prefix:
        text = scalar_text(value)
        if text is not None:
            yield prefix, text


def canonical_text(value: Any) -> str:
    """Normalize a JSON value to the string used for facet tallies."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def fuzzy_prefix_match(query: str, term: str, max_distance: int) -> bool:
    """Whether some prefix of ``term`` is within ``max_distance`` edits of ``query``.

    Edits are insertions, deletions, substitutions and adjacent
    transpositions, each costing one.
    """
    size = len(query)
    previous = list(range(size + 1))
    if previous[size] <= max_distance:
        return True

    before_previous: List[int] = []
    for col in range(1, len(term) + 1):
        current = [col] + [0] * size
        for row in range(1, size + 1):
            cost = 0 if query[row - 1] == term[col - 1] else 1
            best = min(previous[row] + 1, current[row - 1] + 1, previous[row - 1] + cost)
            if (
                row > 1
                and col > 1
                and query[row - 1] == term[col - 2]
                and query[row - 2] == term[col - 1]
            ):
                best = min(best, before_previous[row - 2] + 1)
            current[row] = best

        if current[size] <= max_distance:
            return True
        # Transpositions look back two columns, so both must be out of reach.
        if min(current) > max_distance and min(previous) > max_distance:
            return False
        before_previous, previous = previous, current

    return False
