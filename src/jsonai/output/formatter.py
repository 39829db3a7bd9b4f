"""Result windowing, projection and byte-budgeted JSON rendering."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from jsonai.models import Meta, OutputMode, SearchResult

RESERVED_BYTES = 200


def to_json(value: Any, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def render_envelope(envelope: Dict[str, Any], pretty: bool = False) -> str:
    return to_json(envelope, pretty)


def apply_window(results: Sequence[SearchResult], offset: int, limit: int) -> List[SearchResult]:
    """Skip ``offset`` results (only when it leaves some) and keep at most ``limit``."""
    window = list(results)
    if 0 < offset < len(window):
        window = window[offset:]
    return window[:limit]


def project_fields(value: Any, select: Optional[Sequence[str]]) -> Any:
    """Keep only the selected top-level keys of an object value."""
    if select is None or not isinstance(value, dict):
        return value
    return {key: item for key, item in value.items() if key in select}


def extract_scalar_values(value: Any) -> List[Any]:
    """Depth-1 string, number and boolean leaves of an object; other values pass through."""
    if not isinstance(value, dict):
        return [value]
    return [item for item in value.values() if isinstance(item, (str, int, float, bool))]


def build_items(
    results: Sequence[SearchResult], mode: OutputMode, select: Optional[Sequence[str]] = None
) -> List[Any]:
    if mode is OutputMode.HIT:
        return [
            {
                "file": result.record.file,
                "pointer": result.record.pointer,
                "record": project_fields(result.record.value, select),
                "score": result.score,
            }
            for result in results
        ]
    if mode is OutputMode.VALUE:
        values: List[Any] = []
        for result in results:
            values.extend(extract_scalar_values(result.record.value))
        return values
    return [project_fields(result.record.value, select) for result in results]


def rendered_size(item: Any, pretty: bool = False, depth: int = 0) -> int:
    """Bytes ``item`` occupies when rendered ``depth`` levels deep in a list.

    Indented output shifts every line of the item by the enclosing levels.
    """
    text = to_json(item, pretty)
    if pretty and depth:
        indent = " " * (2 * depth)
        text = indent + text.replace("\n", "\n" + indent)
    return len(text.encode("utf-8"))


def fit_to_budget(
    items: Sequence[Any],
    max_bytes: Optional[int],
    *,
    pretty: bool = False,
    depth: int = 0,
    reserved: int = RESERVED_BYTES,
) -> Tuple[List[Any], bool]:
    """Greedily keep items whose rendered size fits ``max_bytes - reserved``.

    Items are measured as they appear in the final output, ``depth`` levels
    deep, with ``,`` or ``,\\n`` between them. The first item is always kept.
    Returns the kept items and whether the budget stopped the scan early.
    """
    if max_bytes is None:
        return list(items), False

    available = max(max_bytes - reserved, 0)
    separator = 2 if pretty else 1
    kept: List[Any] = []
    used = 0
    for item in items:
        size = rendered_size(item, pretty, depth)
        if kept:
            size += separator
        if kept and used + size > available:
            return kept, True
        kept.append(item)
        used += size
    return kept, False


def format_output(
    results: Sequence[SearchResult],
    *,
    total: int,
    limit: int,
    mode: OutputMode = OutputMode.MATCH,
    bare: bool = False,
    count_only: bool = False,
    select: Optional[Sequence[str]] = None,
    files_searched: Optional[int] = None,
    max_bytes: Optional[int] = None,
    pretty: bool = False,
    reserved: int = RESERVED_BYTES,
) -> str:
    """Render already-windowed results as an envelope or a bare list."""
    if count_only:
        if bare:
            return str(total)
        meta = Meta(
            total=total,
            returned=0,
            limit=limit,
            truncated=False,
            files_searched=files_searched,
            overflow=False,
        )
        return render_envelope({"meta": meta.to_dict()}, pretty)

    # Bare items sit directly in the top-level list, envelope items one level deeper.
    items, budget_hit = fit_to_budget(
        build_items(results, mode, select),
        max_bytes,
        pretty=pretty,
        depth=1 if bare else 2,
        reserved=reserved,
    )
    if bare:
        return to_json(items, pretty)

    meta = Meta(
        total=total,
        returned=len(items),
        limit=limit,
        truncated=total > limit or budget_hit,
        files_searched=files_searched,
        overflow=False,
    )
    key = "hits" if mode is OutputMode.HIT else "results"
    return render_envelope({"meta": meta.to_dict(), key: items}, pretty)
