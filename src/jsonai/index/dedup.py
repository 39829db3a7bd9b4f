"""Removal of ancestor matches subsumed by a more specific match."""

from __future__ import annotations

from typing import List, Sequence

from jsonai.models import SearchResult
from jsonai.utils.pointer import is_ancestor


def dedup_results(results: Sequence[SearchResult]) -> List[SearchResult]:
    """Drop every result that is a proper ancestor of another result in the same file.

    Only the innermost match of each overlapping chain survives; ordering is
    preserved. Pairwise comparison is fine at search-window sizes.
    """
    addresses = [(result.record.file, result.record.pointer) for result in results]
    return [
        result
        for result in results
        if not any(
            file == result.record.file and is_ancestor(result.record.pointer, pointer)
            for file, pointer in addresses
        )
    ]
