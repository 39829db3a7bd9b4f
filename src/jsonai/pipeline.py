"""One-shot search pipeline: load, index, query, dedup, then plan or materialize."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from jsonai.config import AppConfig
from jsonai.errors import EmptyCorpusError
from jsonai.index.dedup import dedup_results
from jsonai.index.indexer import RecordIndex
from jsonai.index.search import Searcher
from jsonai.ingestion.json_loader import load_records
from jsonai.models import MatchMode, OutputMode
from jsonai.output.formatter import apply_window, format_output
from jsonai.output.plan import build_plan, format_plan_output, should_plan

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchRequest:
    """Everything one ``search`` invocation asks for."""

    query: str
    source: str
    fields: List[str] = field(default_factory=list)
    match_mode: MatchMode = MatchMode.TEXT
    output_mode: OutputMode = OutputMode.MATCH
    limit: int = 20
    offset: int = 0
    count_only: bool = False
    select: Optional[List[str]] = None
    bare: bool = False
    max_bytes: Optional[int] = None
    threshold: int = 50
    force_plan: bool = False
    no_overflow: bool = False
    pretty: bool = False

    @property
    def plan_possible(self) -> bool:
        return self.force_plan or not self.no_overflow

    def window(self) -> int:
        """Raw matches to fetch; widened so facets see more than the first page."""
        size = self.limit + self.offset
        if self.plan_possible:
            size = max(size, 2 * self.threshold)
        return max(size, 1)


@dataclass(slots=True)
class SearchOutcome:
    output: str
    total: int
    overflow: bool

    @property
    def has_matches(self) -> bool:
        return self.total > 0


def run_search(request: SearchRequest, config: AppConfig | None = None) -> SearchOutcome:
    """Execute ``request`` with a fresh index that is discarded on return."""
    config = config or AppConfig()
    records, files_searched = load_records(request.source, ignored_dirs=config.ignored_dirs)
    if not records:
        raise EmptyCorpusError(f"No JSON objects found in input: {request.source}")

    searcher = Searcher(RecordIndex.build(records), fuzzy_distance=config.fuzzy_distance)
    page_size = request.limit + request.offset
    window = request.window()
    while True:
        hits = searcher.search(
            request.query, fields=request.fields, mode=request.match_mode, window=window
        )
        deduped = dedup_results(hits.results)
        # Dropped ancestors can leave the page short; widen until it fills or the hits run out.
        if len(deduped) >= page_size or len(hits.results) >= hits.total:
            break
        window *= 2

    # Matches past the window are counted as reported, without ancestor removal.
    total = len(deduped) + max(hits.total - len(hits.results), 0)
    LOGGER.debug(
        "Query %r matched %d records (%d after dedup in window of %d)",
        request.query,
        hits.total,
        len(deduped),
        window,
    )

    overflow = should_plan(
        total,
        request.threshold,
        force_plan=request.force_plan,
        no_overflow=request.no_overflow,
    )
    if overflow:
        plan = build_plan(
            deduped,
            source=request.source,
            program=config.program_name,
            max_distinct=config.facet_max_distinct,
            max_values=config.facet_top_values,
        )
        output = format_plan_output(
            plan,
            total=total,
            limit=request.limit,
            threshold=request.threshold,
            files_searched=files_searched,
            pretty=request.pretty,
        )
        return SearchOutcome(output=output, total=total, overflow=True)

    output = format_output(
        apply_window(deduped, request.offset, request.limit),
        total=total,
        limit=request.limit,
        mode=request.output_mode,
        bare=request.bare,
        count_only=request.count_only,
        select=request.select,
        files_searched=files_searched,
        max_bytes=request.max_bytes,
        pretty=request.pretty,
        reserved=config.reserved_bytes,
    )
    return SearchOutcome(output=output, total=total, overflow=False)
