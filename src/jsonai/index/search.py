"""Query compilation and execution against a :class:`RecordIndex`."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from whoosh.qparser import QueryParser
from whoosh.qparser.common import QueryParserError
from whoosh.query import NullQuery, Or, Query, Term
from whoosh.reading import IndexReader

from jsonai.errors import QueryCompileError
from jsonai.index.indexer import ALL_TEXT_FIELD, RecordIndex, content_field
from jsonai.models import MatchMode, Record, SearchResult
from jsonai.utils.text import fuzzy_prefix_match

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchHits:
    """Ranked matches inside the window plus the engine's full match count."""

    results: List[SearchResult] = field(default_factory=list)
    total: int = 0


BINARY_OPERATORS = frozenset({"AND", "OR", "ANDNOT", "ANDMAYBE"})

_PHRASE = re.compile(r'"[^"]*"')
_TOKEN = re.compile(r"[()]|[^\s()]+")
_FIELD_PREFIX = re.compile(r"\w+:")


def check_query_syntax(query: str) -> None:
    """Reject malformed text queries.

    Whoosh's parser is lenient: a dangling operator is searched as a literal
    term and an unclosed group is closed silently, so both are caught here.
    """
    if query.count('"') % 2:
        raise QueryCompileError(f"Unbalanced quote in query {query!r}")
    bare = _PHRASE.sub("phrase", query)

    # Ranges may mix brackets, as in [a TO b}.
    groups: List[str] = []
    for char in bare:
        if char in "([{":
            groups.append(char)
        elif char == ")":
            if not groups or groups.pop() != "(":
                raise QueryCompileError(f"Unbalanced ')' in query {query!r}")
        elif char in "]}":
            if not groups or groups.pop() == "(":
                raise QueryCompileError(f"Unbalanced {char!r} in query {query!r}")
    if groups:
        raise QueryCompileError(f"Unclosed {groups[-1]!r} in query {query!r}")

    tokens = _TOKEN.findall(bare)
    for position, token in enumerate(tokens):
        previous = tokens[position - 1] if position else None
        following = tokens[position + 1] if position + 1 < len(tokens) else None
        if _FIELD_PREFIX.fullmatch(token):
            raise QueryCompileError(f"Missing value after {token!r} in query {query!r}")
        if token == "(" and following == ")":
            raise QueryCompileError(f"Empty group in query {query!r}")
        if token in BINARY_OPERATORS:
            dangling = previous in (None, "(", "NOT") or previous in BINARY_OPERATORS
            dangling = dangling or following in (None, ")")
        elif token == "NOT":
            dangling = following in (None, ")") or following in BINARY_OPERATORS
        else:
            continue
        if dangling:
            raise QueryCompileError(f"Dangling operator {token!r} in query {query!r}")


def _parse(query: str, fieldname: str, index: RecordIndex) -> Query:
    # QueryParser groups terms with AndGroup by default.
    parser = QueryParser(fieldname, index.schema)
    try:
        return parser.parse(query)
    except QueryParserError as exc:
        raise QueryCompileError(f"Failed to parse query {query!r}: {exc}") from exc


def _any_term(fieldname: str, terms: Iterable[str]) -> Query:
    clauses = [Term(fieldname, term) for term in terms]
    if not clauses:
        return NullQuery
    return Or(clauses)


def compile_query(
    query: str,
    fields: Sequence[str],
    mode: MatchMode,
    index: RecordIndex,
    reader: IndexReader,
    *,
    fuzzy_distance: int = 2,
) -> Query:
    """Translate ``(query, mode)`` into a single Whoosh query.

    Text and exact parse the query conjunctively, against the all-text field
    or as an OR across the requested fields. Fuzzy and regex always expand
    against the all-text lexicon.
    """
    if mode in (MatchMode.TEXT, MatchMode.EXACT):
        check_query_syntax(query)
        if not fields:
            return _parse(query, ALL_TEXT_FIELD, index)
        parsed = [_parse(query, content_field(name), index) for name in fields]
        parsed = [item for item in parsed if item is not NullQuery]
        if not parsed:
            return NullQuery
        return parsed[0] if len(parsed) == 1 else Or(parsed)

    if mode is MatchMode.FUZZY:
        needle = query.lower()
        return _any_term(
            ALL_TEXT_FIELD,
            (
                term
                for term in reader.field_terms(ALL_TEXT_FIELD)
                if fuzzy_prefix_match(needle, term, fuzzy_distance)
            ),
        )

    if mode is MatchMode.REGEX:
        try:
            pattern = re.compile(query)
        except re.error as exc:
            raise QueryCompileError(f"Failed to parse regex {query!r}: {exc}") from exc
        return _any_term(
            ALL_TEXT_FIELD,
            (term for term in reader.field_terms(ALL_TEXT_FIELD) if pattern.fullmatch(term)),
        )

    raise QueryCompileError(f"Unsupported match mode: {mode!r}")


class Searcher:
    """High-level API to query an ephemeral record index."""

    def __init__(self, index: RecordIndex, *, fuzzy_distance: int = 2) -> None:
        self.index = index
        self.fuzzy_distance = fuzzy_distance

    def search(
        self,
        query: str,
        *,
        fields: Sequence[str] = (),
        mode: MatchMode = MatchMode.TEXT,
        window: int = 20,
    ) -> SearchHits:
        """Return up to ``window`` matches ordered by descending score."""
        with self.index.searcher() as searcher:
            compiled = compile_query(
                query,
                fields,
                mode,
                self.index,
                searcher.reader(),
                fuzzy_distance=self.fuzzy_distance,
            )
            LOGGER.debug("Compiled %s query: %r", mode.value, compiled)
            if compiled is NullQuery:
                return SearchHits()

            hits = searcher.search(compiled, limit=max(window, 1))
            results: List[SearchResult] = []
            for hit in hits:
                results.append(
                    SearchResult(
                        record=Record(
                            pointer=hit["pointer"],
                            file=hit["file"],
                            value=json.loads(hit["source"]),
                        ),
                        score=float(hit.score),
                    )
                )
            return SearchHits(results=results, total=len(hits))
