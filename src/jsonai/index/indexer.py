"""Ephemeral full-text index over extracted records."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from whoosh.analysis import LowercaseFilter, RegexTokenizer
from whoosh.fields import ID, STORED, TEXT, Schema
from whoosh.filedb.filestore import RamStorage
from whoosh.index import Index

from jsonai.models import Record
from jsonai.utils.text import collect_all_text, iter_leaf_paths

LOGGER = logging.getLogger(__name__)

ALL_TEXT_FIELD = "alltext"
CONTENT_PREFIX = "c_"

# Alphanumeric runs, lower-cased. No stop words and no minimum length so
# short values such as "1" stay searchable.
ANALYZER = RegexTokenizer(r"[^\W_]+") | LowercaseFilter()


def content_field(path: str) -> str:
    """Index field holding the leaves found at a dotted JSON ``path``.

    JSON keys may contain characters Whoosh does not allow in field names,
    so the path is hex encoded.
    """
    return CONTENT_PREFIX + path.encode("utf-8").hex()


def build_schema() -> Schema:
    schema = Schema(
        pointer=ID(stored=True),
        file=ID(stored=True),
        source=STORED,
        alltext=TEXT(analyzer=ANALYZER),
    )
    schema.add(CONTENT_PREFIX + "*", TEXT(analyzer=ANALYZER), glob=True)
    return schema


def index_document(record: Record) -> Dict[str, Any]:
    """Fields written to the index for one record."""
    by_path: Dict[str, List[str]] = {}
    for path, text in iter_leaf_paths(record.value):
        by_path.setdefault(path, []).append(text)

    fields: Dict[str, Any] = {
        "pointer": record.pointer,
        "file": record.file,
        "source": json.dumps(record.value, separators=(",", ":"), ensure_ascii=False),
        ALL_TEXT_FIELD: collect_all_text(record.value),
    }
    for path, texts in by_path.items():
        fields[content_field(path)] = " ".join(texts)
    return fields


@dataclass(slots=True)
class RecordIndex:
    """In-memory index owned by a single search call."""

    index: Index
    size: int

    @classmethod
    def build(cls, records: Sequence[Record]) -> "RecordIndex":
        index = RamStorage().create_index(build_schema())
        writer = index.writer()
        for record in records:
            writer.add_document(**index_document(record))
        writer.commit()
        LOGGER.debug("Indexed %d records", len(records))
        return cls(index=index, size=len(records))

    @property
    def schema(self) -> Schema:
        return self.index.schema

    def searcher(self):
        return self.index.searcher()
