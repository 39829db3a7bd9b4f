"""Tests for the ephemeral record index."""

from __future__ import annotations

import json

from jsonai.index.indexer import (
    ALL_TEXT_FIELD,
    CONTENT_PREFIX,
    RecordIndex,
    build_schema,
    content_field,
    index_document,
)
from jsonai.models import Record


class TestContentField:
    """Test content_field naming."""

    def test_names_are_deterministic_and_safe(self) -> None:
        """Should map any key to a valid field name."""
        name = content_field("user name/with:colon")

        assert name.startswith(CONTENT_PREFIX)
        assert name == content_field("user name/with:colon")
        assert all(char.isalnum() or char == "_" for char in name)

    def test_distinct_paths_distinct_fields(self) -> None:
        """Should not collide for different paths."""
        assert content_field("a") != content_field("a.b")


class TestBuildSchema:
    """Test build_schema."""

    def test_static_and_dynamic_fields(self) -> None:
        """Should accept stored fields and any content field."""
        schema = build_schema()

        assert "pointer" in schema
        assert "file" in schema
        assert "source" in schema
        assert ALL_TEXT_FIELD in schema
        assert content_field("anything") in schema


class TestIndexDocument:
    """Test index_document."""

    def test_fields(self) -> None:
        """Should expose all-text, per-path text and the stored source."""
        record = Record(
            pointer="/a",
            file="f.json",
            value={"name": "Ada", "tags": ["x", "y"], "meta": {"age": 36, "ok": True}},
        )

        fields = index_document(record)

        assert fields["pointer"] == "/a"
        assert fields["file"] == "f.json"
        assert json.loads(fields["source"]) == record.value
        assert fields[ALL_TEXT_FIELD] == "Ada x y 36 true"
        assert fields[content_field("name")] == "Ada"
        assert fields[content_field("tags")] == "x y"
        assert fields[content_field("meta.age")] == "36"
        assert content_field("meta") not in fields


class TestRecordIndex:
    """Test RecordIndex.build."""

    def test_build_counts_documents(self) -> None:
        """Should index every record."""
        records = [
            Record(pointer="/", file="f", value={"a": {"b": 1}}),
            Record(pointer="/a", file="f", value={"b": 1}),
        ]

        index = RecordIndex.build(records)

        assert index.size == 2
        assert index.index.doc_count() == 2

    def test_stored_fields_round_trip(self) -> None:
        """Should store pointer, file and source for reconstruction."""
        index = RecordIndex.build([Record(pointer="/x", file="f", value={"k": "v"})])

        with index.searcher() as searcher:
            stored = searcher.stored_fields(0)

        assert stored["pointer"] == "/x"
        assert stored["file"] == "f"
        assert json.loads(stored["source"]) == {"k": "v"}
