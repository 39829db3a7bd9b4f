"""Core jsonai data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class MatchMode(str, Enum):
    """How the query string is matched against indexed records."""

    TEXT = "text"
    EXACT = "exact"
    FUZZY = "fuzzy"
    REGEX = "regex"


class OutputMode(str, Enum):
    """Shape of each emitted result item."""

    MATCH = "match"
    HIT = "hit"
    VALUE = "value"


@dataclass(slots=True)
class Document:
    """A JSON value loaded from one input source."""

    file: str
    value: Any


@dataclass(slots=True)
class Record:
    """An object node of a document, addressed by JSON Pointer."""

    pointer: str
    file: str
    value: Any


@dataclass(slots=True)
class SearchResult:
    record: Record
    score: float


@dataclass(slots=True)
class Meta:
    """Envelope metadata describing one response."""

    total: int
    returned: int
    limit: int
    truncated: bool
    files_searched: Optional[int] = None
    overflow: Optional[bool] = None
    threshold: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "total": self.total,
            "returned": self.returned,
            "limit": self.limit,
            "truncated": self.truncated,
        }
        for name in ("files_searched", "overflow", "threshold"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


@dataclass(slots=True)
class FieldSummary:
    name: str
    pointer_path: str
    distinct_count: int


@dataclass(slots=True)
class FacetValue:
    value: str
    count: int


@dataclass(slots=True)
class Plan:
    """Field and facet summary returned in place of overflowing results."""

    fields: List[FieldSummary] = field(default_factory=list)
    facets: Dict[str, List[FacetValue]] = field(default_factory=dict)
    commands: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fields": [
                {
                    "name": summary.name,
                    "pointer_path": summary.pointer_path,
                    "distinct_count": summary.distinct_count,
                }
                for summary in self.fields
            ],
            "facets": {
                name: [{"value": item.value, "count": item.count} for item in values]
                for name, values in self.facets.items()
            },
            "commands": list(self.commands),
        }
