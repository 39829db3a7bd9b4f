"""JSON input loading and record extraction.

Inputs are a single file, a directory, a glob pattern, or ``-`` for stdin.
Each loaded document is walked into records, one per object node.
"""

from __future__ import annotations

import copy
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, List, TextIO, Tuple

from jsonai.config import RUNTIME_DIRS
from jsonai.errors import InputError
from jsonai.models import Document, Record
from jsonai.utils.files import expand_glob, iter_json_paths
from jsonai.utils.pointer import ROOT_POINTER, child_pointer

LOGGER = logging.getLogger(__name__)

STDIN_TOKEN = "-"
STDIN_LABEL = "stdin"


def parse_json_text(text: str, label: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputError(f"Invalid JSON in {label}: {exc}") from exc


def load_json_file(path: Path | str) -> Any:
    """Read and parse one JSON file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Failed to read {path}: {exc}") from exc
    return parse_json_text(text, str(path))


def load_json_stream(stream: TextIO | None = None) -> Any:
    stream = stream if stream is not None else sys.stdin
    try:
        text = stream.read()
    except OSError as exc:
        raise InputError(f"Failed to read stdin: {exc}") from exc
    return parse_json_text(text, STDIN_LABEL)


def load_json_input(source: str) -> Any:
    """Load a single JSON value from a file path or ``-``."""
    if source == STDIN_TOKEN:
        return load_json_stream()
    return load_json_file(source)


def _load_many(paths: Iterable[Path], description: str) -> List[Document]:
    documents: List[Document] = []
    for path in paths:
        try:
            value = load_json_file(path)
        except InputError as exc:
            LOGGER.warning("Skipping %s: %s", path, exc)
            continue
        documents.append(Document(file=str(path), value=value))
    if not documents:
        raise InputError(f"No JSON files found matching pattern: {description}")
    return documents


def load_documents(
    source: str, *, ignored_dirs: Iterable[str] = RUNTIME_DIRS
) -> List[Document]:
    """Load every document named by ``source``.

    A single file or stdin must load; for directories and globs unreadable
    files are skipped with a warning as long as one file succeeds.
    """
    if source == STDIN_TOKEN:
        return [Document(file=STDIN_LABEL, value=load_json_stream())]

    path = Path(source)
    if path.is_file():
        return [Document(file=source, value=load_json_file(path))]
    if path.is_dir():
        return _load_many(
            iter_json_paths(path, ignored_dirs=ignored_dirs), f"{source}/**/*.json"
        )
    return _load_many(expand_glob(source), source)


def extract_records(value: Any, file: str) -> List[Record]:
    """Walk ``value`` in pre-order and emit one record per object node.

    Arrays are descended into but never produce a record themselves, and
    scalars are only visible inside their enclosing object.
    """
    records: List[Record] = []
    _extract(value, ROOT_POINTER, file, records)
    return records


def _extract(value: Any, pointer: str, file: str, records: List[Record]) -> None:
    if isinstance(value, dict):
        records.append(Record(pointer=pointer, file=file, value=copy.deepcopy(value)))
        for key, child in value.items():
            _extract(child, child_pointer(pointer, key), file, records)
    elif isinstance(value, list):
        for index, item in enumerate(value):
            _extract(item, child_pointer(pointer, index), file, records)


def load_records(
    source: str, *, ignored_dirs: Iterable[str] = RUNTIME_DIRS
) -> Tuple[List[Record], int]:
    """Load ``source`` and extract its records; returns ``(records, files_searched)``."""
    documents = load_documents(source, ignored_dirs=ignored_dirs)
    records: List[Record] = []
    for document in documents:
        extracted = extract_records(document.value, document.file)
        LOGGER.debug("Extracted %d records from %s", len(extracted), document.file)
        records.extend(extracted)
    return records, len(documents)
