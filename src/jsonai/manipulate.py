"""JSON Pointer addressed edits and RFC 6902 patches.

Every operation returns a new document and leaves its input untouched, so a
failing edit never produces a partially modified file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import jsonpatch
import jsonpointer

from jsonai.errors import MutationError
from jsonai.output.formatter import to_json

LOGGER = logging.getLogger(__name__)


def parse_value(text: str) -> Any:
    """Parse a command line value as JSON."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MutationError(f"Invalid JSON value: {text}") from exc


def apply_operations(document: Any, operations: List[Dict[str, Any]]) -> Any:
    try:
        patch = jsonpatch.JsonPatch(operations)
        return patch.apply(document)
    except (jsonpatch.JsonPatchException, jsonpointer.JsonPointerException) as exc:
        raise MutationError(str(exc)) from exc


def json_set(document: Any, pointer: str, value: Any) -> Any:
    """Replace an existing member or array element; ``""`` replaces the whole document."""
    return apply_operations(document, [{"op": "replace", "path": pointer, "value": value}])


def json_add(document: Any, pointer: str, value: Any) -> Any:
    """RFC 6902 add: create or overwrite a key, insert at an index, or append with ``-``."""
    return apply_operations(document, [{"op": "add", "path": pointer, "value": value}])


def json_delete(document: Any, pointer: str) -> Any:
    if pointer == "":
        raise MutationError("Cannot delete the root document")
    return apply_operations(document, [{"op": "remove", "path": pointer}])


def parse_patch(text: str) -> List[Dict[str, Any]]:
    try:
        operations = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MutationError(f"Invalid JSON in patch document: {exc}") from exc
    if not isinstance(operations, list):
        raise MutationError("Patch document must be a JSON array of operations")
    for position, operation in enumerate(operations):
        if not isinstance(operation, dict):
            raise MutationError(f"Patch operation {position} must be a JSON object")
    return operations


def json_patch(document: Any, operations: List[Dict[str, Any]]) -> Any:
    """Apply all operations in order, or none of them."""
    LOGGER.debug("Applying %d patch operations", len(operations))
    return apply_operations(document, operations)


def write_document(document: Any, destination: Path, *, pretty: bool = True) -> None:
    """Write ``document`` to ``destination`` with a trailing newline."""
    try:
        destination.write_text(to_json(document, pretty) + "\n", encoding="utf-8")
    except OSError as exc:
        raise MutationError(f"Failed to write {destination}: {exc}") from exc
    LOGGER.debug("Wrote %s", destination)
