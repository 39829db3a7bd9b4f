"""Field path listing for documents and JSON Schemas."""

from __future__ import annotations

from typing import Any, List


def collect_field_paths(value: Any, prefix: str = "") -> List[str]:
    """Sorted, unique dotted paths of every object key in ``value``.

    Arrays contribute the paths of their first element only.
    """
    paths: List[str] = []
    _walk_value(value, prefix, paths)
    return sorted(set(paths))


def _walk_value(value: Any, prefix: str, paths: List[str]) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            path = f"{prefix}.{key}" if prefix else key
            paths.append(path)
            _walk_value(child, path, paths)
    elif isinstance(value, list) and value:
        _walk_value(value[0], prefix, paths)


def collect_schema_paths(schema: Any, prefix: str = "") -> List[str]:
    """Sorted, unique dotted paths declared by a JSON Schema's ``properties``."""
    paths: List[str] = []
    _walk_schema(schema, prefix, paths)
    return sorted(set(paths))


def _walk_schema(schema: Any, prefix: str, paths: List[str]) -> None:
    if not isinstance(schema, dict):
        return
    properties = schema.get("properties")
    if isinstance(properties, dict):
        for key, child in properties.items():
            path = f"{prefix}.{key}" if prefix else key
            paths.append(path)
            _walk_schema(child, path, paths)
    items = schema.get("items")
    if isinstance(items, dict):
        _walk_schema(items, prefix, paths)
