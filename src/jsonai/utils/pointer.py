"""JSON Pointer helpers (RFC 6901) with the root sentinel used by search."""

from __future__ import annotations

from typing import Any, List

# Records address the root object as "/" rather than RFC 6901's "".
ROOT_POINTER = "/"


def escape_segment(segment: str) -> str:
    """Escape one reference token: ``~`` becomes ``~0`` and ``/`` becomes ``~1``."""
    return segment.replace("~", "~0").replace("/", "~1")


def unescape_segment(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def child_pointer(parent: str, segment: str | int) -> str:
    """Address of ``segment`` below ``parent``."""
    token = escape_segment(segment) if isinstance(segment, str) else str(segment)
    if parent == ROOT_POINTER:
        return f"/{token}"
    return f"{parent}/{token}"


def split_pointer(pointer: str) -> List[str]:
    """Unescaped reference tokens of ``pointer``; the root yields none."""
    if pointer in ("", ROOT_POINTER):
        return []
    if not pointer.startswith("/"):
        raise ValueError(f"JSON Pointer must start with '/' (got {pointer!r})")
    return [unescape_segment(token) for token in pointer[1:].split("/")]


def resolve_pointer(document: Any, pointer: str) -> Any:
    """Return the value addressed by ``pointer`` inside ``document``.

    Both ``""`` and the ``"/"`` sentinel address the whole document.
    Raises ``KeyError`` when the path does not exist.
    """
    current = document
    for token in split_pointer(pointer):
        if isinstance(current, dict):
            if token not in current:
                raise KeyError(f"Key {token!r} not found at {pointer!r}")
            current = current[token]
        elif isinstance(current, list):
            if not token.isdigit() or int(token) >= len(current):
                raise KeyError(f"Invalid array index {token!r} at {pointer!r}")
            current = current[int(token)]
        else:
            raise KeyError(f"Cannot descend into a scalar at {pointer!r}")
    return current


def is_ancestor(ancestor: str, descendant: str) -> bool:
    """True when ``ancestor`` addresses a proper ancestor of ``descendant``."""
    if ancestor == descendant:
        return False
    if ancestor == ROOT_POINTER:
        return True
    return descendant.startswith(ancestor + "/")
