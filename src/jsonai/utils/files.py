"""Utility helpers for locating JSON input files."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Iterable, Iterator, List

import pathspec

from jsonai.config import RUNTIME_DIRS


def load_gitignore(directory: Path) -> pathspec.PathSpec | None:
    """Parse ``directory/.gitignore`` if it exists."""
    gitignore = directory / ".gitignore"
    if not gitignore.is_file():
        return None
    with gitignore.open("r", encoding="utf-8") as handle:
        return pathspec.PathSpec.from_lines("gitwildmatch", handle)


def iter_json_paths(
    directory: Path, *, ignored_dirs: Iterable[str] = RUNTIME_DIRS
) -> Iterator[Path]:
    """Yield ``*.json`` files below ``directory`` in sorted order.

    Files inside runtime directories (``.git``, ``node_modules``, ...) and
    paths matched by the directory's ``.gitignore`` are skipped.
    """
    skip = set(ignored_dirs)
    ignore_rules = load_gitignore(directory)
    for path in sorted(directory.rglob("*.json")):
        if not path.is_file():
            continue
        relative = path.relative_to(directory)
        if any(part in skip for part in relative.parts[:-1]):
            continue
        if ignore_rules is not None and ignore_rules.match_file(relative.as_posix()):
            continue
        yield path


def expand_glob(pattern: str) -> List[Path]:
    """Files matching a glob pattern; ``**`` matches across directories."""
    return [Path(match) for match in sorted(glob.glob(pattern, recursive=True)) if Path(match).is_file()]
