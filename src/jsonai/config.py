"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Directories holding tool or runtime state rather than user documents.
RUNTIME_DIRS: Tuple[str, ...] = (
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    ".tox",
    ".mypy_cache",
    ".pytest_cache",
)


@dataclass(slots=True)
class AppConfig:
    program_name: str = "jsonai"
    limit: int = 20
    threshold: int = 50
    reserved_bytes: int = 200
    facet_max_distinct: int = 20
    facet_top_values: int = 5
    fuzzy_distance: int = 2
    ignored_dirs: Tuple[str, ...] = RUNTIME_DIRS

