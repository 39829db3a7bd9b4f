"""Error types raised by jsonai operations."""

from __future__ import annotations


class JsonAIError(Exception):
    """Base class for failures reported to the user with exit code 2."""


class InputError(JsonAIError):
    """An input could not be read or is not valid JSON."""


class QueryCompileError(JsonAIError):
    """The query cannot be compiled for the chosen match mode."""


class EmptyCorpusError(JsonAIError):
    """No searchable object records were found in the inputs."""


class MutationError(JsonAIError):
    """A pointer edit or patch could not be applied."""


class FilterError(JsonAIError):
    """A jq filter failed to compile or run."""
