"""jq filter evaluation for the ``query`` command."""

from __future__ import annotations

from typing import Any, List, Optional

import jq

from jsonai.errors import FilterError
from jsonai.output.formatter import to_json

ESCAPED_BANG_HINT = "`\\!` detected. Use `!=` (no backslash) or `== ... | not`."
UNARY_BANG_HINT = "Unary `!` is unsupported. Use `not`."


def evaluate(filter_text: str, value: Any) -> List[Any]:
    """Run ``filter_text`` against ``value`` and collect every output."""
    if "\\!" in filter_text:
        raise FilterError(ESCAPED_BANG_HINT)
    if filter_text.strip().startswith("!"):
        raise FilterError(UNARY_BANG_HINT)

    try:
        program = jq.compile(filter_text)
    except ValueError as exc:
        raise FilterError(f"Parse error: {exc}") from exc

    try:
        return program.input_value(value).all()
    except ValueError as exc:
        raise FilterError(f"Runtime error: {exc}") from exc


def render_outputs(outputs: List[Any], pretty: bool = False) -> Optional[str]:
    """Nothing for no output, the value itself for one, an array for several."""
    if not outputs:
        return None
    if len(outputs) == 1:
        return to_json(outputs[0], pretty)
    return to_json(outputs, pretty)
