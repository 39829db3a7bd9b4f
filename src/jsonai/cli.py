"""Command line interface for jsonai."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional

import typer
from rich.console import Console

from jsonai.config import AppConfig
from jsonai.errors import InputError, JsonAIError
from jsonai.fields import collect_field_paths, collect_schema_paths
from jsonai.filtering import evaluate, render_outputs
from jsonai.ingestion.json_loader import STDIN_TOKEN, load_json_file, load_json_input
from jsonai.manipulate import (
    json_add,
    json_delete,
    json_patch,
    json_set,
    parse_patch,
    parse_value,
    write_document,
)
from jsonai.models import MatchMode, OutputMode
from jsonai.output.formatter import to_json
from jsonai.pipeline import SearchRequest, run_search
from jsonai.utils.pointer import resolve_pointer

EXIT_NO_MATCHES = 1
EXIT_ERROR = 2

console = Console(stderr=True)
app = typer.Typer(help="jsonai - agent-first JSON search and editing", no_args_is_help=True)

PRETTY_OPTION = typer.Option(False, "--pretty", help="Indent JSON written to stdout")
COMPACT_OPTION = typer.Option(False, "--compact", help="Write files without indentation")
DRY_RUN_OPTION = typer.Option(False, "--dry-run", help="Print the result instead of writing it")
OUTPUT_OPTION = typer.Option(None, "--output", help="Write to this path instead of FILE")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Verbose logging")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except JsonAIError as exc:
        console.print(f"Error: {exc}", style="red", markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(code=EXIT_ERROR) from exc


def _split_select(select: Optional[str]) -> Optional[List[str]]:
    if select is None:
        return None
    return [name.strip() for name in select.split(",") if name.strip()]


def _emit_document(
    document: Any, file: Path, output: Optional[Path], dry_run: bool, compact: bool
) -> None:
    if dry_run:
        typer.echo(to_json(document, not compact))
        return
    write_document(document, output or file, pretty=not compact)


@app.command()
def search(
    source: str = typer.Argument(
        ..., metavar="INPUT", help='JSON file, directory, glob pattern, or "-" for stdin'
    ),
    query: str = typer.Option(..., "--query", "-q", help="Search query string"),
    field: Optional[List[str]] = typer.Option(
        None, "--field", "-f", help="Search in specific field(s). Repeatable."
    ),
    match: MatchMode = typer.Option(MatchMode.TEXT, "--match", "-m", help="Match mode"),
    output: OutputMode = typer.Option(OutputMode.MATCH, "--output", "-o", help="Output mode"),
    limit: int = typer.Option(AppConfig().limit, "--limit", "-l", min=0, help="Max results to return"),
    offset: int = typer.Option(0, "--offset", min=0, help="Skip first N results"),
    count_only: bool = typer.Option(False, "--count-only", help="Only return the match count"),
    select: Optional[str] = typer.Option(
        None, "--select", help="Project specific fields in output (comma-separated)"
    ),
    bare: bool = typer.Option(False, "--bare", help="Output a bare JSON array instead of an envelope"),
    max_bytes: Optional[int] = typer.Option(
        None, "--max-bytes", min=0, help="Max output bytes (results truncated to fit)"
    ),
    threshold: int = typer.Option(
        AppConfig().threshold, "--threshold", min=0, help="Result count above which a plan is returned"
    ),
    plan: bool = typer.Option(False, "--plan", help="Always return a field/facet plan"),
    no_overflow: bool = typer.Option(False, "--no-overflow", help="Never replace results with a plan"),
    pretty: bool = PRETTY_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Search JSON documents by value."""
    _setup_logging(verbose)
    request = SearchRequest(
        query=query,
        source=source,
        fields=list(field or []),
        match_mode=match,
        output_mode=output,
        limit=limit,
        offset=offset,
        count_only=count_only,
        select=_split_select(select),
        bare=bare,
        max_bytes=max_bytes,
        threshold=threshold,
        force_plan=plan,
        no_overflow=no_overflow,
        pretty=pretty,
    )
    with _reporting_errors():
        outcome = run_search(request)

    typer.echo(outcome.output)
    if not outcome.has_matches:
        raise typer.Exit(code=EXIT_NO_MATCHES)


@app.command()
def fields(
    source: str = typer.Argument(..., metavar="INPUT", help='JSON file or "-" for stdin'),
    schema: bool = typer.Option(False, "--schema", help="Treat INPUT as a JSON Schema"),
    pretty: bool = PRETTY_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """List searchable field paths of a JSON document or schema."""
    _setup_logging(verbose)
    with _reporting_errors():
        value = load_json_input(source)
    paths = collect_schema_paths(value) if schema else collect_field_paths(value)
    typer.echo(to_json(paths, pretty))


@app.command()
def cat(
    source: str = typer.Argument(..., metavar="INPUT", help='JSON file or "-" for stdin'),
    pointer: Optional[str] = typer.Option(None, "--pointer", "-p", help="JSON Pointer to print"),
    pretty: bool = PRETTY_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print a document, or the value at a JSON Pointer."""
    _setup_logging(verbose)
    with _reporting_errors():
        value = load_json_input(source)
        if pointer is not None:
            try:
                value = resolve_pointer(value, pointer)
            except (KeyError, ValueError) as exc:
                raise InputError(f"Pointer {pointer} not found: {exc}") from exc
    typer.echo(to_json(value, pretty))


@app.command("set")
def set_command(
    file: Path = typer.Argument(..., help="JSON file to edit"),
    value: str = typer.Argument(..., help="New value as JSON"),
    pointer: str = typer.Option(..., "--pointer", "-p", help="JSON Pointer of the target"),
    output: Optional[Path] = OUTPUT_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    compact: bool = COMPACT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Replace the existing value at a JSON Pointer."""
    _setup_logging(verbose)
    with _reporting_errors():
        document = json_set(load_json_file(file), pointer, parse_value(value))
        _emit_document(document, file, output, dry_run, compact)


@app.command("add")
def add_command(
    file: Path = typer.Argument(..., help="JSON file to edit"),
    value: str = typer.Argument(..., help="Value to add as JSON"),
    pointer: str = typer.Option(..., "--pointer", "-p", help="JSON Pointer of the new value"),
    output: Optional[Path] = OUTPUT_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    compact: bool = COMPACT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Add a value at a JSON Pointer (RFC 6902 add semantics)."""
    _setup_logging(verbose)
    with _reporting_errors():
        document = json_add(load_json_file(file), pointer, parse_value(value))
        _emit_document(document, file, output, dry_run, compact)


@app.command("delete")
def delete_command(
    file: Path = typer.Argument(..., help="JSON file to edit"),
    pointer: str = typer.Option(..., "--pointer", "-p", help="JSON Pointer to remove"),
    output: Optional[Path] = OUTPUT_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    compact: bool = COMPACT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Delete the value at a JSON Pointer."""
    _setup_logging(verbose)
    with _reporting_errors():
        document = json_delete(load_json_file(file), pointer)
        _emit_document(document, file, output, dry_run, compact)


@app.command("patch")
def patch_command(
    file: Path = typer.Argument(..., help="JSON file to edit"),
    patch: Optional[str] = typer.Argument(
        None, metavar="PATCH", help='RFC 6902 patch file, or "-" / omitted for stdin'
    ),
    output: Optional[Path] = OUTPUT_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    compact: bool = COMPACT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Apply an RFC 6902 JSON Patch atomically."""
    _setup_logging(verbose)
    with _reporting_errors():
        if patch is None or patch == STDIN_TOKEN:
            patch_text = sys.stdin.read()
        else:
            try:
                patch_text = Path(patch).read_text(encoding="utf-8")
            except OSError as exc:
                raise InputError(f"Failed to read patch file {patch}: {exc}") from exc
        document = json_patch(load_json_file(file), parse_patch(patch_text))
        _emit_document(document, file, output, dry_run, compact)


@app.command("query")
def query_command(
    source: str = typer.Argument(..., metavar="INPUT", help='JSON file or "-" for stdin'),
    filter_text: str = typer.Option(..., "--filter", "-F", help="jq filter expression"),
    pretty: bool = PRETTY_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Evaluate a jq filter against a JSON document."""
    _setup_logging(verbose)
    with _reporting_errors():
        outputs = evaluate(filter_text, load_json_input(source))
    rendered = render_outputs(outputs, pretty)
    if rendered is not None:
        typer.echo(rendered)
