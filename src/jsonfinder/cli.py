"""Command line interface for JsonFinder."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from jsonfinder.config import AppConfig
from jsonfinder.errors import InvalidOperator
from jsonfinder.index.indexer import Indexer, IndexStats
from jsonfinder.index.search import Searcher
from jsonfinder.index.storage import DocumentStore
from jsonfinder.models import Clause


console = Console()
app = typer.Typer(help="JsonFinder - field index and query engine for JSONL records")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_store(inputs: List[Path], config: AppConfig) -> tuple[DocumentStore, IndexStats]:
    store = DocumentStore()
    indexer = Indexer(store, suffixes=config.suffixes, encoding=config.encoding)
    stats = indexer.index(config.resolve_paths(inputs, Path.cwd()))
    return store, stats


def _parse_clauses(raw_clauses: List[str], clauses_file: Optional[Path]) -> List[Clause]:
    entries: List[Any] = []
    for raw in raw_clauses:
        try:
            entries.append(json.loads(raw))
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"Clause is not valid JSON: {raw}") from exc
    if clauses_file is not None:
        try:
            loaded = json.loads(clauses_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise typer.BadParameter(f"Unable to read clauses from {clauses_file}: {exc}") from exc
        entries.extend(loaded if isinstance(loaded, list) else [loaded])

    clauses: List[Clause] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise typer.BadParameter(f"Clause must be a JSON object: {entry!r}")
        try:
            clauses.append(Clause.from_dict(entry))
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
    return clauses


@app.command()
def index(
    inputs: List[Path] = typer.Argument(..., help="JSONL files or directories to index."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Index JSONL files and report what was ingested."""
    _setup_logging(verbose)
    config = AppConfig()
    store, stats = _load_store(inputs, config)
    if not stats.processed_files:
        console.print("[yellow]No JSONL files found.[/yellow]")
        return

    console.print(
        f"Inserted: {stats.inserted}, skipped: {stats.skipped}, "
        f"failed: {stats.failed}, blank: {stats.blank}, unreadable files: {stats.unreadable}"
    )
    console.print(f"Available keys: {len(store.available_keys())}")


@app.command()
def keys(
    inputs: List[Path] = typer.Argument(..., help="JSONL files or directories to index."),
    prefix: str = typer.Option("", "--prefix", help="Only show keys starting with this prefix"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List every field path observed in the input."""
    _setup_logging(verbose)
    store, _ = _load_store(inputs, AppConfig())
    available = [key for key in store.available_keys() if key.startswith(prefix)]
    if not available:
        console.print("[yellow]No keys found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Key")
    table.add_column("Documents", justify="right")
    for key in available:
        table.add_row(key, str(len(store.postings(key))))
    console.print(table)


@app.command()
def search(
    inputs: List[Path] = typer.Argument(..., help="JSONL files or directories to index."),
    clause: List[str] = typer.Option(
        [], "--clause", "-c", help='Clause as JSON, e.g. \'{"key": "a.b", "operator": "==", "value": 1}\''
    ),
    clauses_file: Optional[Path] = typer.Option(
        None, "--clauses-file", help="JSON file holding a clause or a list of clauses"
    ),
    operator: str = typer.Option(
        AppConfig().default_operator, "--operator", "-o", help="AND, OR or NOT"
    ),
    limit: Optional[int] = typer.Option(None, help="Maximum number of results to display"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON lines"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run a clause query against the indexed documents."""
    _setup_logging(verbose)
    config = AppConfig()
    clauses = _parse_clauses(clause, clauses_file)
    store, _ = _load_store(inputs, config)

    try:
        results = Searcher(store).search(clauses, operator, limit=limit)
    except InvalidOperator as exc:
        raise typer.BadParameter(str(exc)) from exc

    if as_json:
        for result in results:
            typer.echo(json.dumps(result.to_dict(config.id_field), ensure_ascii=False))
        return

    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Document ID")
    table.add_column("Document")
    for result in results:
        body = json.dumps(result.document, ensure_ascii=False, separators=(",", ":"))
        table.add_row(result.document_id[:16], body[:180])
    console.print(table)
    console.print(f"{len(results)} match(es)")


@app.command()
def web(
    inputs: Optional[List[Path]] = typer.Argument(None, help="JSONL files to preload."),
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install it with \"python -m pip install uvicorn\""
        ) from exc

    from jsonfinder.web.app import create_app

    _setup_logging(False)
    config = AppConfig()
    store = DocumentStore()
    if inputs:
        store, stats = _load_store(inputs, config)
        console.print(f"Preloaded {stats.inserted} document(s)")

    console.print(f"Starting API on http://{host}:{port}")
    uvicorn.run(
        create_app(store, config),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
