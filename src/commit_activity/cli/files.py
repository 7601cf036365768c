"""``commit-activity files`` / ``show``: inspect collected artifacts."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from . import app
from ._common import console, fail, resolve_store
from ..exceptions import CommitActivityError
from ..documents import TimeSeriesDocument
from ..reconciler import author_totals


@app.command()
def files(
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", "-d", help="Artifact directory"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """List collected artifacts, newest first."""
    try:
        store = resolve_store(data_dir, config)
        names = store.list_artifacts()
    except CommitActivityError as e:
        fail(e)

    if not names:
        console.print("[yellow]No artifacts found[/yellow]")
        return

    table = Table(title=f"Artifacts in {store.data_dir}")
    table.add_column("Filename")
    table.add_column("Modified", style="dim")
    table.add_column("Size", justify="right")
    for name in names:
        stat = (store.data_dir / name).stat()
        modified = datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M")
        table.add_row(name, modified, f"{stat.st_size:,}")
    console.print(table)


@app.command()
def show(
    filename: str = typer.Argument(..., help="Artifact filename"),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", "-d", help="Artifact directory"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Summarize one artifact: range, intervals and per-author totals."""
    try:
        document = resolve_store(data_dir, config).read_artifact(filename)
    except CommitActivityError as e:
        fail(e)

    cfg = document.config
    labels = document.intervals
    console.print(f"[bold]{filename}[/bold]")
    console.print(
        f"{cfg.get('startDate', '?')} → {cfg.get('endDate', '?')}, "
        f"{len(labels)} interval(s) by {cfg.get('interval', '?')}"
    )
    print_totals(document)


def print_totals(document: TimeSeriesDocument) -> None:
    table = Table()
    table.add_column("Author")
    table.add_column("Commits", justify="right")
    table.add_column("Edits", justify="right")
    for totals in author_totals(document):
        table.add_row(totals.author, str(totals.commits), f"{totals.edits:,}")
    console.print(table)
