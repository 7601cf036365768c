"""Shared CLI helpers."""

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import load_config
from ..exceptions import CommitActivityError
from ..storage import ArtifactStore

console = Console()


def resolve_store(data_dir: Optional[Path] = None, config: Optional[Path] = None) -> ArtifactStore:
    """Artifact store for ``--data-dir``, falling back to the configured output dir."""
    if data_dir is not None:
        return ArtifactStore(data_dir)
    return ArtifactStore(load_config(config_file=config).output_path)


def fail(error: CommitActivityError) -> NoReturn:
    """Print *error* and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(1)
