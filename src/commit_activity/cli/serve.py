"""``commit-activity serve``: HTTP API for the dashboard."""

import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from . import app
from ._common import console, fail, resolve_store
from ..exceptions import CommitActivityError
from ..server import create_app

logger = logging.getLogger(__name__)


@app.command()
def serve(
    port: int = typer.Option(3000, help="Port to listen on"),
    host: str = typer.Option("127.0.0.1", help="Host to bind to"),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", "-d", help="Artifact directory"),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
) -> None:
    """Serve artifact listings and contents over HTTP."""
    try:
        store = resolve_store(data_dir, config)
    except CommitActivityError as e:
        fail(e)
    if not store.data_dir.is_dir():
        logger.warning("Data directory %s does not exist yet", store.data_dir)

    url = f"http://{host}:{port}"
    console.print(f"[bold]Serving[/bold] {store.data_dir} → [link={url}]{url}[/link]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    try:
        uvicorn.run(create_app(store), host=host, port=port, log_level="warning")
    except KeyboardInterrupt:
        pass
    finally:
        console.print("\n[dim]Stopped.[/dim]")
