"""CLI entry point: registers all subcommands."""

from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..logging_config import setup_logging
from ._common import console

app = typer.Typer(
    name="commit-activity",
    help="Commit Activity - per-author commit and edit statistics from GitLab",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"commit-activity {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all but ERROR logging"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Also write logs to this file", dir_okay=False
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Collect commit statistics and serve them to the dashboard."""
    setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)


# Import subcommands to register them
from .collect import collect as _collect  # noqa: F401, E402
from .files import files as _files, show as _show  # noqa: F401, E402
from .reconcile import reconcile_cmd as _reconcile  # noqa: F401, E402
from .serve import serve as _serve  # noqa: F401, E402
