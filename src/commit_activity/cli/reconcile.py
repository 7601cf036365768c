"""``commit-activity reconcile``: merge author aliases and drop authors."""

import json
from pathlib import Path
from typing import List, Optional

import typer

from . import app
from ._common import console, fail, resolve_store
from .files import print_totals
from ..config import load_author_settings
from ..exceptions import CommitActivityError, InvalidInputError
from ..reconciler import reconcile


def parse_group(value: str) -> list[str]:
    """Split ``"Alice,alice.smith"`` into names; the first is canonical."""
    names = [name.strip() for name in value.split(",") if name.strip()]
    if not names:
        raise InvalidInputError("group", value, "expected comma-separated author names")
    return names


@app.command("reconcile")
def reconcile_cmd(
    filename: str = typer.Argument(..., help="Artifact filename"),
    group: Optional[List[str]] = typer.Option(
        None, "--group", "-g", help="Comma-separated aliases, canonical name first (repeatable)"
    ),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-x", help="Author to drop (repeatable)"
    ),
    authors_file: Optional[Path] = typer.Option(
        None,
        "--authors-file",
        "-a",
        help="TOML file with an [authors] table of groups and excludes",
        dir_okay=False,
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the reconciled document as JSON", dir_okay=False
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the reconciled document as JSON"),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", "-d", help="Artifact directory"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Apply author groups and excludes to an artifact.

    Groups from --authors-file come first, so they win over --group for
    names listed in both.
    """
    try:
        groups: list[list[str]] = []
        excludes: set[str] = set()
        if authors_file is not None:
            settings = load_author_settings(authors_file)
            groups.extend(list(g) for g in settings.groups)
            excludes.update(settings.excludes)
        groups.extend(parse_group(g) for g in group or [])
        excludes.update(exclude or [])

        document = resolve_store(data_dir, config).read_artifact(filename)
        result = reconcile(document, groups, excludes)
    except CommitActivityError as e:
        fail(e)

    if output is not None:
        output.write_text(
            json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
        console.print(f"[green]Saved[/green] {output}")
    elif as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        console.print(
            f"[bold]{filename}[/bold]: {len(document.authors)} author(s) → "
            f"{len(result.authors)} identit{'y' if len(result.authors) == 1 else 'ies'}"
        )
        print_totals(result)
