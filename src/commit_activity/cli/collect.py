"""``commit-activity collect``: pull commit statistics from GitLab."""

from pathlib import Path
from typing import Optional

import typer

from . import app
from ._common import console, fail
from ..collector import StatsCollector
from ..config import load_config
from ..exceptions import CommitActivityError
from ..intervals import DateRange, Granularity, parse_date


@app.command()
def collect(
    repo: str = typer.Argument(
        ..., help="Repository URL (https://gitlab.com/group/repo) or group/repo path"
    ),
    interval: str = typer.Option("day", "--interval", "-i", help="Bucket size: day, week, month"),
    from_date: Optional[str] = typer.Option(
        None, "--from", help="Start date YYYY-MM-DD (default: --months before --to)"
    ),
    to_date: Optional[str] = typer.Option(None, "--to", help="End date YYYY-MM-DD (default: today)"),
    months: int = typer.Option(
        1, "--months", "-m", min=1, help="Months to look back when --from is not given"
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory to write the artifact to", file_okay=False
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file path (TOML format)", dir_okay=False
    ),
) -> None:
    """Fetch commits for a date range and write a time-series artifact.

    The access token is read from GITLAB_TOKEN (environment or .env).
    """
    try:
        settings = load_config(
            config_file=config, output_dir=str(output_dir) if output_dir else None
        )
        granularity = Granularity.parse(interval)
        date_range = DateRange.from_options(
            start=parse_date(from_date) if from_date else None,
            end=parse_date(to_date) if to_date else None,
            months=months,
        )

        console.print(
            f"[bold]Collecting[/bold] {repo} "
            f"[dim]{date_range.start} → {date_range.end}, by {granularity.value}[/dim]"
        )
        with console.status("[cyan]Fetching project...") as status:

            def _progress(page: int, collected: int, total: Optional[int]) -> None:
                status.update(
                    f"[cyan]Fetching commits: page {page}, collected {collected}/{total or '?'}"
                )

            result = StatsCollector(settings).collect(
                repo, date_range, granularity, progress=_progress
            )
    except CommitActivityError as e:
        fail(e)

    labels = result.document.intervals
    console.print(f"[green]Saved[/green] {result.path}")
    console.print(
        f"Processed {result.commit_count} commits from {len(result.document.authors)} authors"
    )
    if labels:
        console.print(
            f"Time period: {len(labels)} {granularity.value}s from {labels[0]} to {labels[-1]}"
        )
