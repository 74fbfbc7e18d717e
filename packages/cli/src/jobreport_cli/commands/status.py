"""status command — set commit statuses for a batch of job results."""

from __future__ import annotations

import click
from rich.console import Console

from jobreport_core.errors import ReportError

console = Console()


@click.command("status")
@click.option("--jobs", "jobs_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Job batch file.")
@click.option("--shadow", "-s", is_flag=True, help="Dry-run mode: print statuses without setting them.")
@click.pass_context
def status_cmd(ctx, jobs_path: str, shadow: bool):
    """Set a commit status for every job in the batch file."""
    from jobreport_cli.cli import build_client
    from jobreport_core.batch import load_batch
    from jobreport_core.config import job_types
    from jobreport_core.status import report_status_context

    config = ctx.obj["config"]
    try:
        jobs = load_batch(jobs_path)
        types = job_types(config)
    except ReportError as e:
        raise click.ClickException(str(e))

    client = build_client(config, shadow=shadow)

    reported = 0
    for job in jobs:
        try:
            status = report_status_context(client, job, types)
        except ReportError as e:
            raise click.ClickException(str(e))
        if status is None:
            console.print(f"  Skipping: {job.context}")
            continue
        reported += 1
        console.print(f"  {job.context}: [bold]{status.state}[/bold]")

    console.print(f"[green]{reported} status(es) reported.[/green]")
