"""report command — set statuses and sync the failure report comment."""

from __future__ import annotations

import click
from rich.console import Console

from jobreport_core.errors import ReportError
from jobreport_core.models import SyncOutcome

console = Console()


def _print_outcome(outcome: SyncOutcome) -> None:
    where = f"{outcome.org}/{outcome.repo} {outcome.target}"
    if outcome.deleted:
        console.print(f"  Deleted {len(outcome.deleted)} stale report comment(s) on {where}.")
    if outcome.created:
        console.print(f"  [yellow]Posted report on {where}: {len(outcome.entries)} failing job(s).[/yellow]")
    elif outcome.updated is not None:
        console.print(f"  Updated report {outcome.updated} on {where}: {len(outcome.entries)} failing job(s).")
    elif not outcome.entries:
        console.print(f"  [green]No failing jobs on {where}.[/green]")


@click.command("report")
@click.option("--jobs", "jobs_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Job batch file.")
@click.option("--force", is_flag=True, help="Post a report comment even when every job passed.")
@click.option("--skip-status", is_flag=True, help="Only sync the report comment; leave commit statuses alone.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print statuses and comments without posting to GitHub.",
)
@click.pass_context
def report_cmd(ctx, jobs_path: str, force: bool, skip_status: bool, shadow: bool):
    """Report a batch of job results on GitHub.

    Sets a commit status for each job, then creates, updates or deletes the
    single report comment listing the failing jobs.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token (or github_token_path, or gh CLI)
    """
    from jobreport_cli.cli import build_client
    from jobreport_core.batch import load_batch
    from jobreport_core.config import job_types, load_template_source
    from jobreport_core.render import ABOUT_THIS_BOT, compile_template
    from jobreport_core.reporter import report_comment
    from jobreport_core.status import report_status_context

    config = ctx.obj["config"]
    try:
        jobs = load_batch(jobs_path)
        types = job_types(config)
        template = compile_template(load_template_source(config))
    except ReportError as e:
        raise click.ClickException(str(e))

    client = build_client(config, shadow=shadow)

    try:
        if not skip_status:
            for job in jobs:
                report_status_context(client, job, types)
        about = config.get("about_bot") or ABOUT_THIS_BOT
        outcomes = report_comment(client, jobs, types, template, must_create=force, about=about)
    except ReportError as e:
        raise click.ClickException(str(e))

    if not outcomes:
        console.print("[yellow]No reportable jobs in batch.[/yellow]")
    for outcome in outcomes:
        _print_outcome(outcome)
