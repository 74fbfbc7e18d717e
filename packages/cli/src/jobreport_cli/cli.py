"""CLI entry point for jobreport.

Commands:
  report  — set commit statuses and sync the failure report comment
  status  — set commit statuses only
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from jobreport_cli.commands.report import report_cmd
from jobreport_cli.commands.status import status_cmd

console = Console()


def build_client(config: dict, shadow: bool = False):
    """Create the GitHub client for a command.

    Lives in the CLI so jobreport_core never resolves credentials itself.
    """
    from jobreport_core.gh.client import GithubClient
    from jobreport_cli.auth import resolve_github_token
    from jobreport_cli.shadow import ShadowClient

    token = resolve_github_token(config.get("github_token_path"))
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN, configure github_token_path, or run `gh auth login` first."
        )
    client = GithubClient(token)
    return ShadowClient(client) if shadow else client


@click.group()
@click.version_option(
    version=importlib.metadata.version("jobreport"),
    prog_name="jobreport",
)
@click.option(
    "--config",
    "config_path",
    default=".jobreport.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="JOBREPORT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every GitHub mutation and skipped job.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Report CI job results on GitHub pull requests and commits."""
    from jobreport_core.config import load_config

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(console=console)])

    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)


main.add_command(report_cmd)
main.add_command(status_cmd)
