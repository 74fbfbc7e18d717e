"""Shadow client: read from GitHub, print every write instead of sending it."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel

from jobreport_core.models import Status

console = Console()


class ShadowClient:
    """Wraps a real client; reads pass through, mutations are only printed."""

    def __init__(self, client):
        self._client = client

    def bot_user_checker(self):
        return self._client.bot_user_checker()

    def list_issue_comments(self, org, repo, number):
        return self._client.list_issue_comments(org, repo, number)

    def list_commit_comments(self, org, repo, sha):
        return self._client.list_commit_comments(org, repo, sha)

    def create_status(self, org: str, repo: str, ref: str, status: Status) -> None:
        console.print(
            f"[dim]shadow[/dim] status [bold]{status.state}[/bold] {status.context!r} on {org}/{repo}@{ref[:7]}"
        )

    def create_comment(self, org: str, repo: str, number: int, body: str) -> None:
        console.print(Panel(body, title=f"shadow: new comment on {org}/{repo}#{number}"))

    def edit_comment(self, org: str, repo: str, comment_id: int, body: str) -> None:
        console.print(Panel(body, title=f"shadow: edit comment {comment_id} on {org}/{repo}"))

    def delete_comment(self, org: str, repo: str, comment_id: int) -> None:
        console.print(f"[dim]shadow[/dim] delete comment {comment_id} on {org}/{repo}")

    def create_commit_comment(self, org: str, repo: str, sha: str, body: str) -> None:
        console.print(Panel(body, title=f"shadow: new comment on {org}/{repo}@{sha[:7]}"))

    def edit_commit_comment(self, org: str, repo: str, comment_id: int, body: str) -> None:
        console.print(Panel(body, title=f"shadow: edit commit comment {comment_id} on {org}/{repo}"))

    def delete_commit_comment(self, org: str, repo: str, comment_id: int) -> None:
        console.print(f"[dim]shadow[/dim] delete commit comment {comment_id} on {org}/{repo}")
