"""GitHub transport: narrow capability protocols and a PyGithub implementation.

Reporting functions declare only the capabilities they use (a status writer,
or a comment client) so tests and dry runs can supply small fakes.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from github import Github
from github.GithubObject import NotSet

from jobreport_core.models import RemoteComment, Status

logger = logging.getLogger(__name__)


class BotIdentity(Protocol):
    def bot_user_checker(self) -> Callable[[str], bool]: ...


class StatusWriter(Protocol):
    def create_status(self, org: str, repo: str, ref: str, status: Status) -> None: ...


class CommentReader(Protocol):
    def list_issue_comments(self, org: str, repo: str, number: int) -> list[RemoteComment]: ...

    def list_commit_comments(self, org: str, repo: str, sha: str) -> list[RemoteComment]: ...


class CommentWriter(Protocol):
    def create_comment(self, org: str, repo: str, number: int, body: str) -> None: ...

    def edit_comment(self, org: str, repo: str, comment_id: int, body: str) -> None: ...

    def delete_comment(self, org: str, repo: str, comment_id: int) -> None: ...

    def create_commit_comment(self, org: str, repo: str, sha: str, body: str) -> None: ...

    def edit_commit_comment(self, org: str, repo: str, comment_id: int, body: str) -> None: ...

    def delete_commit_comment(self, org: str, repo: str, comment_id: int) -> None: ...


class CommentClient(BotIdentity, CommentReader, CommentWriter, Protocol):
    """Everything comment synchronization needs."""


class ReporterClient(StatusWriter, CommentClient, Protocol):
    """Status and comment capabilities, as used when reporting a single job."""


def _to_remote(comment) -> RemoteComment:
    login = comment.user.login if comment.user is not None else ""
    return RemoteComment(id=comment.id, author=login, body=comment.body or "")


class GithubClient:
    """PyGithub-backed client implementing every capability protocol.

    GithubException propagates unchanged; callers wrap it with the name of
    the operation that failed.
    """

    def __init__(self, token: str | None = None, gh: Github | None = None):
        self._gh = gh if gh is not None else Github(token)
        self._login: str | None = None

    def _repo(self, org: str, repo: str):
        return self._gh.get_repo(f"{org}/{repo}")

    def bot_login(self) -> str:
        if self._login is None:
            self._login = self._gh.get_user().login
        return self._login

    def bot_user_checker(self) -> Callable[[str], bool]:
        login = self.bot_login()
        # GitHub Apps comment as "<name>[bot]".
        names = {login, login.removesuffix("[bot]"), login.removesuffix("[bot]") + "[bot]"}
        return lambda candidate: candidate in names

    def create_status(self, org: str, repo: str, ref: str, status: Status) -> None:
        self._repo(org, repo).get_commit(ref).create_status(
            state=status.state,
            target_url=status.target_url or NotSet,
            description=status.description,
            context=status.context,
        )

    def list_issue_comments(self, org: str, repo: str, number: int) -> list[RemoteComment]:
        return [_to_remote(c) for c in self._repo(org, repo).get_issue(number).get_comments()]

    def list_commit_comments(self, org: str, repo: str, sha: str) -> list[RemoteComment]:
        return [_to_remote(c) for c in self._repo(org, repo).get_commit(sha).get_comments()]

    def create_comment(self, org: str, repo: str, number: int, body: str) -> None:
        self._repo(org, repo).get_issue(number).create_comment(body)

    def edit_comment(self, org: str, repo: str, comment_id: int, body: str) -> None:
        self._repo(org, repo).get_issue_comment(comment_id).edit(body)

    def delete_comment(self, org: str, repo: str, comment_id: int) -> None:
        self._repo(org, repo).get_issue_comment(comment_id).delete()

    def create_commit_comment(self, org: str, repo: str, sha: str, body: str) -> None:
        self._repo(org, repo).get_commit(sha).create_comment(body)

    def edit_commit_comment(self, org: str, repo: str, comment_id: int, body: str) -> None:
        self._repo(org, repo).get_comment(comment_id).edit(body)

    def delete_commit_comment(self, org: str, repo: str, comment_id: int) -> None:
        self._repo(org, repo).get_comment(comment_id).delete()
