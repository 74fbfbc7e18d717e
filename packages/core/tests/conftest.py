"""Shared fixtures: an in-memory GitHub and a job factory."""

from __future__ import annotations

import itertools

import pytest

from jobreport_core.models import JobResult, JobState, JobType, Pull, RemoteComment, ReviewUnit

BOT = "ci-bot"


class FakeGitHub:
    """In-memory stand-in for GithubClient that records every call."""

    def __init__(self, bot: str = BOT):
        self.bot = bot
        self.statuses: list[tuple] = []
        self.issue_comments: dict[str, list[RemoteComment]] = {}
        self.commit_comments: dict[str, list[RemoteComment]] = {}
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self._ids = itertools.count(1000)

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise RuntimeError(f"{name} exploded")

    def add_issue_comment(self, org, repo, number, body, author=BOT, comment_id=None):
        comment = RemoteComment(id=comment_id or next(self._ids), author=author, body=body)
        self.issue_comments.setdefault(f"{org}/{repo}/{number}", []).append(comment)
        return comment.id

    def add_commit_comment(self, org, repo, sha, body, author=BOT, comment_id=None):
        comment = RemoteComment(id=comment_id or next(self._ids), author=author, body=body)
        self.commit_comments.setdefault(f"{org}/{repo}/{sha}", []).append(comment)
        return comment.id

    def _remove(self, store, comment_id):
        for key, comments in store.items():
            store[key] = [c for c in comments if c.id != comment_id]

    def _edit(self, store, comment_id, body):
        for key, comments in store.items():
            store[key] = [RemoteComment(c.id, c.author, body) if c.id == comment_id else c for c in comments]

    # -- capability surface ------------------------------------------------

    def bot_user_checker(self):
        self._record("bot_user_checker")
        return lambda candidate: candidate == self.bot

    def create_status(self, org, repo, ref, status):
        self._record("create_status", org, repo, ref)
        self.statuses.append((f"{org}/{repo}@{ref}", status))

    def list_issue_comments(self, org, repo, number):
        self._record("list_issue_comments", org, repo, number)
        return list(self.issue_comments.get(f"{org}/{repo}/{number}", []))

    def list_commit_comments(self, org, repo, sha):
        self._record("list_commit_comments", org, repo, sha)
        return list(self.commit_comments.get(f"{org}/{repo}/{sha}", []))

    def create_comment(self, org, repo, number, body):
        self._record("create_comment", org, repo, number)
        self.add_issue_comment(org, repo, number, body, author=self.bot)

    def edit_comment(self, org, repo, comment_id, body):
        self._record("edit_comment", org, repo, comment_id)
        self._edit(self.issue_comments, comment_id, body)

    def delete_comment(self, org, repo, comment_id):
        self._record("delete_comment", org, repo, comment_id)
        self._remove(self.issue_comments, comment_id)

    def create_commit_comment(self, org, repo, sha, body):
        self._record("create_commit_comment", org, repo, sha)
        self.add_commit_comment(org, repo, sha, body, author=self.bot)

    def edit_commit_comment(self, org, repo, comment_id, body):
        self._record("edit_commit_comment", org, repo, comment_id)
        self._edit(self.commit_comments, comment_id, body)

    def delete_commit_comment(self, org, repo, comment_id):
        self._record("delete_commit_comment", org, repo, comment_id)
        self._remove(self.commit_comments, comment_id)

    def mutations(self):
        return [c for c in self.calls if not c[0].startswith(("list_", "bot_"))]


PRESUBMIT_UNIT = ReviewUnit(
    org="acme",
    repo="widgets",
    base_ref="main",
    base_sha="basesha",
    pulls=(Pull(number=1, sha="headsha", author="octocat"),),
)

POSTSUBMIT_UNIT = ReviewUnit(
    org="acme",
    repo="widgets",
    base_ref="main",
    base_sha="basesha",
    author="merger",
    pulls=(Pull(number=1, sha="headsha", author="octocat"),),
)


@pytest.fixture
def fake_gh():
    return FakeGitHub()


@pytest.fixture
def make_job():
    def _make(
        context="bla test",
        state=JobState.FAILURE,
        type=JobType.PRESUBMIT,
        unit=None,
        **kwargs,
    ):
        if unit is None:
            unit = POSTSUBMIT_UNIT if type == JobType.POSTSUBMIT else PRESUBMIT_UNIT
        kwargs.setdefault("complete", True)
        kwargs.setdefault("url", "http://ci.example.com/1")
        kwargs.setdefault("rerun_command", f"/test {context}")
        return JobResult(context=context, state=state, unit=unit, type=type, **kwargs)

    return _make
