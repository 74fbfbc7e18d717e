"""Keep a single failure report comment per pull request (or commit) in sync.

Each run re-derives all state from the comments on the review host: list,
parse, reconcile, delete stale comments, then create or edit the report.
Runs against the same pull must not overlap; the caller serializes them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Sequence

from jobreport_core.errors import PreconditionError, RemoteCallError
from jobreport_core.history import parse_comment_history
from jobreport_core.models import JobResult, JobType, SyncOutcome
from jobreport_core.reconcile import ACTION_CREATE, ACTION_UPDATE, reconcile
from jobreport_core.render import ABOUT_THIS_BOT, render_comment
from jobreport_core.status import report_status_context, should_report

if TYPE_CHECKING:
    import jinja2

    from jobreport_core.gh.client import CommentClient, ReporterClient

logger = logging.getLogger(__name__)

PR_COMMIT_NOTE = "postsubmit job(s) were triggered at commit: "


def _call(operation: str, fn, *args):
    try:
        return fn(*args)
    except Exception as e:
        raise RemoteCallError(operation, e) from e


def create_or_update_comments(
    client: CommentClient,
    jobs: Sequence[JobResult],
    template: jinja2.Template | None = None,
    must_create: bool = False,
    about: str = ABOUT_THIS_BOT,
) -> SyncOutcome | None:
    """Reconcile the report comment for one batch of jobs sharing a review unit.

    The first job's unit is used for the whole batch. Returns None when a
    pre-merge batch has no pull to comment on.
    """
    unit = jobs[0].unit
    is_postsubmit = jobs[0].is_postsubmit

    if is_postsubmit:
        target = unit.base_sha
        comments = _call("listing comments", client.list_commit_comments, unit.org, unit.repo, unit.base_sha)
    else:
        if not unit.pulls:
            logger.debug("No pull to comment on for %s/%s", unit.org, unit.repo)
            return None
        target = f"#{unit.pulls[0].number}"
        comments = _call("listing comments", client.list_issue_comments, unit.org, unit.repo, unit.pulls[0].number)

    is_bot = _call("getting bot name checker", client.bot_user_checker)

    parsed = parse_comment_history(comments, is_bot)
    plan = reconcile(parsed.entries, jobs, parsed.history)
    action = plan.action(force=must_create)

    # Render before touching anything so a template failure leaves the pull untouched.
    body = render_comment(jobs, plan.entries, template, about) if action else None

    outcome = SyncOutcome(org=unit.org, repo=unit.repo, target=target, entries=list(plan.entries))
    delete = client.delete_commit_comment if is_postsubmit else client.delete_comment
    for comment_id in plan.deletes:
        _call("deleting comment", delete, unit.org, unit.repo, comment_id)
        logger.info("Deleted report comment %d on %s/%s %s", comment_id, unit.org, unit.repo, target)
        outcome.deleted.append(comment_id)

    if action == ACTION_CREATE:
        if is_postsubmit:
            _call("creating comment", client.create_commit_comment, unit.org, unit.repo, unit.base_sha, body)
        else:
            _call("creating comment", client.create_comment, unit.org, unit.repo, unit.pulls[0].number, body)
        logger.info("Created report comment on %s/%s %s (%d entries)", unit.org, unit.repo, target, len(plan.entries))
        outcome.created = True
    elif action == ACTION_UPDATE:
        edit = client.edit_commit_comment if is_postsubmit else client.edit_comment
        _call("updating comment", edit, unit.org, unit.repo, plan.update_id, body)
        logger.info("Updated report comment %d on %s/%s %s", plan.update_id, unit.org, unit.repo, target)
        outcome.updated = plan.update_id

    return outcome


def issue_has_comment(client: CommentClient, org: str, repo: str, number: int, text: str) -> bool:
    """Return True if the bot already left a comment containing ``text`` on the issue."""
    is_bot = _call("getting bot name checker", client.bot_user_checker)
    comments = _call("listing comments", client.list_issue_comments, org, repo, number)
    return any(is_bot(c.author) and text in c.body for c in comments)


def _split_eligible(jobs: Iterable[JobResult], job_types: Sequence[JobType]):
    presubmits, postsubmits = [], []
    for job in jobs:
        # Aborted jobs and jobs that errored out are reported alongside failures.
        if not (should_report(job, job_types) and job.complete):
            continue
        if job.is_postsubmit:
            if job.comment_on_postsubmits:
                postsubmits.append(job)
        else:
            presubmits.append(job)
    return presubmits, postsubmits


def report_comment(
    client: CommentClient | None,
    jobs: Sequence[JobResult],
    job_types: Sequence[JobType],
    template: jinja2.Template | None = None,
    must_create: bool = False,
    about: str = ABOUT_THIS_BOT,
) -> list[SyncOutcome]:
    """Synchronize report comments for a batch of jobs on one review unit.

    Pre-merge and post-merge jobs are reconciled separately. For post-merge
    jobs a one-time note pointing at the commit is left on the originating
    pull, if there is one.
    """
    if client is None:
        raise PreconditionError("trying to report jobs, but found empty GitHub client")
    if not jobs:
        raise PreconditionError("no jobs to report")

    presubmits, postsubmits = _split_eligible(jobs, job_types)

    outcomes = []
    for group in (presubmits, postsubmits):
        if not group:
            continue
        outcome = create_or_update_comments(client, group, template, must_create, about)
        if outcome is not None:
            outcomes.append(outcome)

    if not postsubmits:
        return outcomes
    unit = postsubmits[0].unit
    if not unit.pulls:
        return outcomes
    number = unit.pulls[0].number
    if issue_has_comment(client, unit.org, unit.repo, number, PR_COMMIT_NOTE):
        return outcomes
    _call("creating comment", client.create_comment, unit.org, unit.repo, number, f"{PR_COMMIT_NOTE} {unit.base_sha}\n")
    logger.info("Left post-merge note for %s on %s/%s#%d", unit.base_sha, unit.org, unit.repo, number)
    return outcomes


def report(
    client: ReporterClient | None,
    job: JobResult,
    job_types: Sequence[JobType],
    template: jinja2.Template | None = None,
    about: str = ABOUT_THIS_BOT,
) -> list[SyncOutcome]:
    """Report a single job: set its commit status, then sync the report comment."""
    report_status_context(client, job, job_types)
    return report_comment(client, [job], job_types, template, about=about)
