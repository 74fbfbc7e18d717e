"""Merge the parsed comment history with the current batch of job results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from jobreport_core.models import ENTRY_DELIMITER, CommentHistory, Entry, JobResult, JobState, JobType

ACTION_CREATE = "create"
ACTION_UPDATE = "update"


@dataclass(frozen=True)
class Reconciliation:
    """The remote mutations needed to bring the comment history up to date.

    ``deletes`` are always issued first. ``update_id`` is the comment to edit
    in place, or None when a new comment must be created (or nothing posted).
    """

    deletes: tuple[int, ...]
    entries: tuple[Entry, ...]
    update_id: int | None
    must_create_new: bool

    def action(self, force: bool = False) -> str | None:
        if not self.entries and not force:
            return None
        if self.update_id is None:
            return ACTION_CREATE
        return ACTION_UPDATE


def create_entry(job: JobResult) -> Entry:
    """Render the table row for a failed job."""
    url = f"[link]({job.url})"
    if job.type == JobType.POSTSUBMIT:
        return Entry(ENTRY_DELIMITER.join([job.context, job.unit.base_sha, url]))

    required = "unknown"
    if job.type == JobType.PRESUBMIT and job.optional is not None:
        required = str(not job.optional).lower()
    head_sha = job.unit.pulls[0].sha if job.unit.pulls else ""
    return Entry(ENTRY_DELIMITER.join([job.context, head_sha, url, required, f"`{job.rerun_command}`"]))


def _latest_per_key(entries: Sequence[Entry]) -> list[Entry]:
    """Keep only the last occurrence of every key, preserving scan order."""
    last_index = {e.key: i for i, e in enumerate(entries)}
    return [e for i, e in enumerate(entries) if last_index[e.key] == i]


def reconcile(
    entries: Sequence[Entry],
    jobs: Sequence[JobResult],
    history: CommentHistory,
) -> Reconciliation:
    """Decide which entries survive and which comments to delete or update.

    A fresh result always supersedes a historical row for the same context,
    even when the job now passes and contributes no row of its own. Any new
    failure forces a new comment so that the author is notified again.
    """
    current = {job.context for job in jobs}
    kept = [e for e in _latest_per_key(entries) if e.key not in current]

    must_create_new = False
    for job in jobs:
        if job.state == JobState.FAILURE:
            kept.append(create_entry(job))
            must_create_new = True

    deletes = list(history.previous)
    update_id = history.latest
    if update_id is not None and (must_create_new or not kept):
        deletes.append(update_id)
        update_id = None

    return Reconciliation(
        deletes=tuple(deletes),
        entries=tuple(kept),
        update_id=update_id,
        must_create_new=must_create_new,
    )
