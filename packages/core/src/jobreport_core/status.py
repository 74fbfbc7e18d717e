"""Commit status reporting."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from jobreport_core.errors import PreconditionError, RemoteCallError
from jobreport_core.models import JobResult, JobState, JobType, Status

if TYPE_CHECKING:
    from jobreport_core.gh.client import StatusWriter

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_FAILURE = "failure"

# GitHub rejects status descriptions longer than this.
CONTEXT_DESCRIPTION_MAX_LEN = 140
_BASE_SHA_DELIMITER = " BaseSHA:"
_ELIDE = " ... "
_MIN_HUMAN_READABLE_LEN = 20

_STATE_TO_STATUS = {
    JobState.TRIGGERED: STATUS_PENDING,
    JobState.PENDING: STATUS_PENDING,
    JobState.SUCCESS: STATUS_SUCCESS,
    JobState.ERROR: STATUS_ERROR,
    JobState.FAILURE: STATUS_FAILURE,
    JobState.ABORTED: STATUS_FAILURE,
}


def map_status(state) -> str:
    """Map a job outcome onto one of the four GitHub status states."""
    return _STATE_TO_STATUS[JobState.parse(state)]


def should_report(job: JobResult, job_types: Iterable[JobType]) -> bool:
    return job.type in set(job_types) and job.report


def _truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    half = (max_len - len(_ELIDE)) // 2
    return text[:half] + _ELIDE + text[len(text) - half :]


def context_description_with_base_sha(description: str, base_sha: str) -> str:
    """Fit a status description and the base SHA into GitHub's length limit.

    The SHA suffix is dropped when it would leave fewer than 20 characters
    for the description itself.
    """
    suffix = ""
    if base_sha:
        suffix = _BASE_SHA_DELIMITER + base_sha
        if CONTEXT_DESCRIPTION_MAX_LEN - len(suffix) < _MIN_HUMAN_READABLE_LEN:
            suffix = ""
    return _truncate(description, CONTEXT_DESCRIPTION_MAX_LEN - len(suffix)) + suffix


def status_sha(job: JobResult) -> str:
    """Return the commit a job's status belongs on.

    Pre-merge jobs report on the pull's head commit; everything else on the
    base commit.
    """
    unit = job.unit
    if unit.pulls and job.type != JobType.POSTSUBMIT:
        return unit.pulls[0].sha
    return unit.base_sha


def report_status(client: StatusWriter, job: JobResult) -> Status | None:
    """Set the commit status for ``job``. Returns the status sent, if any."""
    if not job.report:
        return None
    status = Status(
        state=map_status(job.state),
        description=context_description_with_base_sha(job.description, job.unit.base_sha),
        context=job.context,
        target_url=job.url,
    )
    sha = status_sha(job)
    try:
        client.create_status(job.unit.org, job.unit.repo, sha, status)
    except Exception as e:
        raise RemoteCallError("setting status", e) from e
    logger.info("Set %s status %r on %s/%s@%s", status.state, job.context, job.unit.org, job.unit.repo, sha)
    return status


def report_status_context(client: StatusWriter | None, job: JobResult, job_types: Iterable[JobType]) -> Status | None:
    """Report ``job``'s status if it is eligible; skip batch jobs spanning several pulls."""
    if client is None:
        raise PreconditionError(f"trying to report job {job.context!r}, but found empty GitHub client")

    if not should_report(job, job_types):
        logger.debug("Not reporting status for %r (type=%s, report=%s)", job.context, job.type.value, job.report)
        return None

    # Batch jobs covering more than one pull are not reported.
    if len(job.unit.pulls) > 1:
        logger.debug("Not reporting status for %r: batch of %d pulls", job.context, len(job.unit.pulls))
        return None

    return report_status(client, job)
