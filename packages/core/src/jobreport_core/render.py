"""Render the failure report comment body."""

from __future__ import annotations

from typing import Sequence

import jinja2

from jobreport_core.errors import RenderError
from jobreport_core.models import COMMENT_TAG, Entry, JobResult

ABOUT_THIS_BOT = (
    "This comment is maintained by the CI reporter and is rewritten as job results come in. "
    "A job stays listed until a later run of it passes."
)

_PRESUBMIT_HEADER = (
    "@{author}: The following test{plural} **failed**, say `/retest` to rerun all failed tests "
    "or `/retest-required` to rerun all mandatory failed tests:"
)
_POSTSUBMIT_HEADER = "@{author}: The following test{plural} **failed**:"
_PASSED_HEADER = "@{author}: all tests **passed!**"

_PRESUBMIT_COLUMNS = ["Test name | Commit | Details | Required | Rerun command", "--- | --- | --- | --- | ---"]
_POSTSUBMIT_COLUMNS = ["Test name | Commit | Details", "--- | --- | ---"]

_env = jinja2.Environment(undefined=jinja2.StrictUndefined, keep_trailing_newline=True)


def compile_template(source: str | None) -> jinja2.Template | None:
    """Compile a report template; ``None`` or an empty string means no template."""
    if not source:
        return None
    try:
        return _env.from_string(source)
    except jinja2.TemplateError as e:
        raise RenderError(f"invalid report template: {e}") from e


def report_author(job: JobResult) -> str:
    if job.is_postsubmit or not job.unit.pulls:
        return job.unit.author
    return job.unit.pulls[0].author


def render_comment(
    jobs: Sequence[JobResult],
    entries: Sequence[Entry],
    template: jinja2.Template | None = None,
    about: str = ABOUT_THIS_BOT,
) -> str:
    """Build the full comment body for the reconciled entries.

    The template is rendered against the first job of the batch; a failure
    there raises RenderError and nothing should be posted.
    """
    if not jobs:
        return ""
    first = jobs[0]

    extra = None
    if template is not None:
        try:
            extra = template.render(job=first)
        except Exception as e:
            raise RenderError(f"executing report template: {e}") from e

    author = report_author(first)
    if entries:
        plural = "s" if len(entries) > 1 else ""
        if first.is_postsubmit:
            lines = [_POSTSUBMIT_HEADER.format(author=author, plural=plural), "", *_POSTSUBMIT_COLUMNS]
        else:
            lines = [_PRESUBMIT_HEADER.format(author=author, plural=plural), "", *_PRESUBMIT_COLUMNS]
    else:
        lines = [_PASSED_HEADER.format(author=author), ""]

    lines.extend(str(e) for e in entries)
    if extra is not None:
        lines.extend(["", extra])
    lines.extend(["", "<details>", "", about, "</details>", COMMENT_TAG])
    return "\n".join(lines)
