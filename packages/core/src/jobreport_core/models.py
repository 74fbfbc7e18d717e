"""Job result and comment data models.

Job results are built fresh for every reporting call and never persisted.
Comments and entries are re-derived from the review host on each run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from jobreport_core.errors import PreconditionError, UnknownStateError

# Every comment managed by the reporter carries this tag.
COMMENT_TAG = "<!-- test report -->"

ENTRY_DELIMITER = " | "


def _parse_bool(value) -> bool | None:
    """Parse a YAML bool or a "true"/"false" string; None when it is neither."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def _flag(data: dict, name: str, default: bool) -> bool:
    if name not in data:
        return default
    value = _parse_bool(data[name])
    if value is None:
        raise PreconditionError(f"Job field {name!r} must be true or false, got {data[name]!r}")
    return value


class JobState(str, Enum):
    TRIGGERED = "triggered"
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"
    ABORTED = "aborted"

    @classmethod
    def parse(cls, value) -> JobState:
        try:
            return cls(value)
        except ValueError:
            raise UnknownStateError(value) from None


class JobType(str, Enum):
    PRESUBMIT = "presubmit"
    POSTSUBMIT = "postsubmit"
    PERIODIC = "periodic"
    BATCH = "batch"

    @classmethod
    def parse(cls, value) -> JobType:
        try:
            return cls(value)
        except ValueError:
            raise PreconditionError(f"Unknown job type: {value!r}") from None


@dataclass(frozen=True)
class Pull:
    number: int
    sha: str = ""
    author: str = ""


@dataclass(frozen=True)
class ReviewUnit:
    """The (org, repo, pull-or-base-commit) scope shared by one batch of jobs."""

    org: str
    repo: str
    base_ref: str = ""
    base_sha: str = ""
    author: str = ""  # author of the base commit, used for post-merge reports
    pulls: tuple[Pull, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> ReviewUnit:
        return cls(
            org=data["org"],
            repo=data["repo"],
            base_ref=data.get("base_ref", ""),
            base_sha=data.get("base_sha", ""),
            author=data.get("author", ""),
            pulls=tuple(
                Pull(number=int(p["number"]), sha=p.get("sha", ""), author=p.get("author", ""))
                for p in data.get("pulls") or []
            ),
        )


@dataclass
class JobResult:
    """The outcome of one CI job against a review unit."""

    context: str
    state: JobState
    unit: ReviewUnit
    type: JobType = JobType.PRESUBMIT
    job: str = ""
    complete: bool = False
    report: bool = True
    url: str = ""
    description: str = ""
    rerun_command: str = ""
    optional: bool | None = None  # None when the job does not declare it
    comment_on_postsubmits: bool = False

    @property
    def is_postsubmit(self) -> bool:
        return self.type == JobType.POSTSUBMIT

    @classmethod
    def from_dict(cls, data: dict, unit: ReviewUnit) -> JobResult:
        if "context" not in data:
            raise PreconditionError(f"Job entry is missing a context: {data!r}")
        return cls(
            context=data["context"],
            state=JobState.parse(data.get("state")),
            unit=unit,
            type=JobType.parse(data.get("type", JobType.PRESUBMIT.value)),
            job=data.get("job", ""),
            # A job in a terminal state is complete unless told otherwise.
            complete=_flag(data, "complete", data.get("state") not in ("triggered", "pending")),
            report=_flag(data, "report", True),
            url=data.get("url", ""),
            description=data.get("description", ""),
            rerun_command=data.get("rerun_command", ""),
            # An unparseable optional flag leaves the required column "unknown".
            optional=_parse_bool(data.get("optional")),
            comment_on_postsubmits=_flag(data, "comment_on_postsubmits", False),
        )


@dataclass(frozen=True)
class Status:
    """Payload of a commit status call."""

    state: str  # "pending" | "success" | "error" | "failure"
    description: str
    context: str
    target_url: str = ""


@dataclass(frozen=True)
class RemoteComment:
    """A comment as returned by the review host, reduced to what reporting needs."""

    id: int
    author: str
    body: str


@dataclass(frozen=True)
class Entry:
    """One row of the failure table, keyed by its leading field (the job context)."""

    text: str

    @property
    def key(self) -> str:
        return self.text.split(ENTRY_DELIMITER, 1)[0]

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class TrackedComment:
    id: int
    author: str
    body: str
    own: bool
    entries: tuple[Entry, ...] = ()

    @property
    def managed(self) -> bool:
        """True when the bot wrote this comment and it carries the report tag."""
        return self.own and COMMENT_TAG in self.body


@dataclass(frozen=True)
class CommentHistory:
    """Result of scanning the managed comments in order.

    ``latest`` is the most recent managed comment; ``previous`` holds every
    older one, which is always stale.
    """

    latest: int | None = None
    previous: tuple[int, ...] = ()


@dataclass
class SyncOutcome:
    """What one comment synchronization did on the review host."""

    org: str
    repo: str
    target: str  # "#<number>" for pulls, the SHA for commits
    deleted: list[int] = field(default_factory=list)
    created: bool = False
    updated: int | None = None
    entries: list[Entry] = field(default_factory=list)
