"""Load a batch of job results from a YAML or JSON file.

Expected shape::

    unit:
      org: acme
      repo: widgets
      base_sha: 0a1b2c...
      pulls:
        - {number: 12, sha: 3d4e5f..., author: octocat}
    jobs:
      - context: pull-widgets-unit
        state: failure
        url: https://ci.example.com/runs/1
        rerun_command: /test pull-widgets-unit
        optional: false
"""

from __future__ import annotations

from pathlib import Path

import yaml

from jobreport_core.errors import PreconditionError
from jobreport_core.models import JobResult, ReviewUnit


def parse_batch(data: dict) -> list[JobResult]:
    if not isinstance(data, dict) or "unit" not in data:
        raise PreconditionError("job batch must contain a 'unit' mapping")
    jobs = data.get("jobs") or []
    if not jobs:
        raise PreconditionError("job batch contains no jobs")
    try:
        unit = ReviewUnit.from_dict(data["unit"])
    except (KeyError, TypeError, ValueError) as e:
        raise PreconditionError(f"invalid review unit: {e}") from e
    # Every job in a batch shares the same review unit.
    return [JobResult.from_dict(job, unit) for job in jobs]


def load_batch(path: str) -> list[JobResult]:
    with open(Path(path)) as f:
        return parse_batch(yaml.safe_load(f))
