"""Tests for loading job batches from files."""

import json

import pytest

from jobreport_core.batch import load_batch, parse_batch
from jobreport_core.errors import PreconditionError, UnknownStateError
from jobreport_core.models import JobState, JobType, Pull
from jobreport_core.reconcile import create_entry
from jobreport_core.status import should_report

BATCH_YAML = """\
unit:
  org: acme
  repo: widgets
  base_sha: basesha
  pulls:
    - {number: 12, sha: headsha, author: octocat}
jobs:
  - context: pull-widgets-unit
    state: failure
    url: https://ci.example.com/1
    rerun_command: /test pull-widgets-unit
    optional: false
  - context: pull-widgets-lint
    state: pending
"""


def test_load_yaml_batch(tmp_path):
    path = tmp_path / "batch.yml"
    path.write_text(BATCH_YAML)

    jobs = load_batch(str(path))

    assert [j.context for j in jobs] == ["pull-widgets-unit", "pull-widgets-lint"]
    unit = jobs[0].unit
    assert unit.pulls == (Pull(number=12, sha="headsha", author="octocat"),)
    assert jobs[1].unit is unit
    assert jobs[0].state == JobState.FAILURE
    assert jobs[0].type == JobType.PRESUBMIT
    assert jobs[0].optional is False
    assert jobs[0].complete
    assert not jobs[1].complete
    assert jobs[1].optional is None


def test_load_json_batch(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(
        json.dumps(
            {
                "unit": {"org": "acme", "repo": "widgets", "base_sha": "basesha", "author": "merger"},
                "jobs": [{"context": "post-deploy", "state": "success", "type": "postsubmit"}],
            }
        )
    )
    [job] = load_batch(str(path))
    assert job.is_postsubmit
    assert job.unit.author == "merger"


def test_empty_jobs_rejected():
    with pytest.raises(PreconditionError):
        parse_batch({"unit": {"org": "acme", "repo": "widgets"}, "jobs": []})


def test_missing_unit_rejected():
    with pytest.raises(PreconditionError):
        parse_batch({"jobs": [{"context": "a", "state": "success"}]})


def test_incomplete_unit_rejected():
    with pytest.raises(PreconditionError):
        parse_batch({"unit": {"org": "acme"}, "jobs": [{"context": "a", "state": "success"}]})


def test_unknown_state_rejected():
    with pytest.raises(UnknownStateError):
        parse_batch({"unit": {"org": "acme", "repo": "widgets"}, "jobs": [{"context": "a", "state": "exploded"}]})


def test_unknown_type_rejected():
    with pytest.raises(PreconditionError):
        parse_batch(
            {"unit": {"org": "acme", "repo": "widgets"}, "jobs": [{"context": "a", "state": "success", "type": "x"}]}
        )


def _parse_job(**fields):
    unit = {"org": "acme", "repo": "widgets", "pulls": [{"number": 1, "sha": "s"}]}
    [job] = parse_batch({"unit": unit, "jobs": [{"context": "c", "state": "failure", **fields}]})
    return job


@pytest.mark.parametrize(
    "value,expected", [(False, False), (True, True), ("false", False), ("True", True), ("FALSE", False)]
)
def test_optional_flag_parsed(value, expected):
    assert _parse_job(optional=value).optional is expected


def test_string_false_optional_marks_job_required():
    job = _parse_job(optional="false")
    assert create_entry(job).text.split(" | ")[3] == "true"


@pytest.mark.parametrize("value", ["maybe", "", 1])
def test_unparseable_optional_is_unknown(value):
    job = _parse_job(optional=value)
    assert job.optional is None
    assert create_entry(job).text.split(" | ")[3] == "unknown"


@pytest.mark.parametrize("name", ["report", "complete", "comment_on_postsubmits"])
def test_string_flags_parsed(name):
    assert getattr(_parse_job(**{name: "false"}), name) is False
    assert getattr(_parse_job(**{name: "TRUE"}), name) is True


def test_string_false_report_is_not_reported():
    assert not should_report(_parse_job(report="false"), [JobType.PRESUBMIT])


@pytest.mark.parametrize("name", ["report", "complete", "comment_on_postsubmits"])
def test_invalid_flag_rejected(name):
    with pytest.raises(PreconditionError, match=name):
        _parse_job(**{name: "nope"})
