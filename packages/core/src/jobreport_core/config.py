from pathlib import Path
from typing import Optional

import yaml

from jobreport_core.errors import RenderError
from jobreport_core.models import JobType
from jobreport_core.render import ABOUT_THIS_BOT

DEFAULT_CONFIG: dict = {
    "job_types_to_report": ["presubmit", "postsubmit"],
    "report_template": None,  # inline Jinja2 source appended to every report comment
    "report_template_path": None,  # or a path to a file holding it
    "about_bot": ABOUT_THIS_BOT,
    "github_token_path": None,
}


def load_config(config_path: str = ".jobreport.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .jobreport.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "job_types_to_report": list(DEFAULT_CONFIG["job_types_to_report"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def job_types(config: dict) -> list[JobType]:
    """Return the job types whose results should be reported."""
    return [JobType.parse(t) for t in config.get("job_types_to_report") or []]


def load_template_source(config: dict) -> str | None:
    """
    Return the report template source.

    An inline ``report_template`` wins over ``report_template_path``.
    """
    if config.get("report_template"):
        return config["report_template"]
    template_path = config.get("report_template_path")
    if not template_path:
        return None
    p = Path(template_path)
    if not p.exists():
        raise RenderError(f"Report template not found: {template_path}")
    return p.read_text()
