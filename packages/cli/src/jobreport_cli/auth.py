"""GitHub token resolution.

Resolution order (stops at first success):
  1. GITHUB_TOKEN environment variable (CI / explicit override)
  2. The file named by ``github_token_path`` in .jobreport.yml (mounted secrets)
  3. `gh auth token` (GitHub CLI session, for local runs)
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def _read_token_file(token_path: str) -> str | None:
    try:
        token = Path(token_path).read_text().strip()
    except OSError as e:
        logger.warning("Could not read GitHub token from %s: %s", token_path, e)
        return None
    return token or None


def _gh_cli_token() -> str | None:
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github_token(token_path: str | None = None) -> str | None:
    """Return a GitHub token or None if no source provides one.

    Never raises; the CLI turns a missing token into a UsageError.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    if token_path:
        token = _read_token_file(token_path)
        if token:
            logger.debug("Resolved GitHub token from %s.", token_path)
            return token

    token = _gh_cli_token()
    if token:
        logger.debug("Resolved GitHub token via gh CLI session.")
    return token
