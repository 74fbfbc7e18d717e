"""Exceptions raised by the reporting layer.

Nothing here is logged-and-swallowed: every error reaches the caller, which
owns the retry policy.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base class for every reporting failure."""


class UnknownStateError(ReportError):
    """A job outcome has no mapping onto the host status vocabulary."""

    def __init__(self, state):
        super().__init__(f"Unknown job state: {state}")
        self.state = state


class RemoteCallError(ReportError):
    """A call against the review host failed; ``operation`` names the call."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"error {operation}: {cause}")
        self.operation = operation


class RenderError(ReportError):
    """The report template could not be compiled or executed."""


class PreconditionError(ReportError):
    """The call was rejected before any remote request was made."""
