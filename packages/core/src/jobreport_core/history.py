"""Recover report entries from previously posted comments.

The table rows are regenerated from free-form markdown, so the divider and
delimiter rules here must stay byte-compatible with what the renderer emits.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import reduce
from typing import Callable, Iterable

from jobreport_core.models import CommentHistory, Entry, RemoteComment, TrackedComment

_DIVIDER_PREFIX = "---"


@dataclass(frozen=True)
class ParsedHistory:
    entries: tuple[Entry, ...]
    history: CommentHistory


def parse_entries(body: str) -> tuple[Entry, ...]:
    """Extract table rows from a comment body.

    A line starting with ``---`` opens a table, a blank line closes it and
    every other line in between is a row. Lines are stripped first, which
    also takes care of ``\\r\\n`` line endings.
    """
    entries = []
    tracking = False
    for line in body.split("\n"):
        line = line.strip()
        if line.startswith(_DIVIDER_PREFIX):
            tracking = True
        elif not line:
            tracking = False
        elif tracking:
            entries.append(Entry(line))
    return tuple(entries)


def track_comments(comments: Iterable[RemoteComment], is_bot: Callable[[str], bool]) -> list[TrackedComment]:
    tracked = []
    for c in comments:
        t = TrackedComment(id=c.id, author=c.author, body=c.body or "", own=is_bot(c.author))
        if t.managed:
            t = replace(t, entries=parse_entries(t.body))
        tracked.append(t)
    return tracked


def _advance(history: CommentHistory, comment: TrackedComment) -> CommentHistory:
    if history.latest is None:
        return CommentHistory(latest=comment.id, previous=history.previous)
    return CommentHistory(latest=comment.id, previous=history.previous + (history.latest,))


def fold_history(tracked: Iterable[TrackedComment]) -> CommentHistory:
    """Fold managed comments, in order, into the latest id and the stale ones."""
    return reduce(_advance, (t for t in tracked if t.managed), CommentHistory())


def parse_comment_history(comments: Iterable[RemoteComment], is_bot: Callable[[str], bool]) -> ParsedHistory:
    """Scan comments in the order the host returned them (oldest first).

    Comments not written by the bot, or without the report tag, are ignored:
    they are neither parsed nor ever deleted.
    """
    tracked = track_comments(comments, is_bot)
    entries = tuple(e for t in tracked if t.managed for e in t.entries)
    return ParsedHistory(entries=entries, history=fold_history(tracked))
