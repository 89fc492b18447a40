"""Diff a fresh session list against the previously published generation."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

from ..models import BusyEvent, ReconcileResult, StudySession
from .timeutils import as_utc

logger = logging.getLogger(__name__)


def render_title(course_name: Optional[str], prefix: str) -> str:
    return f"{prefix}{course_name or ''}"


def _is_same_event(session: StudySession, event: BusyEvent, prefix: str) -> bool:
    return (
        as_utc(session.start) == as_utc(event.start)  # type: ignore[arg-type]
        and as_utc(session.end) == as_utc(event.end)  # type: ignore[arg-type]
        and render_title(session.course_name, prefix) == event.summary
        and (session.description or "") == (event.description or "")
    )


def reconcile(
    sessions: Sequence[StudySession],
    previous_events: Sequence[BusyEvent],
    title_prefix: str,
) -> ReconcileResult:
    """Return the sessions to create and the old events to delete.

    Both inputs must be sorted by start. An old event identical to an
    overlapping new session is kept and the session is not recreated; any
    other old event overlapping a new session is deleted; an old event that
    only touches a new session at an endpoint counts as overlapping. Old
    events that overlap nothing are left alone.
    """
    old_events = [event for event in previous_events if not event.is_full_day]
    duplicates: Set[int] = set()
    to_delete: List[BusyEvent] = []

    i = j = 0
    while i < len(sessions) and j < len(old_events):
        session = sessions[i]
        old = old_events[j]
        if as_utc(session.end) < as_utc(old.start):  # type: ignore[arg-type]
            i += 1
        elif as_utc(session.start) > as_utc(old.end):  # type: ignore[arg-type]
            j += 1
        elif _is_same_event(session, old, title_prefix):
            duplicates.add(i)
            i += 1
            j += 1
        else:
            to_delete.append(old)
            j += 1

    to_create = [session for index, session in enumerate(sessions) if index not in duplicates]
    logger.debug(
        "Reconciled %d sessions against %d old events: create=%d delete=%d unchanged=%d",
        len(sessions),
        len(old_events),
        len(to_create),
        len(to_delete),
        len(duplicates),
    )
    return ReconcileResult(to_create=to_create, to_delete=to_delete, duplicate_count=len(duplicates))


__all__ = ["reconcile", "render_title"]
