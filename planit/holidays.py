"""Full-day event handling ahead of a planning run.

Full-day events (holidays, trips, conferences) never reach the free-slot
extractor directly. Events on a known holiday are settled by the learner's
``study_on_holidays`` preference; every other full-day event needs an explicit
decision ("study during this event: yes/no"). Events the learner will not
study through are turned into busy intervals covering their local days.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, tzinfo
from typing import List, Sequence, Tuple

from .errors import DecisionCountMismatch
from .models import BusyEvent, HolidayCalendar

logger = logging.getLogger(__name__)


def split_full_day_events(events: Sequence[BusyEvent]) -> Tuple[List[BusyEvent], List[BusyEvent]]:
    """Separate timed events from full-day events, each sorted by start."""
    timed = sorted((event for event in events if not event.is_full_day), key=lambda event: event.start)  # type: ignore[arg-type,return-value]
    full_day = sorted((event for event in events if event.is_full_day), key=lambda event: event.start_date)  # type: ignore[arg-type,return-value]
    return timed, full_day


def resolve_full_day_events(
    full_day_events: Sequence[BusyEvent],
    study_on_holidays: bool,
    holidays: HolidayCalendar,
) -> Tuple[List[BusyEvent], List[BusyEvent]]:
    """Settle holiday events automatically.

    Returns ``(unresolved, blocked)``: events the learner still has to decide
    on, and holiday events that become busy time because the learner does not
    study on holidays.
    """
    if holidays.is_stale():
        logger.warning(
            "Holiday dates were fetched at %s; refresh them at least once a year",
            holidays.fetched_at.isoformat(),
        )
    unresolved: List[BusyEvent] = []
    blocked: List[BusyEvent] = []
    for event in full_day_events:
        if event.start_date is None or not holidays.contains(event.start_date):
            unresolved.append(event)
        elif not study_on_holidays:
            blocked.append(event)
    logger.debug(
        "Full-day events: %d total, %d unresolved, %d blocked as holidays",
        len(full_day_events),
        len(unresolved),
        len(blocked),
    )
    return unresolved, blocked


def apply_decisions(unresolved: Sequence[BusyEvent], decisions: Sequence[bool]) -> List[BusyEvent]:
    """Return the unresolved events the learner chose not to study through."""
    if len(decisions) < len(unresolved):
        raise DecisionCountMismatch(
            f"Received {len(decisions)} study decisions for {len(unresolved)} unresolved full-day events."
        )
    return [event for event, study in zip(unresolved, decisions) if not study]


def full_day_busy_slots(events: Sequence[BusyEvent], zone: tzinfo) -> List[BusyEvent]:
    """Timed busy events spanning local midnight to local midnight for each full-day event."""
    busy: List[BusyEvent] = []
    for event in events:
        if event.start_date is None or event.end_date is None:
            continue
        last_day = max(event.end_date, event.start_date + timedelta(days=1))
        busy.append(
            BusyEvent(
                start=datetime.combine(event.start_date, time.min, tzinfo=zone),
                end=datetime.combine(last_day, time.min, tzinfo=zone),
                summary=event.summary,
                description=event.description,
                source_id=event.source_id,
                calendar_id=event.calendar_id,
            )
        )
    return busy


__all__ = [
    "apply_decisions",
    "full_day_busy_slots",
    "resolve_full_day_events",
    "split_full_day_events",
]
