"""Clip raw free time to the learner's recurring daily study window."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import List, Sequence, Tuple

from ..errors import InvalidInput, InvalidPreference
from ..models import TimeSlot
from .timeutils import as_utc, at_local_time, minutes_between, parse_study_time, to_local

logger = logging.getLogger(__name__)


class DailyWindow:
    """The ``[study_start, study_end)`` wall-clock window repeated every day."""

    def __init__(self, study_start_time: int, study_end_time: int, zone: tzinfo) -> None:
        self.start_hour, self.start_minute = parse_study_time(study_start_time)
        self.end_hour, self.end_minute = parse_study_time(study_end_time)
        if (self.start_hour, self.start_minute) >= (self.end_hour, self.end_minute):
            raise InvalidPreference(
                f"Study window {study_start_time:04d}-{study_end_time:04d} must start before it ends."
            )
        self.zone = zone

    def on(self, day: date) -> Tuple[datetime, datetime]:
        """Window instants on the given local calendar day."""
        return (
            at_local_time(day, self.start_hour, self.start_minute, self.zone),
            at_local_time(day, self.end_hour, self.end_minute, self.zone),
        )

    def on_utc(self, day: date) -> Tuple[datetime, datetime]:
        start, end = self.on(day)
        return as_utc(start), as_utc(end)


def adjust_to_study_window(
    free_slots: Sequence[TimeSlot],
    window: DailyWindow,
    min_session_minutes: int,
) -> List[TimeSlot]:
    """Split every free slot into per-day pieces that lie inside the study window.

    A multi-day gap (a free weekend, say) becomes one slot per day instead of a
    single slot spanning the hours outside the window. Pieces shorter than
    ``min_session_minutes`` are dropped.
    """
    adjusted: List[TimeSlot] = []
    zone = window.zone

    def _keep(start: datetime, end: datetime) -> None:
        if start < end and minutes_between(start, end) >= min_session_minutes:
            adjusted.append(TimeSlot(start=start.astimezone(zone), end=end.astimezone(zone)))

    for slot in free_slots:
        if not slot.is_valid:
            raise InvalidInput(f"Free slot {slot.start.isoformat()} - {slot.end.isoformat()} is empty or reversed.")
        # Bounds are compared in UTC; the calendar day comes from the learner zone.
        slot_start = as_utc(slot.start)
        slot_end = as_utc(slot.end)

        # First day: intersect the window of the slot's own day with the slot.
        day = to_local(slot.start, zone).date()
        window_start, window_end = window.on_utc(day)
        _keep(max(window_start, slot_start), min(window_end, slot_end))

        # Whole days strictly inside the slot.
        day += timedelta(days=1)
        window_start, window_end = window.on_utc(day)
        while window_end < slot_end:
            _keep(window_start, window_end)
            day += timedelta(days=1)
            window_start, window_end = window.on_utc(day)

        # Last day: the window opens before the slot ends but does not close in it.
        if window_start < slot_end:
            _keep(window_start, slot_end)

    logger.debug("Adjusted %d free slots into %d study-window slots", len(free_slots), len(adjusted))
    return adjusted


__all__ = ["DailyWindow", "adjust_to_study_window"]
