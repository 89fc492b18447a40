"""Free time extraction from a sorted list of busy intervals."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Union

from ..errors import InvalidInput
from ..models import BusyEvent, Exam, TimeSlot
from .timeutils import as_utc

logger = logging.getLogger(__name__)

BusyInterval = Union[BusyEvent, TimeSlot]


def _busy_slots(events: Sequence[BusyInterval]) -> List[TimeSlot]:
    slots: List[TimeSlot] = []
    for event in events:
        if isinstance(event, BusyEvent):
            if event.is_full_day:
                continue
            slot = event.as_slot()
        else:
            slot = event
        if not slot.is_valid:
            raise InvalidInput(f"Busy interval {slot.start.isoformat()} - {slot.end.isoformat()} is empty or reversed.")
        slots.append(TimeSlot(start=as_utc(slot.start), end=as_utc(slot.end)))
    return slots


def extract_free_slots(
    events: Sequence[BusyInterval],
    scan_start: datetime,
    scan_end: datetime,
    exams: Sequence[Exam] = (),
) -> List[TimeSlot]:
    """Return the gaps between busy intervals inside ``[scan_start, scan_end)``.

    ``events`` must be sorted by start. Free time after the last exam is of no
    use, so gaps are clipped at the last exam's instant and scanning stops once
    a gap reaches it.
    """
    # All bounds in UTC so instants in one zone never compare by wall clock.
    scan_start, scan_end = as_utc(scan_start), as_utc(scan_end)
    if scan_start >= scan_end:
        raise InvalidInput(
            f"Scan window start {scan_start.isoformat()} must be before its end {scan_end.isoformat()}."
        )

    horizon = scan_end
    last_exam_at: Optional[datetime] = as_utc(exams[-1].date_time) if exams else None
    if last_exam_at is not None and last_exam_at < horizon:
        horizon = last_exam_at

    busy = _busy_slots(events)
    free: List[TimeSlot] = []

    def _emit(start: datetime, end: datetime) -> bool:
        """Append the gap (clipped at the horizon); False once the horizon is reached."""
        start = max(start, scan_start)
        end = min(end, horizon)
        if start < end:
            free.append(TimeSlot(start=start, end=end))
        return end < horizon

    if not busy:
        _emit(scan_start, scan_end)
        return free

    if not _emit(scan_start, busy[0].start):
        return free

    # Running maximum so that a long event hides the gaps of events nested in it.
    covered_until = busy[0].end
    for following in busy[1:]:
        if covered_until < following.start:
            if not _emit(covered_until, following.start):
                break
        covered_until = max(covered_until, following.end)
    else:
        if last_exam_at is not None:
            _emit(covered_until, horizon)

    logger.debug("Extracted %d free slots from %d busy intervals", len(free), len(busy))
    return free


__all__ = ["extract_free_slots"]
