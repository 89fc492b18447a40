"""Cut study-window slots into fixed-length sessions separated by breaks."""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import List, Sequence

from ..errors import InvalidInput, InvalidPreference
from ..models import StudySession, TimeSlot
from .timeutils import as_utc, minutes_between, round_to_quarter, shift_minutes

logger = logging.getLogger(__name__)


def segment_slots(
    slots: Sequence[TimeSlot],
    session_minutes: int,
    break_minutes: int,
    zone: tzinfo,
) -> List[StudySession]:
    """Place ``session_minutes`` sessions on a ``session + break`` cadence inside each slot.

    The first session of a slot starts at the slot start rounded up to the
    quarter hour. Sessions never leave their slot.
    """
    if session_minutes <= 0:
        raise InvalidPreference(f"Session length must be positive, got {session_minutes}.")
    if break_minutes < 0:
        raise InvalidPreference(f"Break length cannot be negative, got {break_minutes}.")

    sessions: List[StudySession] = []
    for slot in slots:
        if not slot.is_valid:
            raise InvalidInput(f"Slot {slot.start.isoformat()} - {slot.end.isoformat()} is empty or reversed.")
        slot_end = as_utc(slot.end)
        session_start = round_to_quarter(slot.start, zone, forward=True)
        session_end = shift_minutes(session_start, session_minutes)

        while as_utc(session_end) <= slot_end:
            sessions.append(StudySession(start=session_start, end=session_end))
            session_start = shift_minutes(session_end, break_minutes)
            session_end = shift_minutes(session_start, session_minutes)

        # Remaining stretch that still holds a full session: close it on the grid.
        if as_utc(session_start) < slot_end and minutes_between(session_start, slot_end) >= session_minutes:
            closing = round_to_quarter(slot_end, zone, forward=False)
            if minutes_between(session_start, closing) >= session_minutes:
                sessions.append(StudySession(start=session_start, end=closing))

    logger.debug("Segmented %d slots into %d sessions", len(slots), len(sessions))
    return sessions


__all__ = ["segment_slots"]
