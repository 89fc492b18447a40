"""Time helpers shared by the engine stages."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Tuple

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..constants import ROUNDING_MINUTES
from ..errors import InvalidPreference


def resolve_zone(name: str) -> ZoneInfo:
    trimmed = (name or "").strip()
    if not trimmed:
        raise InvalidPreference("A learner timezone is required.")
    try:
        return ZoneInfo(trimmed)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidPreference(f"Unsupported timezone: {trimmed!r}") from exc


def parse_study_time(value: int) -> Tuple[int, int]:
    """Split an ``hour*100+minute`` preference (e.g. ``830``) into hour and minute."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPreference(f"Study time must be an integer, got {value!r}.")
    if value < 0 or value > 2359:
        raise InvalidPreference(f"Study time {value} is outside 0000-2359.")
    hour, minute = divmod(value, 100)
    if minute > 59:
        raise InvalidPreference(f"Study time {value} has a minute part above 59.")
    return hour, minute


def to_local(instant: datetime, zone: tzinfo) -> datetime:
    """Return ``instant`` in ``zone``; naive values are read as local wall time."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=zone)
    return instant.astimezone(zone)


def at_local_time(day: date, hour: int, minute: int, zone: tzinfo) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=zone)


def as_utc(instant: datetime) -> datetime:
    """The same instant in UTC; aware datetimes sharing a zone compare by wall clock otherwise."""
    return instant.astimezone(timezone.utc)


def shift_minutes(instant: datetime, minutes: int) -> datetime:
    """Add elapsed minutes (not wall-clock minutes) keeping the instant's zone."""
    zone = instant.tzinfo
    moved = as_utc(instant) + timedelta(minutes=minutes)
    return moved.astimezone(zone)


def minutes_between(start: datetime, end: datetime) -> int:
    """Elapsed whole minutes from ``start`` to ``end``."""
    return int((as_utc(end) - as_utc(start)).total_seconds() // 60)


def round_to_quarter(instant: datetime, zone: tzinfo, forward: bool) -> datetime:
    """Round to the quarter-hour grid of ``zone``.

    Forward: minutes 1-14 -> 15, 16-29 -> 30, 31-44 -> 45, 46-59 -> next hour.
    Backward: down to 0, 15, 30 or 45. Values on the grid are unchanged.
    """
    local = to_local(instant, zone)
    result = local.replace(second=0, microsecond=0)
    if forward and result != local:
        result = shift_minutes(result, 1)
    remainder = result.minute % ROUNDING_MINUTES
    if remainder:
        if forward:
            result = shift_minutes(result, ROUNDING_MINUTES - remainder)
        else:
            result = shift_minutes(result, -remainder)
    return result


__all__ = [
    "as_utc",
    "at_local_time",
    "minutes_between",
    "parse_study_time",
    "resolve_zone",
    "round_to_quarter",
    "shift_minutes",
    "to_local",
]
