"""Value models shared by the planning engine and the request layer."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

HOLIDAY_REFRESH_INTERVAL = timedelta(days=365)


def _utc(instant: datetime) -> datetime:
    return instant.astimezone(timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TimeSlot(BaseModel):
    """Half-open ``[start, end)`` interval of aware instants."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        return int((_utc(self.end) - _utc(self.start)).total_seconds() // 60)

    @property
    def is_valid(self) -> bool:
        return _utc(self.start) < _utc(self.end)


class Course(BaseModel):
    """Catalog record of a course; the planner never mutates it."""

    name: str = Field(..., min_length=1)
    difficulty_level: int = Field(default=0, ge=0)
    credits: int = Field(default=0, ge=0)
    recommended_study_time: int = Field(default=0, ge=0)
    subjects: List[str] = Field(default_factory=list)
    subjects_practice_percentage: int = Field(default=100, ge=0, le=100)


class Exam(BaseModel):
    course: Course
    date_time: datetime


class StudySession(BaseModel):
    """One study block; course and subject fields are filled in by the assigners.

    ``event_id`` is set once the session is scheduled for creation and becomes
    the ``source_id`` of the published calendar event.
    """

    start: datetime
    end: datetime
    course_name: Optional[str] = None
    exam_index: Optional[int] = None
    description: Optional[str] = None
    event_id: Optional[str] = None

    def as_slot(self) -> TimeSlot:
        return TimeSlot(start=self.start, end=self.end)


class BusyEvent(BaseModel):
    """A calendar event as read from the learner's calendars.

    Timed events carry ``start``/``end``; full-day events carry
    ``start_date``/``end_date`` with an exclusive end date.
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    summary: str = ""
    description: str = ""
    source_id: str = ""
    calendar_id: str = ""

    @model_validator(mode="after")
    def _require_one_time_kind(self) -> "BusyEvent":
        timed = self.start is not None and self.end is not None
        full_day = self.start_date is not None
        if not timed and not full_day:
            raise ValueError("An event needs either start/end instants or a start date.")
        if full_day and self.end_date is None:
            self.end_date = self.start_date + timedelta(days=1)  # type: ignore[operator]
        return self

    @property
    def is_full_day(self) -> bool:
        return self.start is None

    def as_slot(self) -> TimeSlot:
        if self.start is None or self.end is None:
            raise ValueError(f"Full-day event {self.source_id or self.summary!r} has no instants.")
        return TimeSlot(start=self.start, end=self.end)


class ExamAllocation(BaseModel):
    exam_index: int
    weight: int
    proportion: float
    sessions: int


class ReconcileResult(BaseModel):
    to_create: List[StudySession] = Field(default_factory=list)
    to_delete: List[BusyEvent] = Field(default_factory=list)
    duplicate_count: int = 0


class StudyPreferences(BaseModel):
    """Per-run study preferences; ``None`` values fall back to the settings."""

    study_start_time: Optional[int] = None
    study_end_time: Optional[int] = None
    session_minutes: Optional[int] = None
    break_minutes: Optional[int] = None
    min_session_minutes: Optional[int] = None
    study_on_holidays: bool = False
    timezone: Optional[str] = None


class HolidayCalendar(BaseModel):
    """Holiday dates (ISO strings) for the current and the next year.

    The caller owns the lookup and must refresh the sets at least once every
    twelve months; ``is_stale`` reports when that is overdue.
    """

    model_config = ConfigDict(frozen=True)

    current_year: FrozenSet[str] = Field(default_factory=frozenset)
    next_year: FrozenSet[str] = Field(default_factory=frozenset)
    fetched_at: datetime = Field(default_factory=_now)

    def contains(self, day: date) -> bool:
        iso = day.isoformat()
        return iso in self.current_year or iso in self.next_year

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        return (now or _now()) - self.fetched_at > HOLIDAY_REFRESH_INTERVAL


class PlanResult(BaseModel):
    """Outcome of one generation."""

    generated_at: datetime = Field(default_factory=_now)
    exams: List[Exam] = Field(default_factory=list)
    free_slots: List[TimeSlot] = Field(default_factory=list)
    sessions: List[StudySession] = Field(default_factory=list)
    allocations: List[ExamAllocation] = Field(default_factory=list)
    to_create: List[StudySession] = Field(default_factory=list)
    to_delete: List[BusyEvent] = Field(default_factory=list)


__all__ = [
    "BusyEvent",
    "Course",
    "Exam",
    "ExamAllocation",
    "HolidayCalendar",
    "PlanResult",
    "ReconcileResult",
    "StudyPreferences",
    "StudySession",
    "TimeSlot",
]
