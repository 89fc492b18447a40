"""One planning run: free time -> sessions -> exam/subject assignment -> diff."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from ..config import Settings, get_settings
from ..errors import EmptyExamSet, InvalidPreference
from ..models import BusyEvent, Exam, PlanResult, StudyPreferences, StudySession
from ..telemetry import timed_run
from .allocation import allocate_sessions
from .assignment import assign_courses, assign_subjects
from .free_slots import extract_free_slots
from .reconciler import reconcile, render_title
from .segmenter import segment_slots
from .study_window import DailyWindow, adjust_to_study_window
from .timeutils import resolve_zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunParameters:
    """Study preferences with every gap filled from the settings."""

    window: DailyWindow
    zone: tzinfo
    session_minutes: int
    break_minutes: int
    min_session_minutes: int
    study_on_holidays: bool


class StudyPlanner:
    """Turns busy time, exams and preferences into a reconciled session list."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    def resolve_parameters(self, preferences: Optional[StudyPreferences] = None) -> RunParameters:
        prefs = preferences or StudyPreferences()
        settings = self._settings
        zone = resolve_zone(prefs.timezone or settings.timezone)
        window = DailyWindow(
            prefs.study_start_time if prefs.study_start_time is not None else settings.study_start_time,
            prefs.study_end_time if prefs.study_end_time is not None else settings.study_end_time,
            zone,
        )
        session_minutes = prefs.session_minutes if prefs.session_minutes is not None else settings.session_minutes
        break_minutes = prefs.break_minutes if prefs.break_minutes is not None else settings.break_minutes
        min_session = prefs.min_session_minutes
        if min_session is None:
            min_session = settings.min_session_minutes if settings.min_session_minutes is not None else session_minutes
        if session_minutes <= 0:
            raise InvalidPreference(f"Session length must be positive, got {session_minutes}.")
        if break_minutes < 0:
            raise InvalidPreference(f"Break length cannot be negative, got {break_minutes}.")
        if min_session < 0:
            raise InvalidPreference(f"Minimum session length cannot be negative, got {min_session}.")
        return RunParameters(
            window=window,
            zone=zone,
            session_minutes=session_minutes,
            break_minutes=break_minutes,
            min_session_minutes=min_session,
            study_on_holidays=prefs.study_on_holidays,
        )

    def render_event_title(self, course_name: Optional[str]) -> str:
        return render_title(course_name, self._settings.event_title_prefix)

    def build_plan(
        self,
        busy_events: Sequence[BusyEvent],
        exams: Sequence[Exam],
        scan_start: datetime,
        scan_end: datetime,
        preferences: Optional[StudyPreferences] = None,
        previous_events: Sequence[BusyEvent] = (),
        learner_id: Optional[str] = None,
    ) -> PlanResult:
        """Run every stage in order for one learner and one scan window."""
        if not exams:
            raise EmptyExamSet("No exams were supplied for this planning run.")

        with timed_run("plan_generation", learner_id=learner_id) as run:
            params = self.resolve_parameters(preferences)
            ordered_exams = sorted(exams, key=lambda exam: exam.date_time)
            busy = self._timed_busy_events(busy_events)

            free_slots = extract_free_slots(busy, scan_start, scan_end, ordered_exams)
            study_slots = adjust_to_study_window(free_slots, params.window, params.min_session_minutes)
            sessions = segment_slots(study_slots, params.session_minutes, params.break_minutes, params.zone)
            allocations = allocate_sessions(ordered_exams, len(sessions))
            assigned = assign_courses(sessions, allocations, ordered_exams)
            assign_subjects(assigned, ordered_exams, self._settings.review_description)

            previous = sorted(
                (event for event in previous_events if not event.is_full_day),
                key=lambda event: event.start,  # type: ignore[arg-type,return-value]
            )
            diff = reconcile(assigned, previous, self._settings.event_title_prefix)
            for session in diff.to_create:
                session.event_id = uuid.uuid4().hex

            run.record(
                exam_count=len(ordered_exams),
                busy_count=len(busy),
                free_slot_count=len(free_slots),
                session_count=len(sessions),
                assigned_count=len(assigned),
                allocated_total=sum(allocation.sessions for allocation in allocations),
                create_count=len(diff.to_create),
                delete_count=len(diff.to_delete),
                unchanged_count=diff.duplicate_count,
            )

        logger.info(
            "Generated %d study sessions for %s (%d to create, %d to delete)",
            len(assigned),
            learner_id or "anonymous learner",
            len(diff.to_create),
            len(diff.to_delete),
        )
        return PlanResult(
            exams=ordered_exams,
            free_slots=study_slots,
            sessions=assigned,
            allocations=allocations,
            to_create=diff.to_create,
            to_delete=diff.to_delete,
        )

    def session_event(self, session: StudySession) -> BusyEvent:
        """The calendar event a published session turns into."""
        return BusyEvent(
            start=session.start,
            end=session.end,
            summary=self.render_event_title(session.course_name),
            description=session.description or "",
            source_id=session.event_id or "",
            calendar_id=self._settings.planner_calendar_id or "",
        )

    def published_events(self, previous_events: Sequence[BusyEvent], plan: PlanResult) -> List[BusyEvent]:
        """Calendar contents once ``plan`` is applied: old minus deleted, plus created.

        Deleted events are matched by identity, so ``previous_events`` must be
        the list the plan was built from.
        """
        deleted = {id(event) for event in plan.to_delete}
        kept = [
            event
            for event in previous_events
            if not event.is_full_day and id(event) not in deleted
        ]
        created = [self.session_event(session) for session in plan.to_create]
        return sorted(kept + created, key=lambda event: event.start)  # type: ignore[arg-type,return-value]

    def _timed_busy_events(self, events: Sequence[BusyEvent]) -> List[BusyEvent]:
        own_calendar = self._settings.planner_calendar_id
        busy = [
            event
            for event in events
            if not event.is_full_day and not (own_calendar and event.calendar_id == own_calendar)
        ]
        busy.sort(key=lambda event: event.start)  # type: ignore[arg-type,return-value]
        return busy


__all__ = ["RunParameters", "StudyPlanner"]
