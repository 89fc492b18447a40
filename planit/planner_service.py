"""Scan and generate operations wrapped around the planning engine.

``scan`` looks at the learner's calendar snapshot and either generates right
away or hands back the full-day events that need a decision; ``generate``
takes those decisions and produces the plan. Remote calendar I/O stays with
the caller: both operations work on already-fetched events and return the
sessions to create and the old events to delete.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from .cache import GenerationCache, generation_cache
from .catalog import exams_from_events
from .constants import ERROR_NO_EXAMS_FOUND, NO_PROBLEM, UNHANDLED_FULL_DAY_EVENTS
from .engine import StudyPlanner
from .errors import EmptyExamSet, PlanningError
from .holidays import apply_decisions, full_day_busy_slots, resolve_full_day_events, split_full_day_events
from .models import BusyEvent, Course, Exam, HolidayCalendar, PlanResult, StudyPreferences

logger = logging.getLogger(__name__)


class PlanningRequest(BaseModel):
    learner_id: str = Field(..., min_length=1)
    scan_start: datetime
    scan_end: datetime
    events: List[BusyEvent] = Field(default_factory=list)
    exams: List[Exam] = Field(default_factory=list)
    courses: List[Course] = Field(default_factory=list)
    previous_events: Optional[List[BusyEvent]] = None
    preferences: StudyPreferences = Field(default_factory=StudyPreferences)
    holidays: HolidayCalendar = Field(default_factory=HolidayCalendar)


class PlanningOutcome(BaseModel):
    success: bool
    message: str
    full_day_events: List[BusyEvent] = Field(default_factory=list)
    plan: Optional[PlanResult] = None


class PlannerService:
    def __init__(
        self,
        planner: Optional[StudyPlanner] = None,
        cache: Optional[GenerationCache] = None,
    ) -> None:
        self.planner = planner or StudyPlanner()
        self.cache = cache if cache is not None else generation_cache

    def scan(self, request: PlanningRequest) -> PlanningOutcome:
        exams = self._exams(request)
        if not exams:
            logger.info("Scan for %s found no exams", request.learner_id)
            return PlanningOutcome(success=False, message=ERROR_NO_EXAMS_FOUND)

        timed, full_day = split_full_day_events(request.events)
        unresolved, blocked = resolve_full_day_events(
            full_day,
            request.preferences.study_on_holidays,
            request.holidays,
        )
        if unresolved:
            logger.info(
                "Scan for %s needs decisions on %d full-day events",
                request.learner_id,
                len(unresolved),
            )
            return PlanningOutcome(success=False, message=UNHANDLED_FULL_DAY_EVENTS, full_day_events=unresolved)

        plan = self._generate(request, exams, timed, blocked)
        return PlanningOutcome(success=True, message=NO_PROBLEM, plan=plan)

    def generate(self, request: PlanningRequest, decisions: Sequence[bool]) -> PlanningOutcome:
        """Generate after the learner decided, per unresolved full-day event, whether to study through it."""
        exams = self._exams(request)
        if not exams:
            raise EmptyExamSet(ERROR_NO_EXAMS_FOUND)

        timed, full_day = split_full_day_events(request.events)
        unresolved, blocked = resolve_full_day_events(
            full_day,
            request.preferences.study_on_holidays,
            request.holidays,
        )
        blocked.extend(apply_decisions(unresolved, decisions))
        plan = self._generate(request, exams, timed, blocked)
        return PlanningOutcome(success=True, message=NO_PROBLEM, plan=plan)

    def _exams(self, request: PlanningRequest) -> List[Exam]:
        if request.exams:
            return sorted(request.exams, key=lambda exam: exam.date_time)
        if not request.courses:
            return []
        return exams_from_events(request.events, request.courses, self.planner.settings.exam_keyword)

    def _generate(
        self,
        request: PlanningRequest,
        exams: List[Exam],
        timed: List[BusyEvent],
        blocked: List[BusyEvent],
    ) -> PlanResult:
        zone = self.planner.resolve_parameters(request.preferences).zone
        busy = sorted(timed + full_day_busy_slots(blocked, zone), key=lambda event: event.start)  # type: ignore[arg-type,return-value]

        with self.cache.lock_for(request.learner_id):
            previous = request.previous_events
            if previous is None:
                previous = self.cache.get(request.learner_id) or []
            try:
                plan = self.planner.build_plan(
                    busy,
                    exams,
                    request.scan_start,
                    request.scan_end,
                    preferences=request.preferences,
                    previous_events=previous,
                    learner_id=request.learner_id,
                )
            except PlanningError as exc:
                logger.warning("Planning run for %s rejected: %s", request.learner_id, exc)
                raise
            except Exception:
                logger.exception("Planning run for %s failed", request.learner_id)
                raise
            self.cache.set(request.learner_id, self.planner.published_events(previous, plan))
        return plan


__all__ = ["PlannerService", "PlanningOutcome", "PlanningRequest"]
