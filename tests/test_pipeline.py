"""End-to-end planning runs through ``StudyPlanner``."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Sequence

import pytest
from zoneinfo import ZoneInfo

from planit.config import Settings
from planit.engine import StudyPlanner
from planit.errors import EmptyExamSet, InvalidPreference
from planit.models import BusyEvent, Course, Exam, PlanResult, StudyPreferences
from planit.telemetry import TelemetryEvent, clear_listeners, register_listener

TZ = ZoneInfo("Asia/Jerusalem")


def _at(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 6, day, hour, minute, tzinfo=TZ)


def _busy(day: int, start_hour: int, end_hour: int) -> BusyEvent:
    return BusyEvent(start=_at(day, start_hour), end=_at(day, end_hour), summary="Lecture")


def _planner(**overrides) -> StudyPlanner:
    values = {"PLANIT_TIMEZONE": "Asia/Jerusalem"}
    values.update(overrides)
    return StudyPlanner(Settings(**values))


def _algebra(day: int = 12, subjects: Sequence[str] = ("Groups", "Rings"), practice: int = 100) -> Exam:
    course = Course(
        name="Algebra",
        credits=3,
        difficulty_level=2,
        recommended_study_time=3,
        subjects=list(subjects),
        subjects_practice_percentage=practice,
    )
    return Exam(course=course, date_time=_at(day, 9))


@pytest.fixture(autouse=True)
def _reset_listeners():
    clear_listeners()
    yield
    clear_listeners()


def _plan(planner: StudyPlanner, exams: List[Exam], **kwargs):
    return planner.build_plan(
        [_busy(10, 9, 10), _busy(10, 14, 15)],
        exams,
        _at(10, 0),
        _at(13, 0),
        **kwargs,
    )


def test_single_exam_gets_every_session_before_it() -> None:
    plan = _plan(_planner(), [_algebra()])

    assert [(slot.start, slot.end) for slot in plan.free_slots] == [
        (_at(10, 8), _at(10, 9)),
        (_at(10, 10), _at(10, 14)),
        (_at(10, 15), _at(10, 22)),
        (_at(11, 8), _at(11, 22)),
        (_at(12, 8), _at(12, 9)),
    ]
    assert len(plan.sessions) == 21
    assert [session.start for session in plan.sessions if session.start.day == 11] == [
        _at(11, 8),
        _at(11, 9, 15),
        _at(11, 10, 30),
        _at(11, 11, 45),
        _at(11, 13),
        _at(11, 14, 15),
        _at(11, 15, 30),
        _at(11, 16, 45),
        _at(11, 18),
        _at(11, 19, 15),
        _at(11, 20, 30),
    ]
    assert all(session.course_name == "Algebra" for session in plan.sessions)
    assert [allocation.sessions for allocation in plan.allocations] == [21]
    descriptions = [session.description for session in plan.sessions]
    assert descriptions == ["Groups"] * 11 + ["Rings"] * 10
    assert plan.to_create == plan.sessions
    assert plan.to_delete == []


def test_practice_percentage_adds_review_sessions() -> None:
    plan = _plan(_planner(), [_algebra(practice=80)])
    descriptions = [session.description for session in plan.sessions]

    assert descriptions.count("Groups") == 9
    assert descriptions.count("Rings") == 8
    assert descriptions[-4:] == ["Practice previous exams"] * 4


def test_sessions_do_not_overlap_busy_time() -> None:
    plan = _plan(_planner(), [_algebra()])
    busy = [_busy(10, 9, 10), _busy(10, 14, 15)]

    for session in plan.sessions:
        assert session.end <= _algebra().date_time
        for event in busy:
            assert session.end <= event.start or session.start >= event.end


def test_rerun_against_published_events_changes_nothing() -> None:
    planner = _planner()
    first = _plan(planner, [_algebra()])
    published = planner.published_events([], first)

    assert [event.summary for event in published] == ["PlanIt - Algebra"] * 21

    second = _plan(planner, [_algebra()], previous_events=published)

    assert second.to_create == []
    assert second.to_delete == []


def test_rerun_with_new_busy_time_replaces_only_the_relabelled_session() -> None:
    planner = _planner()
    published = planner.published_events([], _plan(planner, [_algebra()]))

    plan = planner.build_plan(
        [_busy(10, 9, 10), _busy(10, 14, 15), _busy(12, 8, 9)],
        [_algebra()],
        _at(10, 0),
        _at(13, 0),
        previous_events=published,
    )

    assert len(plan.sessions) == 20
    assert [event.start for event in plan.to_delete] == [_at(11, 9, 15)]
    assert [session.description for session in plan.to_create] == ["Rings"]
    assert all(event.start >= _at(10, 15) for event in plan.to_delete)
    assert all(session.start >= _at(10, 15) for session in plan.to_create)


def test_exams_are_sorted_before_assignment() -> None:
    biology = Exam(
        course=Course(name="Biology", credits=1, difficulty_level=1, recommended_study_time=1),
        date_time=_at(11, 12),
    )
    plan = _plan(_planner(), [_algebra(), biology])

    assert [exam.course.name for exam in plan.exams] == ["Biology", "Algebra"]
    for session in plan.sessions:
        exam = plan.exams[session.exam_index]
        assert session.start < exam.date_time
        assert session.course_name == exam.course.name


def test_preferences_override_settings() -> None:
    preferences = StudyPreferences(study_start_time=900, study_end_time=1200, session_minutes=45, break_minutes=0)
    plan = _plan(_planner(), [_algebra()], preferences=preferences)

    for session in plan.sessions:
        assert session.end - session.start == timedelta(minutes=45)
        assert _at(session.start.day, 9) <= session.start
        assert session.end <= _at(session.start.day, 12)


def test_own_calendar_events_are_not_busy_time() -> None:
    planner = _planner(PLANIT_CALENDAR_ID="planit")
    own = BusyEvent(start=_at(11, 8), end=_at(11, 22), summary="PlanIt - Algebra", calendar_id="planit")

    plan = planner.build_plan([_busy(10, 9, 10), own], [_algebra()], _at(10, 0), _at(13, 0))

    assert any(session.start.day == 11 for session in plan.sessions)


def test_empty_exam_list_is_rejected() -> None:
    with pytest.raises(EmptyExamSet):
        _plan(_planner(), [])


def test_bad_preferences_are_rejected() -> None:
    with pytest.raises(InvalidPreference):
        _plan(_planner(), [_algebra()], preferences=StudyPreferences(session_minutes=0))
    with pytest.raises(InvalidPreference):
        _plan(_planner(), [_algebra()], preferences=StudyPreferences(timezone="Mars/Olympus"))
    with pytest.raises(InvalidPreference):
        _plan(_planner(), [_algebra()], preferences=StudyPreferences(study_start_time=2300, study_end_time=800))


def test_run_emits_telemetry() -> None:
    received: List[TelemetryEvent] = []
    register_listener(received.append)

    _plan(_planner(), [_algebra()], learner_id="dana")

    assert [event.name for event in received] == ["plan_generation"]
    payload = received[0].payload
    assert payload["status"] == "success"
    assert payload["learner_id"] == "dana"
    assert payload["session_count"] == 21
    assert payload["create_count"] == 21
    assert payload["duration_ms"] >= 0


def test_failed_run_emits_error_telemetry() -> None:
    received: List[TelemetryEvent] = []
    register_listener(received.append)

    with pytest.raises(InvalidPreference):
        _plan(_planner(), [_algebra()], preferences=StudyPreferences(break_minutes=-1))

    assert received[0].payload["status"] == "error"
    assert received[0].payload["exception_type"] == "InvalidPreference"


def test_created_sessions_carry_event_ids_into_published_events() -> None:
    planner = _planner()
    plan = _plan(planner, [_algebra()])

    ids = [session.event_id for session in plan.to_create]
    assert all(event_id and len(event_id) == 32 and set(event_id) <= set("0123456789abcdef") for event_id in ids)
    assert len(set(ids)) == len(ids)

    published = planner.published_events([], plan)
    assert sorted(event.source_id for event in published) == sorted(ids)  # type: ignore[type-var]


def test_rerun_deletes_events_by_their_published_ids() -> None:
    planner = _planner()
    first = _plan(planner, [_algebra()])
    published = planner.published_events([], first)
    ids = {event.start: event.source_id for event in published}

    plan = planner.build_plan(
        [_busy(10, 9, 10), _busy(10, 14, 15), _busy(12, 8, 9)],
        [_algebra()],
        _at(10, 0),
        _at(13, 0),
        previous_events=published,
    )

    assert [event.source_id for event in plan.to_delete] == [ids[_at(11, 9, 15)]]
    assert plan.to_delete[0].source_id != ""


def test_published_events_drop_deleted_events_by_identity() -> None:
    planner = _planner()
    deleted = BusyEvent(start=_at(11, 8), end=_at(11, 9), summary="PlanIt - Algebra")
    twin = deleted.model_copy()
    plan = PlanResult(to_delete=[deleted])

    published = planner.published_events([deleted, twin], plan)

    assert len(published) == 1
    assert published[0] is twin
