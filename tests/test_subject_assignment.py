"""Subject descriptions for sessions of one exam."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

from zoneinfo import ZoneInfo

from planit.engine.assignment import assign_subjects, subject_labels
from planit.models import Course, Exam, StudySession

TZ = ZoneInfo("Asia/Jerusalem")
REVIEW = "Practice previous exams"


def _letters(count: int) -> List[str]:
    return [chr(ord("A") + index) for index in range(count)]


def test_more_subjects_than_sessions_are_grouped() -> None:
    assert subject_labels(_letters(5), 3, 100, REVIEW) == ["A, B", "C, D", "E"]


def test_groups_use_ceiling_chunks() -> None:
    labels = subject_labels(_letters(15), 4, 100, REVIEW)

    assert [len(label.split(", ")) for label in labels] == [4, 4, 4, 3]
    assert labels[0] == "A, B, C, D"


def test_empty_trailing_group_becomes_review() -> None:
    assert subject_labels(_letters(5), 4, 100, REVIEW) == ["A, B", "C, D", "E", REVIEW]


def test_one_subject_per_session() -> None:
    assert subject_labels(_letters(5), 5, 100, REVIEW) == _letters(5)


def test_fewer_subjects_span_several_sessions() -> None:
    assert subject_labels(["A", "B"], 10, 100, REVIEW) == ["A"] * 5 + ["B"] * 5
    assert subject_labels(["A", "B", "C"], 7, 100, REVIEW) == ["A", "A", "A", "B", "B", "C", "C"]


def test_practice_percentage_leaves_review_sessions() -> None:
    labels = subject_labels(["A", "B"], 21, 80, REVIEW)

    assert len(labels) == 21
    assert labels.count("A") == 9
    assert labels.count("B") == 8
    assert labels[-4:] == [REVIEW] * 4


def test_no_subjects_means_review_only() -> None:
    assert subject_labels([], 3, 100, REVIEW) == [REVIEW] * 3
    assert subject_labels(["A"], 3, 0, REVIEW) == [REVIEW] * 3


def test_no_sessions_yields_no_labels() -> None:
    assert subject_labels(["A", "B"], 0, 100, REVIEW) == []


def test_assign_subjects_labels_each_exam_in_chronological_order() -> None:
    exams = [
        Exam(course=Course(name="Algebra", subjects=["Groups", "Rings"]), date_time=datetime(2024, 6, 20, 9, tzinfo=TZ)),
        Exam(course=Course(name="Biology"), date_time=datetime(2024, 6, 25, 9, tzinfo=TZ)),
    ]
    base = datetime(2024, 6, 10, 8, tzinfo=TZ)
    sessions = [
        StudySession(start=base + timedelta(days=day), end=base + timedelta(days=day, hours=1), exam_index=index)
        for day, index in enumerate([0, 1, 0, 1])
    ]
    sessions.append(StudySession(start=base + timedelta(days=9), end=base + timedelta(days=9, hours=1)))

    assign_subjects(sessions, exams, REVIEW)

    assert [session.description for session in sessions] == ["Groups", REVIEW, "Rings", REVIEW, None]
