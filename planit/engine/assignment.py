"""Assign courses and subjects to study sessions."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Sequence

from ..models import Exam, ExamAllocation, StudySession

logger = logging.getLogger(__name__)

SUBJECT_SEPARATOR = ", "


@dataclass
class _Demand:
    exam_index: int
    remaining: int


def assign_courses(
    sessions: Sequence[StudySession],
    allocations: Sequence[ExamAllocation],
    exams: Sequence[Exam],
) -> List[StudySession]:
    """Give every session to an exam, walking from the last session to the first.

    The latest exam is active from the start. Each step of the walk activates
    at most one earlier exam, once the walk passes its date; the most recently
    activated exam takes sessions until its budget runs out, then earlier
    sessions fall to the exam below it. Sessions no active exam wants are
    dropped. ``exams`` must be sorted by date; the returned list keeps the
    chronological order of the surviving sessions, which are updated in place.
    """
    budgets: Dict[int, int] = {allocation.exam_index: allocation.sessions for allocation in allocations}
    active: List[_Demand] = []
    kept: List[StudySession] = []
    dropped = 0

    def _activate(exam_index: int) -> None:
        budget = budgets.get(exam_index, 0)
        if budget > 0:
            active.append(_Demand(exam_index=exam_index, remaining=budget))

    cursor = len(exams) - 1
    if cursor >= 0:
        _activate(cursor)
        cursor -= 1

    for session in reversed(sessions):
        if cursor >= 0 and exams[cursor].date_time > session.start:
            _activate(cursor)
            cursor -= 1

        if not active:
            dropped += 1
            continue

        demand = active[-1]
        session.course_name = exams[demand.exam_index].course.name
        session.exam_index = demand.exam_index
        kept.append(session)

        demand.remaining -= 1
        if demand.remaining == 0:
            active.pop()

    kept.reverse()
    logger.debug("Assigned %d sessions to exams, dropped %d", len(kept), dropped)
    return kept


def subject_labels(
    subjects: Sequence[str],
    session_count: int,
    practice_percentage: int,
    review_description: str,
) -> List[str]:
    """Descriptions for the chronologically ordered sessions of one exam.

    The first ``ceil(session_count * practice_percentage / 100)`` sessions
    cover the subjects in order; the rest are review sessions.
    """
    subject_sessions = -(-session_count * practice_percentage // 100)
    labels: List[str] = []
    count = len(subjects)

    if count == 0 or subject_sessions == 0:
        return [review_description] * session_count

    if count < subject_sessions:
        # Each subject spans several sessions; session j studies subject floor(j * count / subject_sessions).
        for j in range(subject_sessions):
            labels.append(subjects[j * count // subject_sessions])
    elif count == subject_sessions:
        labels.extend(subjects)
    else:
        chunk = -(-count // subject_sessions)
        for j in range(subject_sessions):
            part = subjects[j * chunk:(j + 1) * chunk]
            labels.append(SUBJECT_SEPARATOR.join(part) if part else review_description)

    labels.extend([review_description] * (session_count - subject_sessions))
    return labels


def assign_subjects(
    sessions: Sequence[StudySession],
    exams: Sequence[Exam],
    review_description: str,
) -> None:
    """Fill in ``description`` for sessions already assigned to an exam."""
    by_exam: Dict[int, List[StudySession]] = defaultdict(list)
    for session in sessions:
        if session.exam_index is not None:
            by_exam[session.exam_index].append(session)

    for exam_index, group in by_exam.items():
        course = exams[exam_index].course
        labels = subject_labels(
            course.subjects,
            len(group),
            course.subjects_practice_percentage,
            review_description,
        )
        for session, label in zip(group, labels):
            session.description = label


__all__ = ["assign_courses", "assign_subjects", "subject_labels"]
