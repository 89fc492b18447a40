"""Weighted split of the session budget between exams."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence

from ..errors import EmptyExamSet
from ..models import Exam, ExamAllocation

logger = logging.getLogger(__name__)


def exam_weight(exam: Exam) -> int:
    course = exam.course
    return course.credits + course.difficulty_level + course.recommended_study_time


def compute_proportions(exams: Sequence[Exam]) -> List[float]:
    """Share of the total study time per exam, in exam order; sums to 1.0."""
    if not exams:
        raise EmptyExamSet("Cannot split study time without exams.")
    weights = [exam_weight(exam) for exam in exams]
    total = sum(weights)
    if total == 0:
        return [1.0 / len(exams)] * len(exams)
    return [weight / total for weight in weights]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def allocate_sessions(exams: Sequence[Exam], total_sessions: int) -> List[ExamAllocation]:
    """Session budget per exam, each rounded independently.

    The budgets may add up to slightly more or less than ``total_sessions``;
    the course assigner absorbs the difference.
    """
    proportions = compute_proportions(exams)
    allocations = [
        ExamAllocation(
            exam_index=index,
            weight=exam_weight(exam),
            proportion=proportion,
            sessions=_round_half_up(proportion * total_sessions),
        )
        for index, (exam, proportion) in enumerate(zip(exams, proportions))
    ]
    allocated = sum(allocation.sessions for allocation in allocations)
    if allocated != total_sessions:
        logger.debug("Rounded budgets allocate %d of %d sessions", allocated, total_sessions)
    return allocations


__all__ = ["allocate_sessions", "compute_proportions", "exam_weight"]
