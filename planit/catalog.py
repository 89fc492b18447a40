"""Recognise exams among calendar events using the course catalog."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .models import BusyEvent, Course, Exam

logger = logging.getLogger(__name__)


def match_course(summary: str, courses: Sequence[Course]) -> Optional[Course]:
    """Find the course named by the trailing words of an event summary.

    "Exam A - Linear Algebra" matches a course named "Linear Algebra": words
    are added from the end of the summary until the phrase names a course.
    """
    by_name: Dict[str, Course] = {course.name: course for course in courses}
    phrase = ""
    for word in reversed(summary.split()):
        phrase = f"{word} {phrase}".strip()
        course = by_name.get(phrase)
        if course is not None:
            return course
    return None


def exams_from_events(events: Sequence[BusyEvent], courses: Sequence[Course], keyword: str) -> List[Exam]:
    """Exams for timed events whose summary contains ``keyword`` and names a known course."""
    needle = keyword.casefold()
    exams: List[Exam] = []
    for event in events:
        if event.is_full_day or needle not in event.summary.casefold():
            continue
        course = match_course(event.summary, courses)
        if course is None:
            logger.info("No catalog course matches exam event %r", event.summary)
            continue
        exams.append(Exam(course=course, date_time=event.start))  # type: ignore[arg-type]
    exams.sort(key=lambda exam: exam.date_time)
    return exams


__all__ = ["exams_from_events", "match_course"]
