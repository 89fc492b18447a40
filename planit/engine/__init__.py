"""Scheduling engine: pure, synchronous stages and the pipeline that chains them."""

from .allocation import allocate_sessions, compute_proportions, exam_weight
from .assignment import assign_courses, assign_subjects, subject_labels
from .free_slots import extract_free_slots
from .pipeline import RunParameters, StudyPlanner
from .reconciler import reconcile, render_title
from .segmenter import segment_slots
from .study_window import DailyWindow, adjust_to_study_window

__all__ = [
    "DailyWindow",
    "RunParameters",
    "StudyPlanner",
    "adjust_to_study_window",
    "allocate_sessions",
    "assign_courses",
    "assign_subjects",
    "compute_proportions",
    "exam_weight",
    "extract_free_slots",
    "reconcile",
    "render_title",
    "segment_slots",
    "subject_labels",
]
