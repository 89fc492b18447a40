"""Error kinds reported by the planning engine."""


class PlanningError(ValueError):
    """Base class for failures of a planning run."""


class InvalidInput(PlanningError):
    """Raised for a malformed scan window or a time slot with start >= end."""


class InvalidPreference(PlanningError):
    """Raised when the learner's study preferences cannot be interpreted."""


class EmptyExamSet(PlanningError):
    """Raised when a run is started without any exams."""


class DecisionCountMismatch(PlanningError):
    """Raised when fewer study decisions than unresolved full-day events are supplied."""


__all__ = [
    "DecisionCountMismatch",
    "EmptyExamSet",
    "InvalidInput",
    "InvalidPreference",
    "PlanningError",
]
