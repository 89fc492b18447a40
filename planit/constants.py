"""Shared defaults for the PlanIt study planner."""

DEFAULT_TIMEZONE = "Asia/Jerusalem"

# Daily study window as hour*100+minute integers (08:00 to 22:00).
DEFAULT_STUDY_START_TIME = 800
DEFAULT_STUDY_END_TIME = 2200

DEFAULT_SESSION_MINUTES = 60
DEFAULT_BREAK_MINUTES = 15

DEFAULT_EVENT_TITLE_PREFIX = "PlanIt - "
DEFAULT_REVIEW_DESCRIPTION = "Practice previous exams"
DEFAULT_EXAM_KEYWORD = "Exam"

ROUNDING_MINUTES = 15

NO_PROBLEM = "Study plan generated."
ERROR_NO_EXAMS_FOUND = "No exams were found in the requested period."
UNHANDLED_FULL_DAY_EVENTS = "Some full-day events need a study decision."
