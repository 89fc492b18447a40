"""PlanIt: turns a learner's calendar and exam dates into study sessions."""

__version__ = "0.1.0"
