import os
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from .constants import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_EVENT_TITLE_PREFIX,
    DEFAULT_EXAM_KEYWORD,
    DEFAULT_REVIEW_DESCRIPTION,
    DEFAULT_SESSION_MINUTES,
    DEFAULT_STUDY_END_TIME,
    DEFAULT_STUDY_START_TIME,
    DEFAULT_TIMEZONE,
)


class Settings(BaseSettings):
    timezone: str = Field(DEFAULT_TIMEZONE, alias="PLANIT_TIMEZONE")
    study_start_time: int = Field(DEFAULT_STUDY_START_TIME, alias="PLANIT_STUDY_START_TIME")
    study_end_time: int = Field(DEFAULT_STUDY_END_TIME, alias="PLANIT_STUDY_END_TIME")
    session_minutes: int = Field(DEFAULT_SESSION_MINUTES, alias="PLANIT_SESSION_MINUTES")
    break_minutes: int = Field(DEFAULT_BREAK_MINUTES, alias="PLANIT_BREAK_MINUTES")
    min_session_minutes: Optional[int] = Field(None, alias="PLANIT_MIN_SESSION_MINUTES")
    event_title_prefix: str = Field(DEFAULT_EVENT_TITLE_PREFIX, alias="PLANIT_EVENT_TITLE_PREFIX")
    review_description: str = Field(DEFAULT_REVIEW_DESCRIPTION, alias="PLANIT_REVIEW_DESCRIPTION")
    exam_keyword: str = Field(DEFAULT_EXAM_KEYWORD, alias="PLANIT_EXAM_KEYWORD")
    planner_calendar_id: Optional[str] = Field(None, alias="PLANIT_CALENDAR_ID")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid planner configuration: {exc}") from exc
