import logging
from typing import Dict

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .logging_config import configure_logging
from .planning_routes import router as planning_router


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="PlanIt Study Planner", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(planning_router)

settings_snapshot = get_settings()
logger.info("Planner starting with timezone: %s", settings_snapshot.timezone)
logger.info(
    "Default study window %04d-%04d, %d minute sessions",
    settings_snapshot.study_start_time,
    settings_snapshot.study_end_time,
    settings_snapshot.session_minutes,
)


@app.get("/healthz")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, str]:
    return {"status": "ok", "timezone": settings.timezone}
