import logging
import os
from logging.config import dictConfig
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure process logging from ``PLANIT_LOG_LEVEL`` / ``PLANIT_ENGINE_LOG_LEVEL``."""
    root_level = (level or os.getenv("PLANIT_LOG_LEVEL", "INFO")).upper()
    engine_level = os.getenv("PLANIT_ENGINE_LOG_LEVEL", root_level).upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": os.getenv("PLANIT_LOG_FORMAT", DEFAULT_LOG_FORMAT),
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                # Stage loggers are chatty at DEBUG; tune them apart from the rest.
                "planit.engine": {"level": engine_level},
            },
            "root": {
                "handlers": ["default"],
                "level": root_level,
            },
        }
    )

    if os.getenv("PLANIT_DEBUG_HTTP", "0") == "1":
        logging.getLogger("uvicorn.access").setLevel(logging.DEBUG)
