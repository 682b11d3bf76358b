"""Runtime settings and logging configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from logging.config import dictConfig
from pathlib import Path
from typing import Any

LOG_FORMAT = "%(levelname)-5s [%(filename)s:%(funcName)s:%(lineno)d] %(message)s"


@dataclass(frozen=True)
class TrackerSettings:
    """
    Locations and log level for one tracker process.

    Paths are relative to the working directory unless given absolute.
    """

    db_path: Path = field(default_factory=lambda: Path("donations.db"))
    letters_dir: Path = field(default_factory=lambda: Path("letters"))
    log_level: str = "INFO"


def get_logging_configuration(level: str) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "default",
            }
        },
        "loggers": {
            "donation_tracker": {
                "level": level,
                "propagate": False,
                "handlers": ["console"],
            }
        },
    }


def configure_logging(level: str = "INFO") -> None:
    dictConfig(get_logging_configuration(level.upper()))
    logging.getLogger("donation_tracker").debug("Logging configured at %s.", level.upper())
