from __future__ import annotations

import logging
from pathlib import Path

from donation_tracker.config import TrackerSettings, configure_logging, get_logging_configuration


def test_default_settings_are_relative_to_working_directory() -> None:
    settings = TrackerSettings()
    assert settings.db_path == Path("donations.db")
    assert settings.letters_dir == Path("letters")
    assert settings.log_level == "INFO"


def test_logging_configuration_targets_package_logger() -> None:
    config = get_logging_configuration("DEBUG")
    assert config["loggers"]["donation_tracker"]["level"] == "DEBUG"
    assert config["handlers"]["console"]["stream"] == "ext://sys.stdout"


def test_configure_logging_sets_package_level() -> None:
    configure_logging("warning")
    logger = logging.getLogger("donation_tracker")
    assert logger.level == logging.WARNING
    assert logger.propagate is False
