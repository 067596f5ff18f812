# File: zonecal/core/config_manager.py
"""
Centralized configuration management for Zonecal.
Loads settings from environment variables (and a .env file if present).
"""

import logging
import os
from pathlib import Path
from typing import List

import pytz
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'y', 'on')


class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from zonecal/core/
    LOGS_DIR = Path(os.getenv("ZONECAL_LOGS_DIR", str(BASE_DIR / "logs")))
    EXPORT_DIR = Path(os.getenv("ZONECAL_EXPORT_DIR", "."))

    # Application Settings
    DEFAULT_TIMEZONE = os.getenv("ZONECAL_DEFAULT_TIMEZONE", "America/New_York")
    LOG_LEVEL = os.getenv("ZONECAL_LOG_LEVEL", "WARNING").upper()
    LOG_TO_FILE = _env_flag("ZONECAL_LOG_TO_FILE")

    # CSV export/import (Google Calendar import layout)
    CSV_DATE_FORMAT = "%m/%d/%Y"       # 03/24/2025
    CSV_TIME_FORMAT = "%I:%M %p"       # 02:00 PM
    CSV_HEADER: List[str] = [
        "Subject", "Start Date", "Start Time", "End Date", "End Time",
        "All Day Event", "Description", "Location", "Private",
    ]

    @classmethod
    def log_level(cls) -> int:
        """Numeric console log level, WARNING if the setting is unknown."""
        level = logging.getLevelName(cls.LOG_LEVEL)
        return level if isinstance(level, int) else logging.WARNING

    @classmethod
    def validate(cls) -> bool:
        """Validate that the configured values are usable."""
        errors = []

        if cls.DEFAULT_TIMEZONE not in pytz.all_timezones_set:
            errors.append(f"ZONECAL_DEFAULT_TIMEZONE '{cls.DEFAULT_TIMEZONE}' is not a known timezone")

        if not isinstance(logging.getLevelName(cls.LOG_LEVEL), int):
            errors.append(f"ZONECAL_LOG_LEVEL '{cls.LOG_LEVEL}' is not a logging level")

        if errors:
            logger = logging.getLogger(__name__)
            for error in errors:
                logger.error(f"Configuration Error: {error}")
            return False

        return True
