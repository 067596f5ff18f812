# File: zonecal/models/enums.py

from enum import Enum
from typing import Optional


class EventProperty(Enum):
    """Event properties that can be edited after scheduling."""
    NAME = "name"
    DESCRIPTION = "description"
    LOCATION = "location"
    PUBLIC = "public"

    @classmethod
    def lookup(cls, raw: str) -> Optional['EventProperty']:
        """Case-insensitive lookup; None for unrecognised names."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class CalendarProperty(Enum):
    """Calendar properties that can be edited."""
    NAME = "name"
    TIMEZONE = "timezone"


class RunMode(Enum):
    """Command processor input modes."""
    INTERACTIVE = "interactive"
    HEADLESS = "headless"
