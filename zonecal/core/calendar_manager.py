# File: zonecal/core/calendar_manager.py
"""
Collection of named calendars and the currently selected one.
"""

from typing import Dict, Optional

from zonecal.core.calendar import Calendar
from zonecal.core.config_manager import Config
from zonecal.core.event_manager import EventManager
from zonecal.core.recurrence_expander import RecurrenceExpander
from zonecal.models.common import ZoneLike, resolve_timezone, zone_name
from zonecal.models.enums import CalendarProperty
from zonecal.models.errors import CalendarNotFound, DuplicateCalendarName, InvalidCalendarProperty
from zonecal.utils.logger import setup_logger

logger = setup_logger(__name__)


class CalendarManager:
    """Owns every calendar by name and tracks the active one."""

    def __init__(self):
        self._calendars: Dict[str, Calendar] = {}
        self.current_name: Optional[str] = None

    def create_calendar(self, name: str, timezone: Optional[ZoneLike] = None) -> Calendar:
        """
        Create a calendar with its own scheduler.

        Args:
            name: Unique calendar name
            timezone: IANA zone (default: Config.DEFAULT_TIMEZONE)

        Raises:
            DuplicateCalendarName: name already used
            InvalidTimezone: unknown zone
        """
        if name in self._calendars:
            raise DuplicateCalendarName(f"Calendar name already exists: {name}")
        zone = resolve_timezone(timezone if timezone is not None else Config.DEFAULT_TIMEZONE)
        calendar = Calendar(name, zone, EventManager(RecurrenceExpander()))
        self._calendars[name] = calendar
        logger.info(f"Created calendar '{name}' ({zone_name(zone)})")
        return calendar

    def use_calendar(self, name: str) -> Calendar:
        calendar = self.get_calendar(name)
        self.current_name = name
        return calendar

    def current_calendar(self) -> Calendar:
        if self.current_name is None:
            raise CalendarNotFound("No calendar selected")
        return self._calendars[self.current_name]

    def get_calendar(self, name: str) -> Calendar:
        calendar = self._calendars.get(name)
        if calendar is None:
            raise CalendarNotFound(f"Calendar not found: {name}")
        return calendar

    def edit_calendar(self, name: str, prop: str, new_value: str) -> Calendar:
        """
        Rename a calendar or change its timezone.

        Raises:
            CalendarNotFound, DuplicateCalendarName, InvalidTimezone,
            InvalidCalendarProperty
        """
        calendar = self.get_calendar(name)
        try:
            field = CalendarProperty(prop.strip().lower())
        except ValueError:
            raise InvalidCalendarProperty(
                f"Invalid property: {prop}. Use 'name' or 'timezone'"
            ) from None

        if field is CalendarProperty.NAME:
            if new_value in self._calendars:
                raise DuplicateCalendarName(f"New name already exists: {new_value}")
            del self._calendars[name]
            calendar.name = new_value
            self._calendars[new_value] = calendar
            if self.current_name == name:
                self.current_name = new_value
        else:
            calendar.set_timezone(resolve_timezone(new_value))

        logger.info(f"Calendar '{name}' updated: {field.value} = {new_value}")
        return calendar

    def calendars(self) -> Dict[str, Calendar]:
        return dict(self._calendars)
