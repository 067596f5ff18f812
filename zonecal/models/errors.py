# File: zonecal/models/errors.py
"""
Exception types raised by the Zonecal scheduling core.
Every failure is synchronous and aborts only the operation that raised it.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .event import Event


class CalendarError(Exception):
    """Base class for all calendar failures."""


class InvalidTimeRange(CalendarError, ValueError):
    """End instant precedes start instant."""


class InvalidRecurrenceTemplate(CalendarError, ValueError):
    """Recurring template spans more than one calendar day."""


class InvalidDayCode(CalendarError, ValueError):
    """Day selector is missing or contains an unknown code."""


class InvalidRepeatCount(CalendarError, ValueError):
    """Repeat count is zero or negative."""


class InvalidRecurrenceRule(CalendarError, ValueError):
    """Repeat rule has neither a 'for' nor an 'until' clause, or is malformed."""


class SchedulingConflict(CalendarError):
    """New event overlaps an event already in the calendar."""

    def __init__(self, message: str, event: Optional['Event'] = None,
                 conflicting: Optional['Event'] = None):
        super().__init__(message)
        self.event = event
        self.conflicting = conflicting


class EventNotFound(CalendarError, LookupError):
    """No event matches the lookup criteria."""


class InvalidPropertyValue(CalendarError, ValueError):
    """Property value cannot be applied (e.g. non-boolean 'public')."""


class InvalidTimezone(CalendarError, ValueError):
    """Timezone identifier is not a known IANA zone."""


class CalendarNotFound(CalendarError, LookupError):
    """No calendar with the requested name, or none selected."""


class DuplicateCalendarName(CalendarError):
    """A calendar with this name already exists."""


class InvalidCalendarProperty(CalendarError, ValueError):
    """Calendar edit names a property other than 'name' or 'timezone'."""


class InvalidCommand(CalendarError, ValueError):
    """Command text could not be parsed."""


class InvalidCsvRow(CalendarError, ValueError):
    """CSV row cannot be turned into an event."""
