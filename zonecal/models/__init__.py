from .enums import EventProperty, CalendarProperty, RunMode
from .common import resolve_timezone, parse_date, parse_datetime, format_moment
from .event import Event
from .recurrence import RecurrenceRule, DAY_CODES, parse_rule, parse_day_selector
from .errors import (
    CalendarError,
    InvalidTimeRange,
    InvalidRecurrenceTemplate,
    InvalidDayCode,
    InvalidRepeatCount,
    InvalidRecurrenceRule,
    SchedulingConflict,
    EventNotFound,
    InvalidPropertyValue,
    InvalidTimezone,
    CalendarNotFound,
    DuplicateCalendarName,
    InvalidCalendarProperty,
    InvalidCommand,
    InvalidCsvRow,
)

__all__ = [
    "EventProperty",
    "CalendarProperty",
    "RunMode",
    "resolve_timezone",
    "parse_date",
    "parse_datetime",
    "format_moment",
    "Event",
    "RecurrenceRule",
    "DAY_CODES",
    "parse_rule",
    "parse_day_selector",
    "CalendarError",
    "InvalidTimeRange",
    "InvalidRecurrenceTemplate",
    "InvalidDayCode",
    "InvalidRepeatCount",
    "InvalidRecurrenceRule",
    "SchedulingConflict",
    "EventNotFound",
    "InvalidPropertyValue",
    "InvalidTimezone",
    "CalendarNotFound",
    "DuplicateCalendarName",
    "InvalidCalendarProperty",
    "InvalidCommand",
    "InvalidCsvRow",
]
