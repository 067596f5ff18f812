# File: zonecal/core/calendar.py
"""
A named calendar in one timezone, plus copying events between calendars.
"""

import datetime
from typing import List, Optional

import pytz

from zonecal.core.event_manager import EventManager
from zonecal.models.common import ZoneLike, localize, resolve_timezone, start_of_day, shift, \
    to_zone, zone_name, format_moment
from zonecal.models.errors import EventNotFound
from zonecal.models.event import Event
from zonecal.utils.logger import LoggerMixin


class Calendar(LoggerMixin):
    """Pairs a name and timezone with the calendar's own EventManager."""

    def __init__(self, name: str, timezone: ZoneLike, event_manager: Optional[EventManager] = None):
        """
        Initialize a calendar.

        Args:
            name: Calendar name, unique within its CalendarManager
            timezone: IANA zone identifier or tzinfo
            event_manager: Scheduler for this calendar's events
        """
        self.name = name
        self._timezone = resolve_timezone(timezone)
        self.events = event_manager or EventManager()

    @property
    def timezone(self) -> datetime.tzinfo:
        return self._timezone

    def set_timezone(self, timezone: ZoneLike) -> None:
        """Change zone; existing events keep their instants."""
        new_zone = resolve_timezone(timezone)
        self.events.adjust_timezone(self._timezone, new_zone)
        self._timezone = new_zone

    def localize(self, naive: datetime.datetime) -> datetime.datetime:
        """Interpret a naive wall-clock time in this calendar's zone."""
        return localize(naive, self._timezone)

    def __repr__(self) -> str:
        return f"Calendar(name={self.name!r}, timezone={zone_name(self._timezone)!r})"

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------

    def find_event(self, name: str, start: datetime.datetime) -> Event:
        """
        Locate an event by name and start.

        A naive start is compared with the event's wall-clock start, an aware
        one with its instant.

        Raises:
            EventNotFound: no event matches
        """
        for event in self.events.retrieve_all():
            if event.name != name:
                continue
            if start.tzinfo is None:
                if event.start.replace(tzinfo=None) == start:
                    return event
            elif event.start == start:
                return event
        raise EventNotFound(f"Event '{name}' not found at {start.isoformat()}")

    def copy_single_event(self, name: str, source_start: datetime.datetime,
                          target: 'Calendar', target_start: datetime.datetime) -> Event:
        """
        Copy one event to another calendar at a new start time.

        The copy keeps the source duration; target_start is read in the
        target calendar's zone.
        """
        source = self.find_event(name, source_start)
        if target_start.tzinfo is None:
            new_start = target.localize(target_start)
        else:
            new_start = to_zone(target_start, target.timezone)
        copy = self._copy_into(source, new_start, target)
        self.logger.info(f"Copied '{name}' to '{target.name}' at {format_moment(new_start)}")
        return copy

    def copy_events_on_date(self, source_date: datetime.date, target: 'Calendar',
                            target_date: datetime.date) -> int:
        """
        Copy every event starting on source_date to target_date in another calendar.

        Events copied before a conflict stay in the target.
        """
        source_events = self.events.fetch_starting_on_date(source_date)
        for event in source_events:
            self._copy_into(event, self._shifted_start(event, target_date, target.timezone), target)
        self.logger.info(
            f"Copied {len(source_events)} event(s) from {source_date} to '{target.name}' on {target_date}"
        )
        return len(source_events)

    def copy_events_between_dates(self, start_date: datetime.date, end_date: datetime.date,
                                  target: 'Calendar', target_date: datetime.date) -> int:
        """
        Copy events touching [start_date, end_date] to another calendar.

        Each event moves by the day distance between its own start date and
        target_date. Events copied before a conflict stay in the target.
        """
        range_start = start_of_day(start_date, self._timezone)
        range_end = start_of_day(end_date + datetime.timedelta(days=1), self._timezone)
        source_events = self.events.fetch_in_range(range_start, range_end)

        copied = 0
        for event in source_events:
            self._copy_into(event, self._shifted_start(event, target_date, target.timezone), target)
            copied += 1
        self.logger.info(
            f"Copied {copied} event(s) between {start_date} and {end_date} "
            f"to '{target.name}' on {target_date}"
        )
        return copied

    @staticmethod
    def _shifted_start(event: Event, target_date: datetime.date,
                       target_zone: datetime.tzinfo) -> datetime.datetime:
        """Move the start by whole days in UTC, then express it in the target zone."""
        days = (target_date - event.start.date()).days
        in_utc = event.start.astimezone(pytz.utc) + datetime.timedelta(days=days)
        return in_utc.astimezone(target_zone)

    @staticmethod
    def _copy_into(source: Event, new_start: datetime.datetime, target: 'Calendar') -> Event:
        copy = source.copy_to(new_start, shift(new_start, source.duration()))
        target.events.schedule(copy)
        return copy
