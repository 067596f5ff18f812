# File: zonecal/core/event_manager.py
"""
Event scheduling for a single calendar.
Owns the calendar's events, enforces the no-overlap rule on insertion,
answers date/range/status queries and applies property edits.
"""

import datetime
from typing import List, Optional, Union

from zonecal.core.recurrence_expander import RecurrenceExpander
from zonecal.models.common import format_moment, parse_bool, to_zone
from zonecal.models.enums import EventProperty
from zonecal.models.errors import EventNotFound, InvalidPropertyValue, SchedulingConflict
from zonecal.models.event import Event
from zonecal.models.recurrence import RecurrenceRule
from zonecal.utils.logger import LoggerMixin


class EventManager(LoggerMixin):
    """Keeps one calendar's events sorted by start and free of overlaps."""

    def __init__(self, expander: Optional[RecurrenceExpander] = None):
        """
        Initialize the event manager.

        Args:
            expander: Recurrence expander used for recurring series
        """
        self._events: List[Event] = []
        self.expander = expander or RecurrenceExpander()

    # ------------------------------------------------------------------
    # Creation and scheduling
    # ------------------------------------------------------------------

    def create(self, name: str, start: datetime.datetime, end: datetime.datetime,
               full_day: bool = False) -> Event:
        """Build an event without scheduling it."""
        return Event(name, start, end, full_day)

    def find_conflict(self, event: Event, existing: Optional[List[Event]] = None) -> Optional[Event]:
        """Return the first existing event that overlaps the given one, if any."""
        for other in (self._events if existing is None else existing):
            if event.overlaps_with(other):
                return other
        return None

    def schedule(self, event: Event) -> None:
        """
        Insert an event after checking it against every scheduled event.

        Raises:
            SchedulingConflict: the event overlaps an existing one; nothing is inserted
        """
        conflict = self.find_conflict(event)
        if conflict is not None:
            self.logger.warning(f"Declined '{event.name}': conflicts with '{conflict.name}'")
            raise SchedulingConflict(
                f"Conflict with existing event: {conflict.name}",
                event=event,
                conflicting=conflict,
            )
        self._events.append(event)
        self._events.sort(key=lambda e: e.start)
        self.logger.debug(f"Scheduled {event}")

    def create_recurring(
        self,
        name: str,
        start: datetime.datetime,
        end: datetime.datetime,
        repeat_rule: Union[str, RecurrenceRule],
        full_day: bool = False
    ) -> List[Event]:
        """Expand a recurring series. The instances are not scheduled."""
        return self.expander.expand(name, start, end, repeat_rule, full_day)

    def schedule_recurring(
        self,
        name: str,
        start: datetime.datetime,
        end: datetime.datetime,
        repeat_rule: Union[str, RecurrenceRule],
        full_day: bool = False
    ) -> List[Event]:
        """
        Expand and schedule a recurring series, all or nothing.

        Every instance is checked against the events scheduled before the
        call; if any conflicts, none are scheduled.

        Raises:
            SchedulingConflict: naming the first conflicting pair
        """
        instances = self.create_recurring(name, start, end, repeat_rule, full_day)
        existing = self.retrieve_all()
        for instance in instances:
            conflict = self.find_conflict(instance, existing)
            if conflict is not None:
                self.logger.warning(
                    f"Declined recurring '{name}': instance at {format_moment(instance.start)} "
                    f"conflicts with '{conflict.name}'"
                )
                raise SchedulingConflict(
                    f"Recurring event '{name}' conflicts with '{conflict.name}' "
                    f"at {format_moment(conflict.start)}",
                    event=instance,
                    conflicting=conflict,
                )
        for instance in instances:
            self.schedule(instance)
        return instances

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def retrieve_all(self) -> List[Event]:
        """All events, start-ascending. The list is a copy."""
        return list(self._events)

    def fetch_on_date(self, date: datetime.date) -> List[Event]:
        """Events on a date; timed events spanning the date are included."""
        result = []
        for event in self._events:
            start_date = event.start.date()
            end_date = event.end.date()
            if event.full_day:
                if start_date == date:
                    result.append(event)
            elif start_date <= date <= end_date:
                result.append(event)
        return result

    def fetch_starting_on_date(self, date: datetime.date) -> List[Event]:
        """Events whose start falls on the date."""
        return [e for e in self._events if e.start.date() == date]

    def fetch_in_range(self, start: datetime.datetime, end: datetime.datetime) -> List[Event]:
        """Events touching [start, end], boundaries included."""
        return [e for e in self._events if e.end >= start and e.start <= end]

    def is_occupied_at(self, moment: datetime.datetime) -> bool:
        return any(e.start <= moment < e.end for e in self._events)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def update_single(self, prop: str, name: str, start: datetime.datetime,
                      end: datetime.datetime, new_value: str) -> bool:
        """
        Edit the one event with exactly this name, start and end.

        Returns:
            True if the property was applied, False for unrecognised properties

        Raises:
            EventNotFound: no event matches
        """
        for event in self._events:
            if event.matches(name, start, end):
                return self._apply(event, prop, new_value)
        raise EventNotFound(
            f"Event not found: {name} from {format_moment(start)} to {format_moment(end)}"
        )

    def update_from_start(self, prop: str, name: str, from_moment: datetime.datetime,
                          new_value: str) -> int:
        """Edit every event with this name starting at or after from_moment."""
        count = 0
        for event in self._events:
            if event.name == name and event.start >= from_moment:
                if self._apply(event, prop, new_value):
                    count += 1
        self.logger.debug(f"Updated '{prop}' on {count} '{name}' event(s) from {format_moment(from_moment)}")
        return count

    def update_all_by_name(self, prop: str, name: str, new_value: str) -> int:
        """
        Edit every event with this name.

        Raises:
            InvalidPropertyValue: 'public' with a value other than true/false
        """
        matching = [e for e in self._events if e.name == name]
        if matching and EventProperty.lookup(prop) is EventProperty.PUBLIC \
                and parse_bool(new_value) is None:
            raise InvalidPropertyValue(
                f"Invalid value for 'public': '{new_value}' (must be 'true' or 'false')"
            )
        count = sum(1 for event in matching if self._apply(event, prop, new_value))
        self.logger.debug(f"Updated '{prop}' on {count} '{name}' event(s)")
        return count

    def _apply(self, event: Event, prop: str, new_value: str) -> bool:
        """Set one property. Unknown properties are ignored and report False."""
        field = EventProperty.lookup(prop)
        if field is EventProperty.NAME:
            event.name = new_value
        elif field is EventProperty.DESCRIPTION:
            event.description = new_value
        elif field is EventProperty.LOCATION:
            event.location = new_value
        elif field is EventProperty.PUBLIC:
            event.public = new_value.strip().lower() == 'true'
        else:
            return False
        return True

    # ------------------------------------------------------------------
    # Timezone
    # ------------------------------------------------------------------

    def adjust_timezone(self, old_zone: datetime.tzinfo, new_zone: datetime.tzinfo) -> None:
        """Re-express every event in the new zone, keeping the same instants."""
        for event in self._events:
            event.start = to_zone(event.start, new_zone)
            event.end = to_zone(event.end, new_zone)
        self.logger.debug(f"Re-based {len(self._events)} event(s) from {old_zone} to {new_zone}")
