# File: zonecal/core/recurrence_expander.py
"""
Expands a single-day template and a repeat rule into concrete events.
"""

import datetime
from typing import List, Union

from dateutil.rrule import rrule, WEEKLY

from zonecal.models.common import at_time, start_of_day, to_zone, zone_of, format_moment
from zonecal.models.errors import InvalidRecurrenceTemplate, InvalidTimeRange
from zonecal.models.event import Event
from zonecal.models.recurrence import RecurrenceRule, parse_rule
from zonecal.utils.logger import LoggerMixin

FULL_DAY_START = datetime.time(0, 0, 0)
FULL_DAY_END = datetime.time(23, 59, 59)


class RecurrenceExpander(LoggerMixin):
    """Materializes recurring series. Instances are not conflict-checked here."""

    def expand(
        self,
        name: str,
        start: datetime.datetime,
        end: datetime.datetime,
        repeat_rule: Union[str, RecurrenceRule],
        full_day: bool = False
    ) -> List[Event]:
        """
        Build every instance of a recurring event.

        Args:
            name: Event name shared by all instances
            start: Template start (zone-aware)
            end: Template end, on the same calendar day as start
            repeat_rule: Rule text such as "MW for 4 times" or a parsed rule
            full_day: Whether instances are full-day events

        Returns:
            Instances in chronological order
        """
        zone = zone_of(start)
        end = to_zone(end, zone)
        self._validate_template(name, start, end, full_day)

        rule = repeat_rule if isinstance(repeat_rule, RecurrenceRule) else parse_rule(repeat_rule)

        if full_day:
            start_time, end_time = FULL_DAY_START, FULL_DAY_END
        else:
            start_time, end_time = start.time(), end.time()

        first = datetime.datetime.combine(start.date(), start_time)

        if rule.count is not None:
            days = rrule(WEEKLY, byweekday=rule.weekdays, dtstart=first, count=rule.count)
            instances = [
                Event(name, at_time(day.date(), start_time, zone),
                      at_time(day.date(), end_time, zone), full_day)
                for day in days
            ]
        else:
            bound = rule.until_bound(full_day, zone)
            days = rrule(WEEKLY, byweekday=rule.weekdays, dtstart=first,
                         until=bound.replace(tzinfo=None))
            instances = []
            for day in days:
                instance_start = at_time(day.date(), start_time, zone)
                instance_end = at_time(day.date(), end_time, zone)
                if instance_start > bound or instance_end > bound:
                    break
                instances.append(Event(name, instance_start, instance_end, full_day))

        self.logger.debug(
            f"Expanded '{name}' with rule '{rule.text}' into {len(instances)} instances"
        )
        return instances

    def _validate_template(self, name: str, start: datetime.datetime,
                           end: datetime.datetime, full_day: bool) -> None:
        if end < start:
            raise InvalidTimeRange(
                f"End time '{format_moment(end)}' before start '{format_moment(start)}'"
            )
        if full_day:
            # [00:00, 00:00 next day) still counts as a single day
            next_midnight = start_of_day(start.date() + datetime.timedelta(days=1), zone_of(start))
            single_day = end <= next_midnight
        else:
            single_day = end.date() == start.date()

        if not single_day:
            raise InvalidRecurrenceTemplate(
                f"Recurring event template must span a single day; '{name}' starts "
                f"'{format_moment(start)}' and ends '{format_moment(end)}'"
            )
