# File: zonecal/models/event.py

from dataclasses import dataclass
from datetime import datetime, timedelta

from .common import format_moment
from .errors import InvalidTimeRange


@dataclass(eq=False)
class Event:
    """A scheduled calendar event with zone-aware start and end instants."""
    name: str
    start: datetime
    end: datetime
    full_day: bool = False
    description: str = ""
    location: str = ""
    public: bool = True

    def __post_init__(self):
        """Validate the time range. Later mutation is not re-validated."""
        if self.end < self.start:
            raise InvalidTimeRange(
                f"End time cannot be before start time: {self.name} "
                f"({format_moment(self.start)} to {format_moment(self.end)})"
            )

    def duration(self) -> timedelta:
        """Exact elapsed time between start and end."""
        return self.end - self.start

    def overlaps_with(self, other: 'Event') -> bool:
        """
        Check if this event conflicts with another.

        Intervals that intersect conflict, and so do events sharing the same
        start instant, even zero-length ones.
        """
        return (
            (self.start < other.end and other.start < self.end)
            or self.start == other.start
        )

    def copy_to(self, start: datetime, end: datetime) -> 'Event':
        """New event at another time, carrying over the descriptive fields."""
        return Event(
            name=self.name,
            start=start,
            end=end,
            full_day=self.full_day,
            description=self.description,
            location=self.location,
            public=self.public,
        )

    def matches(self, name: str, start: datetime, end: datetime) -> bool:
        return self.name == name and self.start == start and self.end == end

    def __str__(self) -> str:
        text = f"{self.name} from {format_moment(self.start)} to {format_moment(self.end)}"
        if self.full_day:
            text += ", Full Day"
        if self.description:
            text += f", Description: {self.description}"
        if self.location:
            text += f", Location: {self.location}"
        text += ", Public" if self.public else ", Private"
        return text
