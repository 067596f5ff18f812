# File: zonecal/models/recurrence.py
"""
Repeat-rule parsing for recurring events.

A rule is a day selector followed by a termination clause:
    "MWF for 6 times"
    "TR until 2025-04-30T10:00"    (timed series)
    "U until 2025-04-30"           (full-day series)
"""

import datetime
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from dateutil.rrule import MO, TU, WE, TH, FR, SA, SU, weekday

from .common import DATE_FORMAT, DATETIME_FORMAT, localize
from .errors import InvalidDayCode, InvalidRecurrenceRule, InvalidRepeatCount

# Single-letter weekday codes, in week order
DAY_CODES: Dict[str, weekday] = {
    'M': MO,
    'T': TU,
    'W': WE,
    'R': TH,
    'F': FR,
    'S': SA,
    'U': SU,
}

FOR_KEYWORD = "for"
TIMES_KEYWORD = "times"
UNTIL_KEYWORD = "until"


def day_code(day: datetime.date) -> str:
    """Weekday code for a date (M, T, W, R, F, S or U)."""
    return list(DAY_CODES)[day.weekday()]


def parse_day_selector(selector: str, rule: str = "") -> FrozenSet[str]:
    """Validate a day selector such as 'mwf' and return its codes."""
    codes = selector.strip().upper()
    if not codes or codes.lower() in (FOR_KEYWORD, UNTIL_KEYWORD):
        raise InvalidDayCode(
            f"No day code specified in repeat rule '{rule or selector}'. "
            f"Use M, T, W, R, F, S, or U before 'for' or 'until'."
        )
    for code in codes:
        if code not in DAY_CODES:
            raise InvalidDayCode(f"Invalid day code '{code}' in repeat rule '{rule or selector}'")
    return frozenset(codes)


@dataclass(frozen=True)
class RecurrenceRule:
    """Parsed repeat rule: which weekdays, and when the series stops."""
    days: FrozenSet[str]
    count: Optional[int] = None
    until: Optional[str] = None
    text: str = ""

    def __post_init__(self):
        if (self.count is None) == (self.until is None):
            raise InvalidRecurrenceRule(
                f"Repeat rule must have exactly one of 'for' or 'until': '{self.text}'"
            )

    @property
    def weekdays(self) -> List[weekday]:
        """dateutil weekday constants for the selected days, in week order."""
        return [day for code, day in DAY_CODES.items() if code in self.days]

    def matches(self, day: datetime.date) -> bool:
        return day_code(day) in self.days

    def until_bound(self, full_day: bool, zone: datetime.tzinfo) -> datetime.datetime:
        """
        Resolve the 'until' clause to an inclusive instant in the template zone.

        Full-day series take a date and run through 23:59:59 of that day;
        timed series take a date and time.
        """
        if self.until is None:
            raise InvalidRecurrenceRule(f"Repeat rule has no 'until' clause: '{self.text}'")
        try:
            if full_day:
                day = datetime.datetime.strptime(self.until, DATE_FORMAT).date()
                naive = datetime.datetime.combine(day, datetime.time(23, 59, 59))
            else:
                naive = datetime.datetime.strptime(self.until, DATETIME_FORMAT)
        except ValueError:
            expected = "yyyy-MM-dd" if full_day else "yyyy-MM-ddTHH:mm"
            raise InvalidRecurrenceRule(
                f"Invalid 'until' value '{self.until}' in repeat rule '{self.text}' "
                f"(expected {expected})"
            ) from None
        return localize(naive, zone)


def parse_rule(text: str) -> RecurrenceRule:
    """
    Parse a repeat rule string.

    Raises:
        InvalidRecurrenceRule: no 'for'/'until' clause, or wrong token layout
        InvalidRepeatCount: 'for N times' with N <= 0
        InvalidDayCode: missing or unknown day codes
    """
    rule = (text or "").strip()
    tokens = rule.split()
    if len(tokens) < 2:
        raise InvalidRecurrenceRule(f"Invalid repeat format: '{rule}'")

    lowered = [t.lower() for t in tokens]
    count: Optional[int] = None
    until: Optional[str] = None

    if FOR_KEYWORD in lowered:
        idx = lowered.index(FOR_KEYWORD)
        if idx > 1 or len(tokens) != idx + 3 or lowered[idx + 2] != TIMES_KEYWORD:
            raise InvalidRecurrenceRule(f"Expected 'for N times' in repeat rule '{rule}'")
        try:
            count = int(tokens[idx + 1])
        except ValueError:
            raise InvalidRecurrenceRule(
                f"Repeat count '{tokens[idx + 1]}' is not a number in '{rule}'"
            ) from None
        if count <= 0:
            raise InvalidRepeatCount(f"Invalid repeat count: {count} (must be positive)")
    elif UNTIL_KEYWORD in lowered:
        idx = lowered.index(UNTIL_KEYWORD)
        if idx > 1 or len(tokens) != idx + 2:
            raise InvalidRecurrenceRule(f"Expected 'until <date>' in repeat rule '{rule}'")
        until = tokens[idx + 1]
    else:
        raise InvalidRecurrenceRule(f"Repeat rule must include 'for' or 'until' in '{rule}'")

    selector = tokens[0] if idx == 1 else ""
    days = parse_day_selector(selector, rule)
    return RecurrenceRule(days=days, count=count, until=until, text=rule)
