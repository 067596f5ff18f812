# File: zonecal/models/common.py
"""
Timezone and date helpers shared by the models and the scheduling core.
All zone handling goes through pytz so that wall-clock times are localized
with the correct offset for their date.
"""

import datetime
from typing import Optional, Union

import pytz

from .errors import InvalidTimezone

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%dT%H:%M"

ZoneLike = Union[str, datetime.tzinfo]


def resolve_timezone(zone: ZoneLike) -> datetime.tzinfo:
    """Turn an IANA zone identifier into a tzinfo, passing tzinfo objects through."""
    if isinstance(zone, datetime.tzinfo):
        return zone
    try:
        return pytz.timezone(str(zone).strip())
    except pytz.UnknownTimeZoneError:
        raise InvalidTimezone(f"Unknown timezone: '{zone}'") from None


def zone_name(zone: datetime.tzinfo) -> str:
    """Readable zone identifier (e.g. 'Asia/Kolkata')."""
    return getattr(zone, 'zone', None) or str(zone)


def zone_of(moment: datetime.datetime) -> datetime.tzinfo:
    """
    Return the zone a datetime was expressed in.

    pytz attaches a per-offset tzinfo to localized datetimes; this maps it
    back to the full zone so that new wall-clock times can be localized.
    """
    name = getattr(moment.tzinfo, 'zone', None)
    if name:
        return pytz.timezone(name)
    return moment.tzinfo


def localize(naive: datetime.datetime, zone: datetime.tzinfo) -> datetime.datetime:
    """
    Attach a zone to a naive wall-clock datetime.

    A repeated wall-clock time (DST ending) takes the earlier offset. A
    skipped one (DST starting) moves forward by the length of the gap,
    so 02:30 on a spring-forward day becomes 03:30.
    """
    if not hasattr(zone, 'localize'):
        return naive.replace(tzinfo=zone)
    try:
        return zone.localize(naive, is_dst=None)
    except pytz.AmbiguousTimeError:
        return zone.localize(naive, is_dst=True)
    except pytz.NonExistentTimeError:
        return zone.normalize(zone.localize(naive, is_dst=False))


def at_time(day: datetime.date, time_of_day: datetime.time,
            zone: datetime.tzinfo) -> datetime.datetime:
    """Wall-clock time on a given day in a zone."""
    return localize(datetime.datetime.combine(day, time_of_day), zone)


def start_of_day(day: datetime.date, zone: datetime.tzinfo) -> datetime.datetime:
    return at_time(day, datetime.time.min, zone)


def to_zone(moment: datetime.datetime, zone: datetime.tzinfo) -> datetime.datetime:
    """Same instant, expressed in another zone."""
    return moment.astimezone(zone)


def shift(moment: datetime.datetime, delta: datetime.timedelta) -> datetime.datetime:
    """Add an exact duration, keeping the result in the original zone."""
    return (moment.astimezone(pytz.utc) + delta).astimezone(zone_of(moment))


def parse_date(text: str) -> datetime.date:
    """Parse 'yyyy-MM-dd'. Raises ValueError on bad input."""
    return datetime.datetime.strptime(text.strip(), DATE_FORMAT).date()


def parse_datetime(text: str) -> datetime.datetime:
    """Parse 'yyyy-MM-ddTHH:mm' into a naive datetime. Raises ValueError on bad input."""
    return datetime.datetime.strptime(text.strip(), DATETIME_FORMAT)


def parse_bool(text: Optional[str]) -> Optional[bool]:
    """Strict boolean parsing: 'true'/'false' in any case, else None."""
    if text is None:
        return None
    lowered = text.strip().lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False
    return None


def format_moment(moment: datetime.datetime) -> str:
    """Render as yyyy-MM-ddTHH:mm[Zone]."""
    return f"{moment.strftime(DATETIME_FORMAT)}[{zone_name(zone_of(moment))}]"
