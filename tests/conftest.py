# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable zones, events and calendars for all tests.
"""

import pytest
from datetime import datetime
from pathlib import Path
import sys

import pytz

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from zonecal.core.calendar import Calendar
from zonecal.core.calendar_manager import CalendarManager
from zonecal.core.event_manager import EventManager
from zonecal.models.event import Event


# ==================== Zone Fixtures ====================

@pytest.fixture
def kolkata():
    """UTC+05:30, no daylight saving."""
    return pytz.timezone("Asia/Kolkata")


@pytest.fixture
def new_york():
    """UTC-05:00 / -04:00 with daylight saving (EDT from 2025-03-09)."""
    return pytz.timezone("America/New_York")


@pytest.fixture
def utc():
    return pytz.utc


# ==================== Datetime Helpers ====================

@pytest.fixture
def at():
    """Factory fixture: localized datetime in a pytz zone."""
    def _at(zone, year, month, day, hour=0, minute=0, second=0) -> datetime:
        return zone.localize(datetime(year, month, day, hour, minute, second))

    return _at


# ==================== Event Fixtures ====================

@pytest.fixture
def make_event(at):
    """Factory fixture for timed events on one day."""
    def _make(name, zone, day, start_hm, end_hm, full_day=False) -> Event:
        year, month, dom = day
        return Event(
            name,
            at(zone, year, month, dom, *start_hm),
            at(zone, year, month, dom, *end_hm),
            full_day,
        )

    return _make


@pytest.fixture
def morning_meeting(make_event, kolkata):
    """Monday 2025-03-24 09:00-10:00 in Kolkata."""
    return make_event("Standup", kolkata, (2025, 3, 24), (9, 0), (10, 0))


@pytest.fixture
def event_manager():
    return EventManager()


# ==================== Calendar Fixtures ====================

@pytest.fixture
def india_calendar():
    return Calendar("India", "Asia/Kolkata")


@pytest.fixture
def us_calendar():
    return Calendar("US", "America/New_York")


@pytest.fixture
def calendar_manager():
    """Manager with two calendars, 'Work' selected."""
    manager = CalendarManager()
    manager.create_calendar("Work", "Asia/Kolkata")
    manager.create_calendar("Home", "America/New_York")
    manager.use_calendar("Work")
    return manager


# ==================== Pytest Markers ====================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
