# File: tests/unit/test_event_manager.py
"""
Unit tests for EventManager: scheduling, queries, edits and timezone re-basing.
"""

import pytest
from datetime import date, timedelta

from zonecal.models.errors import EventNotFound, InvalidPropertyValue, SchedulingConflict
from zonecal.models.event import Event


# ==================== Scheduling ====================

class TestScheduling:
    """Tests for conflict-checked insertion."""

    def test_events_kept_sorted(self, event_manager, make_event, kolkata):
        late = make_event("Late", kolkata, (2025, 3, 24), (15, 0), (16, 0))
        early = make_event("Early", kolkata, (2025, 3, 24), (8, 0), (9, 0))

        event_manager.schedule(late)
        event_manager.schedule(early)

        assert [e.name for e in event_manager.retrieve_all()] == ["Early", "Late"]

    def test_conflict_rejected(self, event_manager, morning_meeting, make_event, kolkata):
        event_manager.schedule(morning_meeting)
        clash = make_event("Clash", kolkata, (2025, 3, 24), (9, 30), (11, 0))

        with pytest.raises(SchedulingConflict, match="Standup") as exc_info:
            event_manager.schedule(clash)

        assert exc_info.value.conflicting is morning_meeting
        assert exc_info.value.event is clash
        assert event_manager.retrieve_all() == [morning_meeting]

    def test_conflict_across_zones(self, event_manager, morning_meeting, at, utc):
        """09:00-10:00 IST is 03:30-04:30 UTC."""
        event_manager.schedule(morning_meeting)
        other = Event("Call", at(utc, 2025, 3, 24, 4), at(utc, 2025, 3, 24, 5), False)

        with pytest.raises(SchedulingConflict):
            event_manager.schedule(other)

    def test_adjacent_events_allowed(self, event_manager, morning_meeting, make_event, kolkata):
        event_manager.schedule(morning_meeting)
        event_manager.schedule(make_event("Next", kolkata, (2025, 3, 24), (10, 0), (11, 0)))

        assert len(event_manager.retrieve_all()) == 2

    def test_retrieve_all_returns_copy(self, event_manager, morning_meeting):
        event_manager.schedule(morning_meeting)
        events = event_manager.retrieve_all()
        events.clear()

        assert len(event_manager.retrieve_all()) == 1

    def test_create_does_not_schedule(self, event_manager, at, kolkata):
        event = event_manager.create("Draft", at(kolkata, 2025, 3, 24, 9), at(kolkata, 2025, 3, 24, 10))

        assert event.name == "Draft"
        assert event_manager.retrieve_all() == []


class TestRecurringScheduling:
    """Tests for all-or-nothing recurring insertion."""

    def test_schedule_recurring(self, event_manager, at, kolkata):
        instances = event_manager.schedule_recurring(
            "Standup", at(kolkata, 2025, 3, 24, 9), at(kolkata, 2025, 3, 24, 10), "M for 3 times"
        )

        assert len(instances) == 3
        assert event_manager.retrieve_all() == instances

    def test_conflict_schedules_nothing(self, event_manager, make_event, at, kolkata):
        blocker = make_event("Dentist", kolkata, (2025, 3, 31), (9, 30), (10, 30))
        event_manager.schedule(blocker)

        with pytest.raises(SchedulingConflict, match="Dentist"):
            event_manager.schedule_recurring(
                "Standup", at(kolkata, 2025, 3, 24, 9), at(kolkata, 2025, 3, 24, 10),
                "M for 3 times"
            )

        assert event_manager.retrieve_all() == [blocker]

    def test_create_recurring_does_not_schedule(self, event_manager, at, kolkata):
        instances = event_manager.create_recurring(
            "Standup", at(kolkata, 2025, 3, 24, 9), at(kolkata, 2025, 3, 24, 10), "M for 2 times"
        )

        assert len(instances) == 2
        assert event_manager.retrieve_all() == []


# ==================== Queries ====================

class TestQueries:
    """Tests for date, range and status queries."""

    def test_fetch_on_date_includes_spanning_event(self, event_manager, at, kolkata):
        overnight = Event("Flight", at(kolkata, 2025, 3, 24, 22), at(kolkata, 2025, 3, 25, 2), False)
        event_manager.schedule(overnight)

        assert event_manager.fetch_on_date(date(2025, 3, 24)) == [overnight]
        assert event_manager.fetch_on_date(date(2025, 3, 25)) == [overnight]
        assert event_manager.fetch_on_date(date(2025, 3, 26)) == []

    def test_fetch_on_date_full_day_only_on_start_date(self, event_manager, at, kolkata):
        holiday = Event("Holiday", at(kolkata, 2025, 3, 24), at(kolkata, 2025, 3, 25), True)
        event_manager.schedule(holiday)

        assert event_manager.fetch_on_date(date(2025, 3, 24)) == [holiday]
        assert event_manager.fetch_on_date(date(2025, 3, 25)) == []

    def test_fetch_starting_on_date(self, event_manager, at, kolkata, morning_meeting):
        overnight = Event("Flight", at(kolkata, 2025, 3, 23, 22), at(kolkata, 2025, 3, 24, 2), False)
        event_manager.schedule(overnight)
        event_manager.schedule(morning_meeting)

        assert event_manager.fetch_starting_on_date(date(2025, 3, 24)) == [morning_meeting]

    def test_fetch_in_range_boundaries_inclusive(self, event_manager, morning_meeting, at, kolkata):
        event_manager.schedule(morning_meeting)

        assert event_manager.fetch_in_range(
            at(kolkata, 2025, 3, 24, 10), at(kolkata, 2025, 3, 24, 11)
        ) == [morning_meeting]
        assert event_manager.fetch_in_range(
            at(kolkata, 2025, 3, 24, 8), at(kolkata, 2025, 3, 24, 9)
        ) == [morning_meeting]
        assert event_manager.fetch_in_range(
            at(kolkata, 2025, 3, 24, 10, 1), at(kolkata, 2025, 3, 24, 11)
        ) == []

    def test_is_occupied_at(self, event_manager, morning_meeting, at, kolkata):
        event_manager.schedule(morning_meeting)

        assert event_manager.is_occupied_at(at(kolkata, 2025, 3, 24, 9)) is True
        assert event_manager.is_occupied_at(at(kolkata, 2025, 3, 24, 9, 59)) is True
        assert event_manager.is_occupied_at(at(kolkata, 2025, 3, 24, 10)) is False
        assert event_manager.is_occupied_at(at(kolkata, 2025, 3, 24, 8, 59)) is False


# ==================== Edits ====================

class TestUpdates:
    """Tests for property edits."""

    def test_update_single(self, event_manager, morning_meeting):
        event_manager.schedule(morning_meeting)

        assert event_manager.update_single(
            "location", "Standup", morning_meeting.start, morning_meeting.end, "Room 4"
        ) is True
        assert morning_meeting.location == "Room 4"

    def test_update_single_property_case_insensitive(self, event_manager, morning_meeting):
        event_manager.schedule(morning_meeting)

        event_manager.update_single(
            "Description", "Standup", morning_meeting.start, morning_meeting.end, "Daily"
        )
        assert morning_meeting.description == "Daily"

    def test_update_single_unknown_property(self, event_manager, morning_meeting):
        event_manager.schedule(morning_meeting)

        assert event_manager.update_single(
            "colour", "Standup", morning_meeting.start, morning_meeting.end, "red"
        ) is False

    def test_update_single_not_found(self, event_manager, morning_meeting):
        event_manager.schedule(morning_meeting)

        with pytest.raises(EventNotFound):
            event_manager.update_single(
                "name", "Standup", morning_meeting.start,
                morning_meeting.end + timedelta(minutes=1), "Sync"
            )

    def test_update_single_public_lenient(self, event_manager, morning_meeting):
        """Anything other than 'true' makes the event private."""
        event_manager.schedule(morning_meeting)

        event_manager.update_single("public", "Standup", morning_meeting.start, morning_meeting.end, "yes")
        assert morning_meeting.public is False

    def test_update_from_start(self, event_manager, at, kolkata):
        instances = event_manager.schedule_recurring(
            "Standup", at(kolkata, 2025, 3, 24, 9), at(kolkata, 2025, 3, 24, 10), "M for 3 times"
        )

        count = event_manager.update_from_start("location", "Standup", instances[1].start, "Room 7")

        assert count == 2
        assert [e.location for e in instances] == ["", "Room 7", "Room 7"]

    def test_update_all_by_name(self, event_manager, at, kolkata):
        instances = event_manager.schedule_recurring(
            "Standup", at(kolkata, 2025, 3, 24, 9), at(kolkata, 2025, 3, 24, 10), "M for 3 times"
        )

        assert event_manager.update_all_by_name("public", "Standup", "FALSE") == 3
        assert all(e.public is False for e in instances)

    def test_update_all_by_name_rejects_non_boolean_public(self, event_manager, morning_meeting):
        event_manager.schedule(morning_meeting)

        with pytest.raises(InvalidPropertyValue):
            event_manager.update_all_by_name("public", "Standup", "maybe")
        assert morning_meeting.public is True

    def test_update_all_by_name_no_match(self, event_manager, morning_meeting):
        event_manager.schedule(morning_meeting)
        assert event_manager.update_all_by_name("public", "Nobody", "maybe") == 0

    def test_rename(self, event_manager, morning_meeting):
        event_manager.schedule(morning_meeting)
        event_manager.update_all_by_name("name", "Standup", "Sync")

        assert morning_meeting.name == "Sync"


# ==================== Timezone ====================

class TestAdjustTimezone:
    """Tests for re-expressing events in another zone."""

    def test_instants_preserved(self, event_manager, morning_meeting, kolkata, new_york, at):
        event_manager.schedule(morning_meeting)
        before = morning_meeting.start

        event_manager.adjust_timezone(kolkata, new_york)

        assert morning_meeting.start == before
        assert morning_meeting.start.tzinfo.zone == "America/New_York"
        assert morning_meeting.start.replace(tzinfo=None).isoformat() == "2025-03-23T23:30:00"
        assert morning_meeting.start.utcoffset() == timedelta(hours=-4)
        assert morning_meeting.end == at(new_york, 2025, 3, 24, 0, 30)
