# File: zonecal/processors/command_processor.py
"""
Command processing module.
Parses one-line text commands and dispatches them to the calendar core.
Results are written through an injected output sink.
"""

import datetime
import re
from typing import Callable, Iterable, List, Optional, Tuple, Union

from zonecal.core.calendar import Calendar
from zonecal.core.calendar_manager import CalendarManager
from zonecal.models.common import format_moment, parse_date, parse_datetime
from zonecal.models.enums import RunMode
from zonecal.models.errors import CalendarError, EventNotFound, InvalidCommand, InvalidTimeRange
from zonecal.models.event import Event
from zonecal.services.csv_service import CsvService
from zonecal.utils.logger import LoggerMixin

OutputSink = Callable[[str], None]

AUTO_DECLINE_FLAG = "--autoDecline"
EXIT_COMMAND = "exit"


def _split(text: str, separator: str, command: str) -> Tuple[str, str]:
    """Split once on a separator, failing with a message naming the missing part."""
    parts = text.split(separator, 1)
    if len(parts) < 2:
        raise InvalidCommand(f"Missing '{separator.strip()}' in '{command}'")
    return parts[0].strip(), parts[1].strip()


def _parse_datetime(text: str) -> datetime.datetime:
    try:
        return parse_datetime(text)
    except ValueError:
        raise InvalidCommand(f"Invalid date/time format: '{text.strip()}' (expected yyyy-MM-ddTHH:mm)") from None


def _parse_date(text: str) -> datetime.date:
    try:
        return parse_date(text)
    except ValueError:
        raise InvalidCommand(f"Invalid date format: '{text.strip()}' (expected yyyy-MM-dd)") from None


def _parse_sanitized_date(text: str) -> datetime.date:
    """Dates in copy commands may carry stray quotes or brackets."""
    return _parse_date(re.sub(r"[^0-9-]", "", text))


class CommandProcessor(LoggerMixin):
    """Turns command lines into calendar operations."""

    def __init__(self, manager: CalendarManager, output: OutputSink,
                 csv_service: Optional[CsvService] = None):
        """
        Initialize the command processor.

        Args:
            manager: Calendar collection the commands operate on
            output: Callable receiving each line of user-facing output
            csv_service: Export/import service
        """
        self.manager = manager
        self.output = output
        self.csv_service = csv_service or CsvService()
        # Longer prefixes first so "edit events" wins over "edit event"
        self._handlers: List[Tuple[str, Callable[[str], None]]] = [
            ("create calendar", self._create_calendar),
            ("edit calendar", self._edit_calendar),
            ("use calendar", self._use_calendar),
            ("create event", self._create_event),
            ("edit events", self._edit_events),
            ("edit event", self._edit_event),
            ("copy events between", self._copy_events_between),
            ("copy events on", self._copy_events_on),
            ("copy event", self._copy_event),
            ("print events on", self._print_events_on),
            ("print events from", self._print_events_in_range),
            ("show status on", self._show_status),
            ("export cal", self._export),
            ("import cal", self._import),
        ]

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def execute(self, command: str) -> None:
        """
        Run a single command.

        Raises:
            CalendarError: the command is invalid or the operation failed
        """
        command = command.strip()
        lowered = command.lower()
        for prefix, handler in self._handlers:
            if lowered.startswith(prefix):
                self.logger.debug(f"Executing '{command}'")
                handler(command)
                return
        raise InvalidCommand(f"Unknown command '{command}'")

    def run(self, lines: Iterable[str], mode: Union[RunMode, str] = RunMode.INTERACTIVE) -> bool:
        """
        Process commands until input ends or 'exit' is read.

        In headless mode the first failing command stops processing.

        Returns:
            False if headless processing stopped on an error, True otherwise
        """
        mode = RunMode(mode)
        if mode is RunMode.INTERACTIVE:
            self.output("Processing interactive input. Type 'exit' to stop.")
        else:
            self.output("Processing headless input.")

        for raw in lines:
            line = raw.strip()
            self.output(f"> {line}")
            if not line:
                self.output("Error: Empty Line, ignored")
                continue
            if line.lower() == EXIT_COMMAND:
                self.output("Exiting.")
                return True
            try:
                self.execute(line)
            except (CalendarError, OSError) as e:
                self.logger.info(f"Command failed: '{line}': {e}")
                self.output(f"Error: {e}")
                if mode is RunMode.HEADLESS:
                    return False
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _current(self) -> Calendar:
        return self.manager.current_calendar()

    def _parse_target(self, clause: str, command: str) -> Tuple[str, str, str]:
        """Split '<source> --target <calendar> to <value>'."""
        source, rest = _split(clause, " --target ", command)
        target_name, target_value = _split(rest, " to ", command)
        return source, target_name, target_value

    def _print_events(self, header: str, empty: str, events: List[Event]) -> None:
        if not events:
            self.output(empty)
            return
        self.output(header)
        for event in events:
            self.output(f" - {event}")

    # ------------------------------------------------------------------
    # Calendars
    # ------------------------------------------------------------------

    def _create_calendar(self, command: str) -> None:
        _, rest = _split(command, " --name ", command)
        name, timezone = _split(rest, " --timezone ", command)
        self.manager.create_calendar(name, timezone)
        self.output(f"Calendar '{name}' created with timezone {timezone}")

    def _edit_calendar(self, command: str) -> None:
        _, rest = _split(command, " --name ", command)
        name, prop_and_value = _split(rest, " --property ", command)
        parts = prop_and_value.split(" ", 1)
        if len(parts) < 2 or not parts[1].strip():
            raise InvalidCommand(f"Missing new property value in '{command}'")
        prop, new_value = parts[0].strip(), parts[1].strip()
        self.manager.edit_calendar(name, prop, new_value)
        self.output(f"Calendar '{name}' updated: {prop} = {new_value}")

    def _use_calendar(self, command: str) -> None:
        _, name = _split(command, " --name ", command)
        self.manager.use_calendar(name)
        self.output(f"Using calendar: {name}")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _create_event(self, command: str) -> None:
        calendar = self._current()
        cleaned = command.replace(AUTO_DECLINE_FLAG, "").strip()
        body = cleaned[len("create event"):]

        if " from " in body:
            name, details = _split(body, " from ", command)
            if " to " in details:
                start_raw, end_details = _split(details, " to ", command)
                if " repeats " in end_details.lower():
                    end_raw, rule = re.split(r" repeats ", end_details, maxsplit=1, flags=re.IGNORECASE)
                    start = calendar.localize(_parse_datetime(start_raw))
                    end = calendar.localize(_parse_datetime(end_raw))
                    instances = calendar.events.schedule_recurring(name, start, end, rule.strip(), False)
                    self.output(f"Recurring event created: {len(instances)} instances")
                else:
                    start = calendar.localize(_parse_datetime(start_raw))
                    end = calendar.localize(_parse_datetime(end_details))
                    self._schedule_one(calendar, name, start, end, False)
            else:
                start_naive = _parse_datetime(details)
                end_naive = datetime.datetime.combine(
                    start_naive.date() + datetime.timedelta(days=1), datetime.time.min
                )
                self._schedule_one(calendar, name, calendar.localize(start_naive),
                                   calendar.localize(end_naive), True)
        elif " on " in body:
            name, details = _split(body, " on ", command)
            if " repeats " in details.lower():
                date_raw, rule = re.split(r" repeats ", details, maxsplit=1, flags=re.IGNORECASE)
                start, end = self._full_day_bounds(calendar, _parse_date(date_raw))
                instances = calendar.events.schedule_recurring(name, start, end, rule.strip(), True)
                self.output(f"Recurring all-day event created: {len(instances)} instances")
            else:
                start, end = self._full_day_bounds(calendar, _parse_date(details))
                self._schedule_one(calendar, name, start, end, True)
        else:
            raise InvalidCommand(f"Must include 'from' or 'on' in '{command}'")

    @staticmethod
    def _full_day_bounds(calendar: Calendar, day: datetime.date) -> Tuple[datetime.datetime, datetime.datetime]:
        start = calendar.localize(datetime.datetime.combine(day, datetime.time.min))
        end = calendar.localize(datetime.datetime.combine(day + datetime.timedelta(days=1), datetime.time.min))
        return start, end

    def _schedule_one(self, calendar: Calendar, name: str, start: datetime.datetime,
                      end: datetime.datetime, full_day: bool) -> None:
        event = calendar.events.create(name, start, end, full_day)
        calendar.events.schedule(event)
        self.output(f"Event created: {event}")

    def _edit_event(self, command: str) -> None:
        self._handle_edit(command, "edit event", multiple=False)

    def _edit_events(self, command: str) -> None:
        self._handle_edit(command, "edit events", multiple=True)

    def _handle_edit(self, command: str, prefix: str, multiple: bool) -> None:
        calendar = self._current()
        details = command[len(prefix):].strip()

        if " with " in details:
            criteria, new_value = _split(details, " with ", command)
        else:
            parts = details.split(" ", 2)
            if len(parts) < 3:
                raise InvalidCommand(f"Invalid format in '{command}': missing new value")
            criteria, new_value = f"{parts[0]} {parts[1]}", parts[2]

        if " from " in criteria:
            prop_and_name, time_range = _split(criteria, " from ", command)
            prop, _, name = prop_and_name.partition(" ")
            name = name.strip()
            if multiple:
                start = calendar.localize(_parse_datetime(time_range))
                count = calendar.events.update_from_start(prop, name, start, new_value)
            else:
                if " to " not in time_range:
                    raise InvalidCommand(f"Single edit requires 'to' in '{command}'")
                start_raw, end_raw = _split(time_range, " to ", command)
                start = calendar.localize(_parse_datetime(start_raw))
                end = calendar.localize(_parse_datetime(end_raw))
                if end < start:
                    raise InvalidTimeRange(f"End time '{end_raw}' before start '{start_raw}'")
                count = 1 if calendar.events.update_single(prop, name, start, end, new_value) else 0
        else:
            prop, _, name = criteria.partition(" ")
            count = calendar.events.update_all_by_name(prop, name.strip(), new_value)

        if count == 0:
            raise EventNotFound("Event not found")
        self.output(f'{count} event(s) property "{prop}" updated with "{new_value}"')

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _print_events_on(self, command: str) -> None:
        calendar = self._current()
        _, date_raw = _split(command, " on ", command)
        day = _parse_date(date_raw)
        self._print_events(f"Events on {day}:", f"No events on {day}",
                           calendar.events.fetch_on_date(day))

    def _print_events_in_range(self, command: str) -> None:
        calendar = self._current()
        _, range_raw = _split(command, " from ", command)
        start_raw, end_raw = _split(range_raw, " to ", command)
        start = calendar.localize(_parse_datetime(start_raw))
        end = calendar.localize(_parse_datetime(end_raw))
        if end < start:
            raise InvalidTimeRange(f"End time '{end_raw}' before start '{start_raw}'")
        span = f"{format_moment(start)} and {format_moment(end)}"
        self._print_events(f"Events between {span}:", f"No events between {span}",
                           calendar.events.fetch_in_range(start, end))

    def _show_status(self, command: str) -> None:
        calendar = self._current()
        _, moment_raw = _split(command, " on ", command)
        moment = calendar.localize(_parse_datetime(moment_raw))
        status = "Busy" if calendar.events.is_occupied_at(moment) else "Available"
        self.output(f"Status at {format_moment(moment)}: {status}")

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------

    def _copy_event(self, command: str) -> None:
        source = self._current()
        head, clause = _split(command, " on ", command)
        name = head[len("copy event"):].strip()
        source_raw, target_name, target_raw = self._parse_target(clause, command)
        target = self.manager.get_calendar(target_name)
        source.copy_single_event(name, _parse_datetime(source_raw), target, _parse_datetime(target_raw))
        self.output(f"Event '{name}' copied to {target_name} at {target_raw}")

    def _copy_events_on(self, command: str) -> None:
        source = self._current()
        _, clause = _split(command, " on ", command)
        source_raw, target_name, target_raw = self._parse_target(clause, command)
        source_date = _parse_sanitized_date(source_raw)
        target_date = _parse_sanitized_date(target_raw)
        target = self.manager.get_calendar(target_name)
        count = source.copy_events_on_date(source_date, target, target_date)
        self.output(f"{count} events copied from {source_date} to {target_name} on {target_date}")

    def _copy_events_between(self, command: str) -> None:
        source = self._current()
        _, clause = _split(command, " between ", command)
        start_raw, rest = _split(clause, " and ", command)
        end_raw, target_name, target_raw = self._parse_target(rest, command)
        start_date = _parse_sanitized_date(start_raw)
        end_date = _parse_sanitized_date(end_raw)
        target_date = _parse_sanitized_date(target_raw)
        target = self.manager.get_calendar(target_name)
        count = source.copy_events_between_dates(start_date, end_date, target, target_date)
        self.output(
            f"{count} events copied from {start_date} to {end_date} to {target_name} on {target_date}"
        )

    # ------------------------------------------------------------------
    # CSV
    # ------------------------------------------------------------------

    def _csv_file_name(self, command: str) -> str:
        tokens = command.split(" ", 2)
        if len(tokens) < 3 or not tokens[2].strip():
            raise InvalidCommand(f"Missing filename in '{command}'")
        file_name = tokens[2].strip()
        if not file_name.endswith(".csv"):
            raise InvalidCommand("Filename must end with '.csv'")
        return file_name

    def _export(self, command: str) -> None:
        calendar = self._current()
        path = self.csv_service.export_events(calendar.events.retrieve_all(), self._csv_file_name(command))
        self.output(f"Exported to CSV: {path}")
        self.output("Note: Adjust your Google Calendar timezone to match to the calendar being used.")

    def _import(self, command: str) -> None:
        calendar = self._current()
        count = self.csv_service.import_events(calendar, self._csv_file_name(command))
        self.output(f"Imported {count} event(s) into {calendar.name}")
