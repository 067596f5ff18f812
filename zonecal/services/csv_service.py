# File: zonecal/services/csv_service.py
"""
CSV export and import in the Google Calendar import layout.
"""

import csv
import datetime
from pathlib import Path
from typing import List, Union

from zonecal.core.calendar import Calendar
from zonecal.core.config_manager import Config
from zonecal.models.common import parse_bool
from zonecal.models.errors import InvalidCsvRow
from zonecal.models.event import Event
from zonecal.utils.logger import setup_logger

logger = setup_logger(__name__)

PathLike = Union[str, Path]


class CsvService:
    """Writes a calendar's events to CSV and reads them back."""

    def __init__(self, export_dir: PathLike = None):
        """
        Initialize the CSV service.

        Args:
            export_dir: Directory that relative file names resolve against
        """
        self.export_dir = Path(export_dir) if export_dir is not None else Config.EXPORT_DIR

    def resolve(self, file_name: PathLike) -> Path:
        path = Path(file_name)
        return path if path.is_absolute() else self.export_dir / path

    def event_to_row(self, event: Event) -> List[str]:
        """One CSV row; full-day events leave the time columns empty."""
        name = event.name.strip('"')
        private = "False" if event.public else "True"
        start_date = event.start.strftime(Config.CSV_DATE_FORMAT)
        if event.full_day:
            return [name, start_date, "", start_date, "", "True",
                    event.description, event.location, private]
        return [
            name,
            start_date,
            event.start.strftime(Config.CSV_TIME_FORMAT),
            event.end.strftime(Config.CSV_DATE_FORMAT),
            event.end.strftime(Config.CSV_TIME_FORMAT),
            "False",
            event.description,
            event.location,
            private,
        ]

    def export_events(self, events: List[Event], file_name: PathLike) -> Path:
        """
        Write events to a CSV file.

        Returns:
            Absolute path of the written file
        """
        path = self.resolve(file_name)
        with open(path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.writer(f, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
            writer.writerow(Config.CSV_HEADER)
            for event in events:
                writer.writerow(self.event_to_row(event))
        path = path.resolve()
        logger.info(f"Exported {len(events)} event(s) to {path}")
        return path

    def row_to_event(self, row: List[str], calendar: Calendar) -> Event:
        """Build an event from a CSV row, reading times in the calendar's zone."""
        name, start_date_raw, start_time_raw, end_date_raw, end_time_raw = row[:5]
        full_day = parse_bool(row[5]) is True
        description, location = row[6], row[7]
        private = parse_bool(row[8]) is True
        try:
            start_date = datetime.datetime.strptime(start_date_raw, Config.CSV_DATE_FORMAT).date()
            end_date = datetime.datetime.strptime(end_date_raw, Config.CSV_DATE_FORMAT).date()
            if full_day:
                start = calendar.localize(datetime.datetime.combine(start_date, datetime.time.min))
                end = calendar.localize(datetime.datetime.combine(end_date, datetime.time(23, 59)))
            else:
                start_time = datetime.datetime.strptime(start_time_raw, Config.CSV_TIME_FORMAT).time()
                end_time = datetime.datetime.strptime(end_time_raw, Config.CSV_TIME_FORMAT).time()
                start = calendar.localize(datetime.datetime.combine(start_date, start_time))
                end = calendar.localize(datetime.datetime.combine(end_date, end_time))
        except ValueError as e:
            raise InvalidCsvRow(f"Invalid date/time in row for '{name}': {e}") from None

        event = calendar.events.create(name, start, end, full_day)
        event.description = description
        event.location = location
        event.public = not private
        return event

    def import_events(self, calendar: Calendar, file_name: PathLike) -> int:
        """
        Schedule every row of a CSV file into a calendar.

        Rows with fewer than nine columns are skipped. Rows imported before a
        conflict stay in the calendar.

        Raises:
            InvalidCsvRow: the file is not UTF-8 CSV, or a row has bad dates

        Returns:
            Number of events imported
        """
        path = self.resolve(file_name)
        count = 0
        with open(path, 'r', encoding='utf-8', newline='') as f:
            reader = csv.reader(f)
            try:
                next(reader, None)  # header
                for row in reader:
                    if len(row) < len(Config.CSV_HEADER):
                        logger.debug(f"Skipping short CSV row: {row}")
                        continue
                    calendar.events.schedule(self.row_to_event(row, calendar))
                    count += 1
            except (UnicodeDecodeError, csv.Error) as e:
                logger.warning(f"Unreadable CSV file {path}: {e}")
                raise InvalidCsvRow(
                    f"Cannot read CSV file '{path.name}' near line {reader.line_num + 1}: {e}"
                ) from None
        logger.info(f"Imported {count} event(s) from {path} into '{calendar.name}'")
        return count
