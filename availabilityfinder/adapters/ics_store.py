"""
Calendar store reading busy times from iCalendar (.ics) files.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

import pendulum
from icalendar import Calendar, Event
from pendulum import DateTime

from ..domain.exceptions import CalendarStoreUnavailableError
from ..domain.models import DEFAULT_TIMEZONE, TimeRange

logger = logging.getLogger(__name__)


class IcsCalendarStore:
    """
    Calendar store backed by one .ics file per identity.

    The file for identity ``Krissy`` is ``<directory>/krissy_calendar.ics``.
    Every VEVENT is busy time unless it is transparent or cancelled.
    Recurrence rules are not expanded; only the first occurrence counts.
    """

    FILE_SUFFIX = "_calendar.ics"

    def __init__(self, directory: Path, timezone: str = DEFAULT_TIMEZONE):
        """
        Initialize the store.

        Args:
            directory: Folder holding the calendar files
            timezone: IANA timezone for floating times and all-day events
        """
        self.directory = Path(directory)
        self.timezone = timezone

    def get_ics_file(self, identity: str) -> Path:
        """Path of the calendar file for an identity."""
        return self.directory / f"{identity.strip().lower()}{self.FILE_SUFFIX}"

    def _load_calendar(self, identity: str) -> Calendar:
        ics_file = self.get_ics_file(identity)
        try:
            with open(ics_file, "rb") as f:
                return Calendar.from_ical(f.read())
        except FileNotFoundError as exc:
            raise CalendarStoreUnavailableError(
                f"No calendar found for '{identity}' (expected {ics_file})"
            ) from exc
        except (OSError, ValueError) as exc:
            raise CalendarStoreUnavailableError(
                f"Could not read calendar file {ics_file}: {exc}"
            ) from exc

    def _to_datetime(self, value: date | datetime) -> DateTime:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return pendulum.instance(value, tz=self.timezone)
            return pendulum.instance(value).in_timezone(self.timezone)

        # All-day values start at midnight
        return pendulum.datetime(value.year, value.month, value.day, tz=self.timezone)

    def _event_range(self, event: Event) -> Optional[TimeRange]:
        dtstart = event.get("DTSTART")
        if dtstart is None:
            raise ValueError("event has no DTSTART")

        start_value = dtstart.dt
        start = self._to_datetime(start_value)

        if event.get("DTEND") is not None:
            end = self._to_datetime(event.get("DTEND").dt)
        elif event.get("DURATION") is not None:
            end = start + event.get("DURATION").dt
        elif not isinstance(start_value, datetime):
            end = start.add(days=1)
        else:
            return None

        if end <= start:
            return None
        return TimeRange(start=start, end=end)

    @staticmethod
    def _is_busy(event: Event) -> bool:
        transparency = str(event.get("TRANSP", "OPAQUE")).upper()
        status = str(event.get("STATUS", "CONFIRMED")).upper()
        return transparency != "TRANSPARENT" and status != "CANCELLED"

    def fetch_busy_intervals(self, identity: str) -> List[TimeRange]:
        """
        Read busy times for one calendar identity.

        Raises:
            CalendarStoreUnavailableError: If the file is missing or unparsable
        """
        calendar = self._load_calendar(identity)
        busy_times: List[TimeRange] = []

        for event in calendar.walk("VEVENT"):
            summary = event.get("SUMMARY", "?")
            if not self._is_busy(event):
                continue
            if event.get("RRULE") is not None:
                logger.debug("Not expanding recurrence rule of '%s'", summary)

            try:
                busy_range = self._event_range(event)
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping unparseable event '%s': %s", summary, exc)
                continue

            if busy_range is None:
                logger.warning("Skipping event '%s' without a positive duration", summary)
                continue

            busy_times.append(busy_range)

        logger.debug("Read %d busy range(s) for '%s'", len(busy_times), identity)
        return busy_times
