"""
Calendar store reading busy times from a JSON events file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pendulum
from pendulum import DateTime

from ..domain.exceptions import CalendarStoreUnavailableError
from ..domain.models import DEFAULT_TIMEZONE, TimeRange

logger = logging.getLogger(__name__)


class JsonCalendarStore:
    """
    Calendar store backed by a JSON file of events.

    The file holds a list of events, each with the calendar it belongs to:

        [{"calendarId": "krissy", "start": "2025-03-28T09:00:00", "end": "..."}]

    Times without an offset are read in the store's timezone.
    """

    def __init__(self, path: Path, timezone: str = DEFAULT_TIMEZONE):
        """
        Initialize the store.

        Args:
            path: Path to the JSON events file
            timezone: IANA timezone for times without an offset
        """
        self.path = Path(path)
        self.timezone = timezone

    def _load_events(self) -> List[Dict[str, Any]]:
        """Load events from the JSON file."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                events = json.load(f)
        except FileNotFoundError as exc:
            raise CalendarStoreUnavailableError(f"Calendar file not found: {self.path}") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise CalendarStoreUnavailableError(f"Could not read calendar file {self.path}: {exc}") from exc

        if not isinstance(events, list):
            raise CalendarStoreUnavailableError(
                f"Calendar file {self.path} must contain a list of events."
            )
        return events

    def _parse_datetime(self, value: str) -> DateTime:
        parsed = pendulum.parse(value, tz=self.timezone)
        if not isinstance(parsed, DateTime):
            raise ValueError(f"Could not parse datetime: {value}")
        return parsed.in_timezone(self.timezone)

    def fetch_busy_intervals(self, identity: str) -> List[TimeRange]:
        """
        Load busy times for one calendar identity.

        Args:
            identity: Calendar id (matched case-insensitively)

        Returns:
            List of busy TimeRange objects

        Raises:
            CalendarStoreUnavailableError: If the file is missing or malformed
        """
        busy_times: List[TimeRange] = []

        for event in self._load_events():
            if not isinstance(event, dict):
                logger.warning("Skipping malformed event entry in %s: %r", self.path, event)
                continue
            if str(event.get("calendarId", "")).lower() != identity.lower():
                continue

            try:
                busy_times.append(
                    TimeRange(
                        start=self._parse_datetime(event["start"]),
                        end=self._parse_datetime(event["end"]),
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid event for '%s': %s", identity, exc)
                continue

        return busy_times
