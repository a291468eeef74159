"""
Domain models for time range, slot and day-availability calculations.
"""

from dataclasses import dataclass
from datetime import time
from typing import Any, Dict, FrozenSet, Optional, Tuple

import pendulum
from pendulum import Date, DateTime


DEFAULT_TIMEZONE = "America/Los_Angeles"
DEFAULT_WORKING_DAYS: FrozenSet[int] = frozenset({0, 1, 2, 3, 4})  # Monday-Friday


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another (half-open)."""
        return self.start < other.end and self.end > other.start

    def in_timezone(self, timezone: str) -> "TimeRange":
        """Return the same range expressed in another timezone."""
        return TimeRange(
            start=self.start.in_timezone(timezone),
            end=self.end.in_timezone(timezone),
        )

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class WorkingHours:
    """
    Configuration for working hours.
    """
    start_time: time
    end_time: time
    working_days: FrozenSet[int] = DEFAULT_WORKING_DAYS  # 0=Monday, 6=Sunday
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Working hours must start before they end, "
                f"got {self.start_time:%H:%M} - {self.end_time:%H:%M}"
            )
        invalid_days = sorted(day for day in self.working_days if day not in range(7))
        if invalid_days:
            raise ValueError(f"Working days must be between 0 and 6, got {invalid_days}")

    def is_working_day(self, day: Date) -> bool:
        """Check if a given date (or datetime) falls on a working day."""
        return day.weekday() in self.working_days

    def get_working_hours_for_day(self, day: Date) -> TimeRange | None:
        """
        Get the working hours range for a specific day.
        Returns None if it's not a working day.
        """
        if not self.is_working_day(day):
            return None

        # Build wall-clock times so DST transitions keep the configured window
        start = pendulum.datetime(
            day.year, day.month, day.day,
            self.start_time.hour, self.start_time.minute,
            tz=self.timezone,
        )
        end = pendulum.datetime(
            day.year, day.month, day.day,
            self.end_time.hour, self.end_time.minute,
            tz=self.timezone,
        )

        return TimeRange(start=start, end=end)


@dataclass(frozen=True)
class AvailableSlot:
    """
    Represents a found bookable slot of the requested duration.
    """
    time_range: TimeRange
    label: Optional[str] = None

    @property
    def start(self) -> DateTime:
        return self.time_range.start

    @property
    def end(self) -> DateTime:
        return self.time_range.end

    def duration_minutes(self) -> int:
        return self.time_range.duration_minutes()

    @property
    def date_label(self) -> str:
        """Human-readable date, e.g. 'Thursday, March 27, 2025'."""
        if self.label:
            return self.label
        return self.start.format("dddd, MMMM D, YYYY", locale="en")

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, Month D, YYYY | HH:MM - HH:MM (N min)
        """
        time_str = f"{self.start.format('HH:mm')} - {self.end.format('HH:mm')}"
        return f"{self.date_label} | {time_str} ({self.duration_minutes()} min)"

    def to_dict(self) -> Dict[str, Any]:
        """Serializable representation used for JSON output."""
        return {
            "start_time": self.start.to_iso8601_string(),
            "end_time": self.end.to_iso8601_string(),
            "date": self.date_label,
        }


@dataclass(frozen=True)
class DayAvailability:
    """All slots found on one calendar day."""
    date: Date
    slots: Tuple[AvailableSlot, ...]

    @property
    def slot_count(self) -> int:
        return len(self.slots)

    @property
    def total_free_minutes(self) -> int:
        return sum(slot.duration_minutes() for slot in self.slots)


@dataclass(frozen=True)
class BestDaySummary:
    """Summary of the single day offering the most availability."""
    date: Date
    day_name: str
    slot_count: int
    total_hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.to_date_string(),
            "day_name": self.day_name,
            "slot_count": self.slot_count,
            "total_hours": self.total_hours,
        }


@dataclass(frozen=True)
class SearchConfig:
    """
    Normalised input for one availability search.

    Instances are usually produced by ``parsing.build_search_config`` which
    substitutes defaults for missing or malformed values.
    """
    search_start: DateTime
    search_end: DateTime
    working_hours: WorkingHours
    identities: Tuple[str, ...] = ()
    duration_minutes: int = 60
    increment_minutes: int = 15

    @property
    def timezone(self) -> str:
        return self.working_hours.timezone
