"""
Core business logic for calculating available time slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
from typing import Iterable, List, Sequence

from pendulum import Date, DateTime

from .exceptions import InvalidConfigurationError
from .interval_merger import merge_intervals
from .models import AvailableSlot, TimeRange, WorkingHours

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


def round_up_to_increment(moment: DateTime, increment_minutes: int) -> DateTime:
    """
    Move a moment forward to the next minute-of-day divisible by the increment.

    Moments already on a boundary are returned unchanged. Seconds are never
    kept: a moment such as 09:00:30 first moves on to 09:01.
    """
    if moment.second or moment.microsecond:
        moment = moment.set(second=0, microsecond=0).add(minutes=1)

    remainder = (moment.hour * 60 + moment.minute) % increment_minutes
    if remainder == 0:
        return moment

    return moment.add(minutes=increment_minutes - remainder)


class SlotCalculator:
    """
    Calculates bookable slots of a fixed duration around busy times.

    Algorithm:
    1. Merge all busy times (union of every identity's calendar)
    2. Build one working-hours block per working day, clipped to the search range
    3. Walk each block in increment steps, emitting every slot free of busy time
    4. Return the slots of all days in chronological order
    """

    def __init__(self, working_hours: WorkingHours):
        self.working_hours = working_hours

    def find_available_slots(
        self,
        start_date: DateTime,
        end_date: DateTime,
        busy_times: Iterable[TimeRange],
        duration_minutes: int = 60,
        increment_minutes: int = 15
    ) -> List[AvailableSlot]:
        """
        Find all available slots in the search range.

        Args:
            start_date: Start of the search period
            end_date: End of the search period
            busy_times: Busy time ranges, possibly overlapping
            duration_minutes: Length of every returned slot
            increment_minutes: Alignment of slot starts (minute of day)

        Returns:
            List of AvailableSlot objects in chronological order

        Raises:
            InvalidConfigurationError: If duration or increment is not positive
        """
        if increment_minutes <= 0:
            raise InvalidConfigurationError(
                f"increment_minutes must be greater than zero, got {increment_minutes}"
            )
        if duration_minutes <= 0:
            raise InvalidConfigurationError(
                f"duration_minutes must be greater than zero, got {duration_minutes}"
            )

        # Every increment above a day aligns to midnight only
        increment_minutes = min(increment_minutes, MINUTES_PER_DAY)

        timezone = self.working_hours.timezone
        start_date = start_date.in_timezone(timezone)
        end_date = end_date.in_timezone(timezone)

        merged_busy = merge_intervals(
            busy.in_timezone(timezone) for busy in busy_times
        )

        slots: List[AvailableSlot] = []

        for block in self._get_working_blocks(start_date, end_date):
            overlapping_busy = [
                busy for busy in merged_busy
                if block.overlaps(busy)
            ]
            slots.extend(
                self._slots_in_block(
                    block,
                    overlapping_busy,
                    duration_minutes,
                    increment_minutes
                )
            )

        logger.debug(
            "Found %d slot(s) between %s and %s (%d busy range(s))",
            len(slots), start_date, end_date, len(merged_busy)
        )
        return slots

    def _get_working_blocks(
        self,
        start_date: DateTime,
        end_date: DateTime
    ) -> List[TimeRange]:
        """
        Generate all working hour blocks within the date range.

        Returns a list of TimeRange objects, at most one for each working day.
        """
        blocks: List[TimeRange] = []

        day: Date = start_date.date()
        last_day: Date = end_date.date()

        while day <= last_day:
            working_hours = self.working_hours.get_working_hours_for_day(day)

            if working_hours:
                clipped = self._clip_block_to_bounds(
                    day,
                    working_hours,
                    start_date,
                    end_date
                )
                if clipped:
                    blocks.append(clipped)

            day = day.add(days=1)

        return blocks

    @staticmethod
    def _clip_block_to_bounds(
        day: Date,
        block: TimeRange,
        min_bound: DateTime,
        max_bound: DateTime
    ) -> TimeRange | None:
        """
        Clip a day's working block to the search bounds.

        Returns None when the clipped bounds leave the block's own calendar
        date or when nothing of the block remains.
        """
        clipped_start = max(block.start, min_bound)
        clipped_end = min(block.end, max_bound)

        if clipped_start.date() != day or clipped_end.date() != day:
            return None

        if clipped_start >= clipped_end:
            return None

        return TimeRange(start=clipped_start, end=clipped_end)

    @staticmethod
    def _slots_in_block(
        block: TimeRange,
        busy_ranges: Sequence[TimeRange],
        duration_minutes: int,
        increment_minutes: int
    ) -> List[AvailableSlot]:
        """
        Walk a working block and collect every slot that avoids busy time.

        Example (duration 60, increment 15):
        Working: 08:00 - 12:00
        Busy: [09:30-10:00]
        Result: [08:00-09:00, 10:00-11:00, 11:00-12:00]
        """
        if duration_minutes > block.duration_minutes():
            return []

        slots: List[AvailableSlot] = []
        current = round_up_to_increment(block.start, increment_minutes)

        while current.add(minutes=duration_minutes) <= block.end:
            slot_end = current.add(minutes=duration_minutes)

            conflict = any(
                current < busy.end and slot_end > busy.start
                for busy in busy_ranges
            )

            if conflict:
                current = current.add(minutes=increment_minutes)
                continue

            slots.append(AvailableSlot(time_range=TimeRange(start=current, end=slot_end)))
            current = round_up_to_increment(slot_end, increment_minutes)

        return slots
