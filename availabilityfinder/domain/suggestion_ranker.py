"""
Day-level suggestions built from a list of available slots.
"""

from typing import Dict, List, Optional, Sequence

from pendulum import Date

from .models import AvailableSlot, BestDaySummary, DayAvailability


SLOT_COUNT_WEIGHT = 0.8
FREE_MINUTES_WEIGHT = 0.2
POINTS_PER_SLOT = 10


def group_by_day(slots: Sequence[AvailableSlot]) -> List[DayAvailability]:
    """Group slots by the calendar date of their start, in chronological order."""
    by_day: Dict[Date, List[AvailableSlot]] = {}

    for slot in slots:
        by_day.setdefault(slot.start.date(), []).append(slot)

    return [
        DayAvailability(date=day, slots=tuple(day_slots))
        for day, day_slots in sorted(by_day.items())
    ]


def rank_days(slots: Sequence[AvailableSlot]) -> List[DayAvailability]:
    """
    Order days by how much availability they offer.

    Most free minutes first, then most slots, then the earliest date.
    """
    return sorted(
        group_by_day(slots),
        key=lambda day: (-day.total_free_minutes, -day.slot_count, day.date)
    )


def day_score(day: DayAvailability) -> float:
    """Weighted composite of slot count and free minutes."""
    return (
        day.slot_count * POINTS_PER_SLOT * SLOT_COUNT_WEIGHT
        + day.total_free_minutes * FREE_MINUTES_WEIGHT
    )


def best_day(days: Sequence[DayAvailability]) -> Optional[BestDaySummary]:
    """
    Pick the day with the highest score.

    Equal scores resolve to the earliest date. Returns None if no day has slots.
    """
    candidates = [day for day in days if day.slot_count]
    if not candidates:
        return None

    best = max(candidates, key=lambda day: (round(day_score(day), 6), -day.date.toordinal()))

    return BestDaySummary(
        date=best.date,
        day_name=best.date.format("dddd", locale="en"),
        slot_count=best.slot_count,
        total_hours=round(best.total_free_minutes / 60, 1),
    )
