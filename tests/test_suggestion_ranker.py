"""
Tests for day ranking and best-day selection.
"""

import pendulum

from availabilityfinder.domain.models import AvailableSlot, DayAvailability, TimeRange
from availabilityfinder.domain.suggestion_ranker import best_day, day_score, group_by_day, rank_days

TZ = "America/Los_Angeles"


def slots_on(day: int, count: int, minutes: int, month: int = 3):
    """``count`` back-to-back slots of ``minutes`` starting 08:00 on the given day."""
    start = pendulum.datetime(2025, month, day, 8, 0, tz=TZ)
    return [
        AvailableSlot(
            time_range=TimeRange(
                start=start.add(minutes=i * minutes),
                end=start.add(minutes=(i + 1) * minutes),
            )
        )
        for i in range(count)
    ]


def test_group_by_day_is_chronological():
    slots = slots_on(28, 2, 60) + slots_on(27, 1, 60)

    days = group_by_day(slots)

    assert [day.date for day in days] == [pendulum.date(2025, 3, 27), pendulum.date(2025, 3, 28)]
    assert [day.slot_count for day in days] == [1, 2]


def test_rank_days_orders_by_free_minutes():
    """A fully free day among busy days is suggested first."""
    slots = slots_on(27, 3, 60) + slots_on(28, 2, 60) + slots_on(31, 10, 60) + slots_on(1, 4, 60, month=4)

    ranked = rank_days(slots)

    assert ranked[0].date == pendulum.date(2025, 3, 31)
    assert ranked[0].total_free_minutes == 600
    assert [day.total_free_minutes for day in ranked] == [600, 240, 180, 120]


def test_rank_days_breaks_ties_by_slot_count_then_date():
    slots = slots_on(28, 2, 60) + slots_on(27, 4, 30) + slots_on(31, 2, 60)

    ranked = rank_days(slots)

    assert [day.date.day for day in ranked] == [27, 28, 31]


def test_rank_days_of_nothing_is_empty():
    assert rank_days([]) == []


def test_best_day_uses_weighted_score_not_free_minutes():
    """Eight short slots beat two long slots with more total minutes."""
    many_short = DayAvailability(date=pendulum.date(2025, 3, 27), slots=tuple(slots_on(27, 8, 30)))
    few_long = DayAvailability(date=pendulum.date(2025, 3, 28), slots=tuple(slots_on(28, 2, 130)))

    assert few_long.total_free_minutes > many_short.total_free_minutes
    assert day_score(many_short) == 8 * 10 * 0.8 + 240 * 0.2
    assert day_score(few_long) == 2 * 10 * 0.8 + 260 * 0.2

    summary = best_day(rank_days(list(many_short.slots) + list(few_long.slots)))

    assert summary.date == pendulum.date(2025, 3, 27)
    assert summary.day_name == "Thursday"
    assert summary.slot_count == 8
    assert summary.total_hours == 4.0


def test_best_day_rounds_hours_to_one_decimal():
    summary = best_day(rank_days(slots_on(27, 5, 25)))

    assert summary.total_hours == 2.1  # 125 minutes


def test_best_day_tie_goes_to_earliest_date():
    slots = slots_on(31, 3, 60) + slots_on(27, 3, 60)

    summary = best_day(rank_days(slots))

    assert summary.date == pendulum.date(2025, 3, 27)


def test_best_day_absent_without_slots():
    assert best_day([]) is None
    assert best_day([DayAvailability(date=pendulum.date(2025, 3, 27), slots=())]) is None


def test_best_day_summary_dict():
    summary = best_day(rank_days(slots_on(31, 2, 60)))

    assert summary.to_dict() == {
        "date": "2025-03-31",
        "day_name": "Monday",
        "slot_count": 2,
        "total_hours": 2.0,
    }
