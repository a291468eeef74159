"""
Collapses busy intervals into a sorted, pairwise disjoint list.
"""

from typing import Iterable, List

from .models import TimeRange


def merge_intervals(intervals: Iterable[TimeRange]) -> List[TimeRange]:
    """
    Merge overlapping or touching time ranges.

    Example: [10:00-12:00, 11:00-13:00, 13:00-14:00] -> [10:00-14:00]
    """
    sorted_ranges = sorted(intervals, key=lambda r: r.start)
    merged: List[TimeRange] = []

    for current in sorted_ranges:
        if merged and current.start <= merged[-1].end:
            last = merged[-1]
            # Touching ranges are merged too, not kept separate
            merged[-1] = TimeRange(
                start=last.start,
                end=max(last.end, current.end)
            )
        else:
            merged.append(current)

    return merged
