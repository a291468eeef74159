"""
Application services for finding bookable slots and day suggestions.

The service coordinates fetching busy times via a calendar store adapter and
delegates the actual availability calculation to the domain-level
``SlotCalculator`` and suggestion ranker. This keeps the CLI thin and improves
testability by allowing the calendar dependency to be swapped via a simple
protocol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from ..domain.exceptions import MissingIdentityError
from ..domain.interval_merger import merge_intervals
from ..domain.models import (
    AvailableSlot,
    BestDaySummary,
    DayAvailability,
    SearchConfig,
    TimeRange,
)
from ..domain.slot_calculator import SlotCalculator
from ..domain import suggestion_ranker

logger = logging.getLogger(__name__)


class BusyIntervalSource(Protocol):
    """Protocol describing the calendar store behaviour needed by the service."""

    def fetch_busy_intervals(self, identity: str) -> List[TimeRange]:
        """Return busy time ranges for one calendar identity."""


@dataclass(frozen=True)
class Suggestion:
    """Result of a full search: slots, ranked days and the best day."""
    slots: List[AvailableSlot]
    days: List[DayAvailability]
    best_day: Optional[BestDaySummary]


class AvailabilityService:
    """
    Orchestrates busy-time retrieval, slot calculation and ranking.

    Dependency inversion toward a protocol makes it easy to plug in a file
    backed calendar store or a fixed in-memory one in tests.
    """

    def __init__(self, calendar_store: BusyIntervalSource) -> None:
        self._calendar_store = calendar_store

    def fetch_busy_intervals(
        self,
        identities: Sequence[str],
        timezone: str,
    ) -> List[TimeRange]:
        """
        Fetch and merge the busy times of all identities.

        Busy time is unioned across identities: a slot is only free when every
        identity is free.

        Raises:
            MissingIdentityError: If no identity is given
            CalendarStoreUnavailableError: Propagated from the store unchanged
        """
        if not identities:
            raise MissingIdentityError("At least one calendar identity is required.")

        busy: List[TimeRange] = []
        for identity in identities:
            ranges = self._calendar_store.fetch_busy_intervals(identity)
            logger.debug("Calendar '%s' has %d busy range(s)", identity, len(ranges))
            busy.extend(busy_range.in_timezone(timezone) for busy_range in ranges)

        return merge_intervals(busy)

    def compute_available_slots(self, config: SearchConfig) -> List[AvailableSlot]:
        """Retrieve busy data for the configured identities and compute slots."""
        busy_times = self.fetch_busy_intervals(config.identities, config.timezone)

        calculator = SlotCalculator(working_hours=config.working_hours)
        return calculator.find_available_slots(
            start_date=config.search_start,
            end_date=config.search_end,
            busy_times=busy_times,
            duration_minutes=config.duration_minutes,
            increment_minutes=config.increment_minutes,
        )

    @staticmethod
    def rank_days(slots: Sequence[AvailableSlot]) -> List[DayAvailability]:
        """Group slots by day, most free time first."""
        return suggestion_ranker.rank_days(slots)

    @staticmethod
    def best_day(ranked_days: Sequence[DayAvailability]) -> Optional[BestDaySummary]:
        """Summarise the highest-scoring day, if any."""
        return suggestion_ranker.best_day(ranked_days)

    def suggest(self, config: SearchConfig) -> Suggestion:
        """Compute slots, ranked days and the best day in one call."""
        slots = self.compute_available_slots(config)
        days = self.rank_days(slots)
        return Suggestion(slots=slots, days=days, best_day=self.best_day(days))
