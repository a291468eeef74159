"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    AvailabilityError,
    CalendarStoreUnavailableError,
    InvalidConfigurationError,
    MissingIdentityError,
)
from .interval_merger import merge_intervals
from .models import (
    AvailableSlot,
    BestDaySummary,
    DayAvailability,
    SearchConfig,
    TimeRange,
    WorkingHours,
)
from .parsing import build_search_config, parse_or_default
from .slot_calculator import SlotCalculator, round_up_to_increment
from .suggestion_ranker import best_day, rank_days

__all__ = [
    "AvailabilityError",
    "CalendarStoreUnavailableError",
    "InvalidConfigurationError",
    "MissingIdentityError",
    "merge_intervals",
    "AvailableSlot",
    "BestDaySummary",
    "DayAvailability",
    "SearchConfig",
    "TimeRange",
    "WorkingHours",
    "build_search_config",
    "parse_or_default",
    "SlotCalculator",
    "round_up_to_increment",
    "best_day",
    "rank_days",
]
