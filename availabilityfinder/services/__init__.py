"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_finder import AvailabilityService, BusyIntervalSource, Suggestion

__all__ = ["AvailabilityService", "BusyIntervalSource", "Suggestion"]
