"""
Adapters layer - Calendar stores supplying busy times.
"""

from .ics_store import IcsCalendarStore
from .json_store import JsonCalendarStore
from .memory_store import InMemoryCalendarStore
from .store_factory import create_calendar_store

__all__ = ["IcsCalendarStore", "JsonCalendarStore", "InMemoryCalendarStore", "create_calendar_store"]
