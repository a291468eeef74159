"""
Builds the calendar store selected in the configuration.
"""

from pathlib import Path

from ..config import AppConfig
from ..domain.exceptions import CalendarStoreUnavailableError
from .ics_store import IcsCalendarStore
from .json_store import JsonCalendarStore


def create_calendar_store(config: AppConfig, base_dir: Path):
    """
    Create the configured calendar store.

    Args:
        config: Application configuration
        base_dir: Directory relative store paths are resolved against

    Raises:
        CalendarStoreUnavailableError: If the store type is unknown
    """
    path = config.store.resolve_path(base_dir)

    if config.store.type == "ics":
        return IcsCalendarStore(directory=path, timezone=config.timezone)
    if config.store.type == "json":
        return JsonCalendarStore(path=path, timezone=config.timezone)

    raise CalendarStoreUnavailableError(f"Unknown calendar store type: '{config.store.type}'")
