"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import List, Literal, Sequence

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import InvalidConfigurationError, MissingIdentityError
from .domain.models import DEFAULT_TIMEZONE
from .domain.parsing import validate_timezone


def _parse_clock(value: str) -> time:
    hour, minute = value.split(":")
    return time(hour=int(hour), minute=int(minute))


class DefaultsConfig(BaseModel):
    """Default settings for search."""
    duration_minutes: int = 60
    increment_minutes: int = 15
    start_time: str = "08:00"
    end_time: str = "18:00"
    search_days: int = 7

    @field_validator("duration_minutes", "increment_minutes", "search_days")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations and ranges are positive."""
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Validate 'HH:MM' time of day."""
        try:
            _parse_clock(value)
        except ValueError as exc:
            raise ValueError(f"Time must be given as HH:MM, got '{value}'") from exc
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DefaultsConfig":
        """Ensure the configured window opens before it closes."""
        if self.get_end_time() <= self.get_start_time():
            raise ValueError("end_time must be later than start_time")
        return self

    def get_start_time(self) -> time:
        """Get start time as time object."""
        return _parse_clock(self.start_time)

    def get_end_time(self) -> time:
        """Get end time as time object."""
        return _parse_clock(self.end_time)


class CalendarIdentity(BaseModel):
    """A calendar whose busy times can be looked up."""
    name: str  # Used as alias
    calendar_id: str = ""  # Optional: id used inside the calendar store

    def source_id(self) -> str:
        """Identifier used when reading the calendar store."""
        return self.calendar_id or self.name


class StoreConfig(BaseModel):
    """Where busy times are read from."""
    type: Literal["ics", "json"] = "ics"
    path: str = "data"

    def resolve_path(self, base_dir: Path) -> Path:
        """Resolve a relative store path against the config file directory."""
        path = Path(self.path).expanduser()
        return path if path.is_absolute() else base_dir / path


class AppConfig(BaseModel):
    """Application configuration."""
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    timezone: str = DEFAULT_TIMEZONE
    calendars: List[CalendarIdentity] = Field(default_factory=list)
    working_days: List[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4])  # Monday-Friday
    store: StoreConfig = Field(default_factory=StoreConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone_name(cls, value: str) -> str:
        """Ensure the timezone is known to pendulum."""
        try:
            return validate_timezone(value)
        except InvalidConfigurationError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"working_days must be between 0 and 6, got {invalid_days}")
        if not value:
            raise ValueError("working_days must contain at least one day")
        # Preserve order while removing duplicates
        return list(dict.fromkeys(value))

    @field_validator("calendars")
    @classmethod
    def validate_calendars(cls, value: List[CalendarIdentity]) -> List[CalendarIdentity]:
        """Ensure calendar names are unique."""
        seen_names: set[str] = set()
        for calendar in value:
            name_key = calendar.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate calendar name detected: {calendar.name}")
            seen_names.add(name_key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_calendar_by_name(self, name: str) -> CalendarIdentity | None:
        """Find a calendar by its name (alias)."""
        for calendar in self.calendars:
            if calendar.name.lower() == name.lower():
                return calendar
        return None

    def resolve_identity(self, identifier: str) -> str:
        """
        Resolve a name or alias to the calendar store identifier.

        Unknown names are passed through so stores can look them up directly.
        """
        calendar = self.find_calendar_by_name(identifier)
        if calendar:
            return calendar.source_id()
        return identifier.strip()

    def resolve_identities(self, identifiers: Sequence[str]) -> List[str]:
        """
        Resolve multiple identifiers, ensuring uniqueness.

        Raises:
            MissingIdentityError: If no identifier is given
        """
        resolved: List[str] = []
        for identifier in identifiers or ():
            if not identifier or not identifier.strip():
                continue
            source_id = self.resolve_identity(identifier)
            if source_id not in resolved:
                resolved.append(source_id)

        if not resolved:
            raise MissingIdentityError("Name is required!")

        return resolved


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
