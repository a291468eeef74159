"""
Best-effort normalisation of raw search input.

Optional values that are missing or malformed are replaced by their defaults
instead of failing the whole request. Only problems that would make the search
meaningless (no identity, inverted work hours, unknown timezone) are raised.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidConfigurationError, MissingIdentityError
from .models import DEFAULT_TIMEZONE, DEFAULT_WORKING_DAYS, SearchConfig, WorkingHours

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DURATION_MINUTES = 60
DEFAULT_INCREMENT_MINUTES = 15
DEFAULT_SEARCH_DAYS = 7
DEFAULT_WORK_START = time(8, 0)
DEFAULT_WORK_END = time(18, 0)


def parse_or_default(value: Any, default: T, parser: Callable[[Any], T]) -> T:
    """
    Run ``parser`` on ``value`` and fall back to ``default`` on failure.

    ``None`` and blank strings count as missing and yield the default without
    calling the parser.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default

    try:
        return parser(value)
    except (ValueError, TypeError) as exc:
        logger.debug("Using default %r for unparsable input %r: %s", default, value, exc)
        return default


def _to_positive_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected a whole number, got {value}")

    number = int(value.strip()) if isinstance(value, str) else int(value)
    if number <= 0:
        raise ValueError(f"expected a positive number, got {number}")
    return number


def parse_positive_int_or_default(value: Any, default: int) -> int:
    """Parse durations and increments; non-numeric or non-positive input yields the default."""
    return parse_or_default(value, default, _to_positive_int)


def _to_datetime(value: Any, timezone: str, end_of_day: bool) -> DateTime:
    if isinstance(value, str):
        value = pendulum.parse(value.strip(), tz=timezone, exact=True)

    if isinstance(value, datetime):
        return pendulum.instance(value, tz=timezone).in_timezone(timezone)

    if isinstance(value, (Date, date)):
        # A bare date covers the whole day; the engine clips it to work hours
        moment = pendulum.datetime(value.year, value.month, value.day, tz=timezone)
        return moment.end_of("day") if end_of_day else moment

    raise ValueError(f"not a date or date-time: {value!r}")


def parse_datetime_or_default(
    value: Any,
    default: DateTime,
    timezone: str = DEFAULT_TIMEZONE,
    end_of_day: bool = False
) -> DateTime:
    """
    Parse a date or date-time in the given timezone.

    Bare dates resolve to midnight, or to the end of that day when
    ``end_of_day`` is set (used for the search end). Unparsable input yields
    the default.
    """
    return parse_or_default(
        value,
        default,
        lambda raw: _to_datetime(raw, timezone, end_of_day)
    )


def _to_time_of_day(value: Any) -> time:
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)

    hour, minute = str(value).strip().split(":")
    return time(hour=int(hour), minute=int(minute))


def parse_time_of_day_or_default(value: Any, default: time) -> time:
    """Parse 'HH:MM' into a time object."""
    return parse_or_default(value, default, _to_time_of_day)


def parse_working_days(values: Optional[Iterable[Any]]) -> frozenset:
    """
    Keep the valid weekday numbers (0=Monday ... 6=Sunday).

    Falls back to Monday-Friday when nothing valid remains.
    """
    if values is None:
        return DEFAULT_WORKING_DAYS

    days = set()
    for value in values:
        day = parse_or_default(value, None, int)
        if day is None or day not in range(7):
            logger.debug("Ignoring invalid working day %r", value)
            continue
        days.add(day)

    return frozenset(days) if days else DEFAULT_WORKING_DAYS


def normalize_identities(identities: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """
    Strip, drop blanks and deduplicate identities, preserving order.

    Raises:
        MissingIdentityError: If no identity remains
    """
    normalized: List[str] = []
    seen: set[str] = set()

    for identity in identities or ():
        name = str(identity).strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        normalized.append(name)

    if not normalized:
        raise MissingIdentityError("At least one calendar identity is required.")

    return tuple(normalized)


def validate_timezone(timezone: Optional[str]) -> str:
    """Return the timezone name, or raise if pendulum does not know it."""
    if not timezone:
        return DEFAULT_TIMEZONE

    try:
        pendulum.timezone(timezone)
    except (ValueError, KeyError) as exc:
        raise InvalidConfigurationError(f"Unknown timezone: '{timezone}'") from exc

    return timezone


def build_search_config(
    *,
    identities: Optional[Iterable[str]],
    start: Any = None,
    end: Any = None,
    duration: Any = None,
    increment: Any = None,
    working_days: Optional[Iterable[Any]] = None,
    work_start: Any = None,
    work_end: Any = None,
    timezone: Optional[str] = DEFAULT_TIMEZONE,
    search_days: int = DEFAULT_SEARCH_DAYS,
    default_duration: int = DEFAULT_DURATION_MINUTES,
    default_increment: int = DEFAULT_INCREMENT_MINUTES,
    now: Optional[DateTime] = None,
) -> SearchConfig:
    """
    Turn raw caller input into a SearchConfig.

    Args:
        identities: One or more calendar identities (names or aliases)
        start: Search start (date, date-time, or string); defaults to now
        end: Search end; defaults to now + ``search_days`` days
        duration: Slot length in minutes
        increment: Slot alignment in minutes
        working_days: Weekday numbers, 0=Monday
        work_start: Start of the daily window ('HH:MM')
        work_end: End of the daily window ('HH:MM')
        timezone: Canonical IANA timezone for all arithmetic
        search_days: Length of the default search range
        default_duration: Duration used when ``duration`` is missing or invalid
        default_increment: Increment used when ``increment`` is missing or invalid
        now: Reference time for defaults (current time when omitted)

    Raises:
        MissingIdentityError: If no identity is given
        InvalidConfigurationError: If timezone or work hours are unusable
    """
    names = normalize_identities(identities)
    timezone = validate_timezone(timezone)

    now = (now or pendulum.now(timezone)).in_timezone(timezone)
    search_start = parse_datetime_or_default(start, now, timezone)
    search_end = parse_datetime_or_default(
        end, now.add(days=search_days), timezone, end_of_day=True
    )

    duration_minutes = parse_positive_int_or_default(duration, default_duration)
    increment_minutes = parse_positive_int_or_default(increment, default_increment)
    if increment_minutes <= 0 or duration_minutes <= 0:
        raise InvalidConfigurationError(
            "Duration and increment must be positive after applying defaults."
        )

    try:
        working_hours = WorkingHours(
            start_time=parse_time_of_day_or_default(work_start, DEFAULT_WORK_START),
            end_time=parse_time_of_day_or_default(work_end, DEFAULT_WORK_END),
            working_days=parse_working_days(working_days),
            timezone=timezone,
        )
    except ValueError as exc:
        raise InvalidConfigurationError(str(exc)) from exc

    return SearchConfig(
        search_start=search_start,
        search_end=search_end,
        working_hours=working_hours,
        identities=names,
        duration_minutes=duration_minutes,
        increment_minutes=increment_minutes,
    )
