"""
Tests for best-effort input normalisation.
"""

from datetime import datetime, time

import pendulum
import pytest

from availabilityfinder.domain.exceptions import InvalidConfigurationError, MissingIdentityError
from availabilityfinder.domain.parsing import (
    build_search_config,
    normalize_identities,
    parse_datetime_or_default,
    parse_or_default,
    parse_positive_int_or_default,
    parse_time_of_day_or_default,
    parse_working_days,
)

TZ = "America/Los_Angeles"
NOW = pendulum.datetime(2025, 3, 27, 9, 0, tz=TZ)


class TestParseOrDefault:

    def test_missing_values_use_default(self):
        assert parse_or_default(None, 5, int) == 5
        assert parse_or_default("   ", 5, int) == 5

    def test_parser_errors_use_default(self):
        assert parse_or_default("abc", 5, int) == 5

    def test_valid_value_is_parsed(self):
        assert parse_or_default("7", 5, int) == 7


class TestPositiveInt:

    @pytest.mark.parametrize("value", ["abc", "0", "-15", 0, -1, "1.5", 30.9, True, [30]])
    def test_invalid_values_fall_back(self, value):
        assert parse_positive_int_or_default(value, 60) == 60

    @pytest.mark.parametrize("value, expected", [("30", 30), (" 45 ", 45), (90, 90), (30.0, 30)])
    def test_valid_values(self, value, expected):
        assert parse_positive_int_or_default(value, 60) == expected


class TestDateTimeParsing:

    def test_bare_date_is_midnight(self):
        parsed = parse_datetime_or_default("2025-03-31", NOW, TZ)

        assert parsed == pendulum.datetime(2025, 3, 31, tz=TZ)

    def test_bare_end_date_covers_whole_day(self):
        parsed = parse_datetime_or_default("2025-03-31", NOW, TZ, end_of_day=True)

        assert parsed == pendulum.datetime(2025, 3, 31, tz=TZ).end_of("day")

    def test_naive_date_time_uses_timezone(self):
        parsed = parse_datetime_or_default("2025-03-27T09:30:00", NOW, TZ)

        assert parsed == pendulum.datetime(2025, 3, 27, 9, 30, tz=TZ)
        assert parsed.timezone_name == TZ

    def test_offset_date_time_is_converted(self):
        parsed = parse_datetime_or_default("2025-03-27T16:30:00Z", NOW, TZ)

        assert parsed.hour == 9
        assert parsed.minute == 30
        assert parsed.timezone_name == TZ

    def test_datetime_objects_are_accepted(self):
        parsed = parse_datetime_or_default(datetime(2025, 3, 28, 10, 0), NOW, TZ)

        assert parsed == pendulum.datetime(2025, 3, 28, 10, 0, tz=TZ)

    @pytest.mark.parametrize("value", ["not a date", "2025-13-45", "P1D", 12345])
    def test_unparsable_values_fall_back(self, value):
        assert parse_datetime_or_default(value, NOW, TZ) == NOW


class TestOtherFields:

    def test_time_of_day(self):
        assert parse_time_of_day_or_default("09:30", time(8)) == time(9, 30)
        assert parse_time_of_day_or_default("25:00", time(8)) == time(8)
        assert parse_time_of_day_or_default("nine", time(8)) == time(8)

    def test_working_days_drop_invalid_entries(self):
        assert parse_working_days([0, "2", 9, "x"]) == frozenset({0, 2})
        assert parse_working_days([9]) == frozenset({0, 1, 2, 3, 4})
        assert parse_working_days(None) == frozenset({0, 1, 2, 3, 4})

    def test_identities_are_deduplicated(self):
        assert normalize_identities([" krissy ", "Krissy", "", "client"]) == ("krissy", "client")

    def test_no_identity_is_fatal(self):
        with pytest.raises(MissingIdentityError):
            normalize_identities(["  "])


class TestBuildSearchConfig:

    def test_defaults(self):
        config = build_search_config(identities=["krissy"], timezone=TZ, now=NOW)

        assert config.search_start == NOW
        assert config.search_end == NOW.add(days=7)
        assert config.duration_minutes == 60
        assert config.increment_minutes == 15
        assert config.working_hours.start_time == time(8, 0)
        assert config.working_hours.end_time == time(18, 0)
        assert config.working_hours.working_days == frozenset({0, 1, 2, 3, 4})
        assert config.timezone == TZ
        assert config.identities == ("krissy",)

    def test_malformed_optional_input_degrades_to_defaults(self):
        config = build_search_config(
            identities=["krissy"],
            start="yesterday-ish",
            end="soon",
            duration="abc",
            increment="-5",
            timezone=TZ,
            now=NOW,
        )

        assert config.search_start == NOW
        assert config.search_end == NOW.add(days=7)
        assert config.duration_minutes == 60
        assert config.increment_minutes == 15

    def test_explicit_values(self):
        config = build_search_config(
            identities=["krissy", "client"],
            start="2025-03-31",
            end="2025-04-02",
            duration="30",
            increment=10,
            working_days=[0, 2],
            work_start="09:00",
            work_end="17:30",
            timezone=TZ,
            now=NOW,
        )

        assert config.search_start == pendulum.datetime(2025, 3, 31, tz=TZ)
        assert config.search_end == pendulum.datetime(2025, 4, 2, tz=TZ).end_of("day")
        assert config.duration_minutes == 30
        assert config.increment_minutes == 10
        assert config.working_hours.working_days == frozenset({0, 2})
        assert config.working_hours.end_time == time(17, 30)

    def test_missing_identity_is_fatal(self):
        with pytest.raises(MissingIdentityError):
            build_search_config(identities=[], timezone=TZ, now=NOW)

    def test_unknown_timezone_is_fatal(self):
        with pytest.raises(InvalidConfigurationError, match="Unknown timezone"):
            build_search_config(identities=["krissy"], timezone="Mars/Olympus", now=NOW)

    def test_inverted_work_hours_are_fatal(self):
        with pytest.raises(InvalidConfigurationError):
            build_search_config(
                identities=["krissy"], work_start="18:00", work_end="08:00", timezone=TZ, now=NOW
            )

    def test_non_positive_default_increment_is_fatal(self):
        with pytest.raises(InvalidConfigurationError):
            build_search_config(identities=["krissy"], default_increment=0, timezone=TZ, now=NOW)
