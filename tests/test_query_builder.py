"""Unit tests for filter query construction"""

from datetime import date, datetime, timedelta, timezone

import pytest

from registration_api.errors import InvalidArgumentError
from registration_api.services.query_builder import (
    FilterRequest,
    SearchMode,
    build_filter_conditions,
    escape_like,
    filter_day_bounds,
    local_day_bounds,
    parse_filter_date,
)


class TestFilterRequest:
    def test_blank_values_count_as_absent(self):
        filters = FilterRequest(search="", session="   ", date=None, location="Lagos")

        assert filters.search is None
        assert filters.session is None
        assert filters.applied_filters() == {"location": "Lagos"}
        assert not filters.is_empty()

    def test_values_are_stripped(self):
        filters = FilterRequest(search=" Ada ", session="Morning\n", location="\tLagos")

        assert filters.applied_filters() == {
            "search": "Ada",
            "session": "Morning",
            "location": "Lagos",
        }

    def test_empty_request(self):
        assert FilterRequest().is_empty()
        assert FilterRequest().applied_filters() == {}


class TestEscapeLike:
    def test_escapes_like_wildcards(self):
        assert escape_like("50%_off") == "50\\%\\_off"

    def test_escapes_escape_character_first(self):
        assert escape_like("a\\%") == "a\\\\\\%"

    def test_regex_metacharacters_untouched(self):
        assert escape_like(".*") == ".*"


class TestDates:
    def test_parse_valid_date(self):
        assert parse_filter_date("2024-03-01") == date(2024, 3, 1)

    @pytest.mark.parametrize("value", ["not-a-date", "2024-13-01", "2024-02-30"])
    def test_parse_invalid_date(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_filter_date(value)

        assert "YYYY-MM-DD" in str(exc_info.value)

    @pytest.mark.parametrize(
        "tz_name,value",
        [("WAT-1", "0001-01-01"), ("EST+5", "9999-12-31")],
    )
    def test_unrepresentable_local_day_rejected(self, server_tz, tz_name, value):
        server_tz(tz_name)

        with pytest.raises(InvalidArgumentError) as exc_info:
            filter_day_bounds(value)

        assert value in str(exc_info.value)

    def test_day_bounds_follow_server_time_zone(self, server_tz):
        server_tz("WAT-1")

        start, end = filter_day_bounds("2024-03-01")

        assert start == datetime(2024, 2, 29, 23, 0, tzinfo=timezone.utc)
        assert end == datetime(2024, 3, 1, 22, 59, 59, 999000, tzinfo=timezone.utc)

    def test_day_bounds_cover_local_calendar_day(self):
        start, end = local_day_bounds(date(2024, 3, 1))

        assert start.tzinfo == timezone.utc
        assert end.tzinfo == timezone.utc
        assert start == datetime(2024, 3, 1).astimezone().astimezone(timezone.utc)
        assert end - start == timedelta(hours=23, minutes=59, seconds=59, milliseconds=999)


class TestBuildFilterConditions:
    def test_no_filters_no_conditions(self):
        assert build_filter_conditions(FilterRequest()) == []

    def test_one_condition_per_field_and_two_for_date(self):
        filters = FilterRequest(
            search="ada", session="Evening", date="2024-03-01", location="Accra"
        )

        conditions = build_filter_conditions(filters)

        assert len(conditions) == 5

    def test_unknown_session_ignored_by_default(self):
        conditions = build_filter_conditions(FilterRequest(session="Night"))

        assert conditions == []

    def test_unknown_session_rejected_when_strict(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            build_filter_conditions(
                FilterRequest(session="morning"), reject_unknown_session=True
            )

        assert "Morning, Evening" in str(exc_info.value)

    def test_invalid_date_rejected(self):
        with pytest.raises(InvalidArgumentError):
            build_filter_conditions(FilterRequest(date="yesterday"))


class TestSearchMode:
    @pytest.mark.parametrize(
        "value,expected",
        [("contains", SearchMode.CONTAINS), (" EXACT ", SearchMode.EXACT)],
    )
    def test_parse(self, value, expected):
        assert SearchMode.parse(value) == expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            SearchMode.parse("fuzzy")
