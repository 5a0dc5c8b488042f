"""
Unit tests for business-hours evaluation.

Tests cover:
- Same-day and overnight ranges
- Degenerate ranges
- Weekday selection (Sunday = 0)
- Malformed or missing hours data
"""
import json
import pytest
from datetime import datetime

from services.hours import is_open_now, parse_hours

# 2024-06-01 is a Saturday
SATURDAY = datetime(2024, 6, 1)


def at(hour: int, minute: int = 0, day: datetime = SATURDAY) -> datetime:
    return day.replace(hour=hour, minute=minute)


class TestSameDayRanges:

    hours = {"sat": [["11:00", "14:30"], ["17:00", "22:00"]]}

    @pytest.mark.parametrize("hour,minute", [(11, 0), (14, 29), (17, 0), (21, 59)])
    def test_open_inside_ranges(self, hour, minute):
        assert is_open_now(self.hours, at(hour, minute))

    @pytest.mark.parametrize("hour,minute", [(10, 59), (14, 30), (16, 0), (22, 0), (23, 30)])
    def test_closed_outside_ranges(self, hour, minute):
        assert not is_open_now(self.hours, at(hour, minute))


class TestOvernightRanges:

    hours = {"sat": [["22:00", "02:00"]]}

    def test_open_late_evening(self):
        assert is_open_now(self.hours, at(23, 30))

    def test_open_after_midnight(self):
        assert is_open_now(self.hours, at(1, 30))

    def test_closed_midday(self):
        assert not is_open_now(self.hours, at(12, 0))

    def test_closes_at_end_boundary(self):
        assert not is_open_now(self.hours, at(2, 0))

    def test_opens_at_start_boundary(self):
        assert is_open_now(self.hours, at(22, 0))

    def test_deterministic(self):
        moment = at(23, 30)
        assert all(is_open_now(self.hours, moment) for _ in range(5))


class TestDegenerateAndMalformed:

    def test_equal_start_and_end_never_open(self):
        hours = {"sat": [["12:00", "12:00"]]}
        for hour in (0, 11, 12, 13, 23):
            assert not is_open_now(hours, at(hour))

    @pytest.mark.parametrize("hours", [
        None,
        "",
        "not json",
        "[1, 2, 3]",
        42,
        {"sat": "11:00-22:00"},
        {"sat": [["11:00"]]},
        {"sat": [["eleven", "22:00"]]},
        {"sat": [[None, "22:00"]]},
        {"sat": [["25:00", "26:00"]]},
    ])
    def test_malformed_hours_are_closed(self, hours):
        assert is_open_now(hours, at(12)) is False

    def test_bad_range_does_not_hide_good_range(self):
        hours = {"sat": [["bad", "range"], ["11:00", "22:00"]]}
        assert is_open_now(hours, at(12))


class TestDaySelection:

    def test_uses_todays_ranges_only(self):
        hours = {"fri": [["00:00", "23:59"]]}
        assert not is_open_now(hours, at(12))

    def test_sunday_is_day_zero(self):
        sunday = datetime(2024, 6, 2)
        hours = {"sun": [["09:00", "17:00"]]}
        assert is_open_now(hours, at(10, day=sunday))
        assert not is_open_now(hours, at(10, day=SATURDAY))

    def test_full_day_names_accepted(self):
        hours = {"saturday": [["09:00", "17:00"]]}
        assert is_open_now(hours, at(10))

    def test_accepts_stored_json_text(self):
        hours = json.dumps({"sat": [["09:00", "17:00"]]})
        assert is_open_now(hours, at(10))

    def test_defaults_to_now(self):
        always = {day: [["00:00", "23:59"]] for day in ["sun", "mon", "tue", "wed", "thu", "fri", "sat"]}
        now = datetime.now()
        if now.hour == 23 and now.minute == 59:
            pytest.skip("last minute of the day is outside the range")
        assert is_open_now(always)


class TestParseHours:

    def test_parses_json_object(self):
        assert parse_hours('{"mon": [["09:00", "17:00"]]}') == {"mon": [["09:00", "17:00"]]}

    def test_unparsable_json_is_none(self):
        assert parse_hours("{broken") is None

    def test_non_object_json_is_none(self):
        assert parse_hours('["mon"]') is None

    def test_mapping_passes_through(self):
        hours = {"mon": []}
        assert parse_hours(hours) is hours
