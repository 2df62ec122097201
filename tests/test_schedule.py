from datetime import date, time

import pytest

from academy.models import ScheduleDays
from utils.errors import ValidationError
from utils.schedule import day_name, parse_date, parse_time, resolve_day_type


@pytest.mark.parametrize("day, expected", [
    (date(2024, 1, 1), ScheduleDays.MWF),   # Monday
    (date(2024, 1, 2), ScheduleDays.TTS),   # Tuesday
    (date(2024, 1, 3), ScheduleDays.MWF),   # Wednesday
    (date(2024, 1, 4), ScheduleDays.TTS),   # Thursday
    (date(2024, 1, 5), ScheduleDays.MWF),   # Friday
    (date(2024, 1, 6), ScheduleDays.TTS),   # Saturday
    (date(2024, 1, 7), None),               # Sunday
])
def test_resolve_day_type(day, expected):
    assert resolve_day_type(day) == expected


def test_day_name():
    assert day_name(date(2024, 1, 3)) == "Wednesday"
    assert day_name(date(2024, 1, 7)) == "Sunday"


def test_parse_date_defaults_for_blank_input():
    fallback = date(2024, 5, 1)
    assert parse_date(None, default=fallback) == fallback
    assert parse_date("  ", default=fallback) == fallback
    assert parse_date("2024-02-29") == date(2024, 2, 29)


def test_parse_date_rejects_malformed_input():
    with pytest.raises(ValidationError) as exc:
        parse_date("03/01/2024", field="start_date")
    assert exc.value.message == "Invalid start_date format, use YYYY-MM-DD"


def test_parse_time_accepts_seconds():
    assert parse_time("08:30", "start_time") == time(8, 30)
    assert parse_time("17:05:00", "end_time") == time(17, 5)
    with pytest.raises(ValidationError):
        parse_time("8pm", "end_time")
