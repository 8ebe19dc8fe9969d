from datetime import date, datetime

import pytest

from resource_room.common.datetime_utils import day_start, parse_iso_date, week_start
from resource_room.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "value, expected",
    [
        (date(2026, 2, 2), date(2026, 2, 2)),  # Monday
        (date(2026, 2, 4), date(2026, 2, 2)),  # Wednesday
        (date(2026, 2, 7), date(2026, 2, 2)),  # Saturday
        (date(2026, 2, 8), date(2026, 2, 2)),  # Sunday belongs to the week that started Monday
        (datetime(2026, 2, 9, 0, 0, 1), date(2026, 2, 9)),
        (datetime(2026, 1, 1, 23, 59), date(2025, 12, 29)),  # across a year boundary
    ],
)
def test_week_start_is_monday_on_or_before(value, expected):
    assert week_start(value) == expected
    assert week_start(value).weekday() == 0


def test_day_start_truncates_time():
    assert day_start(datetime(2026, 2, 4, 23, 59, 59)) == date(2026, 2, 4)
    assert day_start(date(2026, 2, 4)) == date(2026, 2, 4)


def test_parse_iso_date():
    assert parse_iso_date("2026-02-04") == date(2026, 2, 4)


@pytest.mark.parametrize("bad", ["04/02/2026", "not-a-date", "", None])
def test_parse_iso_date_rejects_garbage(bad):
    with pytest.raises(ValidationError):
        parse_iso_date(bad)
