from datetime import date

import pytest

from weeksheet.domain.calendar import DayOfWeek, weekday_code
from weeksheet.domain.period import generate_default_period, generate_period, generate_week_days


def _assert_well_formed(period):
    dates = [d.date for d in period.days]
    assert dates == sorted(set(dates))
    for day in period.days:
        assert day.day_of_week == weekday_code(day.date)
        assert day.is_empty
        assert day.break_minutes is None and day.kilometers is None and day.notes is None


def test_week_days_are_monday_to_friday():
    period = generate_week_days(date(2024, 1, 8))
    assert [d.iso_date for d in period.days] == [
        "2024-01-08", "2024-01-09", "2024-01-10", "2024-01-11", "2024-01-12",
    ]
    assert [d.day_of_week for d in period.days] == [
        DayOfWeek.MON, DayOfWeek.TUE, DayOfWeek.WED, DayOfWeek.THU, DayOfWeek.FRI,
    ]
    _assert_well_formed(period)


def test_week_days_anchor_on_monday_of_given_date():
    assert generate_week_days(date(2024, 1, 10)).start_date == date(2024, 1, 8)
    assert generate_week_days(date(2024, 1, 14)).start_date == date(2024, 1, 8)


@pytest.mark.parametrize("length", range(1, 8))
def test_rolling_period_from_any_weekday(length):
    friday = date(2024, 1, 12)
    period = generate_period(friday, length)
    assert len(period.days) == length
    assert period.start_date == friday
    _assert_well_formed(period)


def test_rolling_period_crosses_month_end():
    period = generate_period(date(2024, 1, 29), 7)
    assert period.end_date == date(2024, 2, 4)
    _assert_well_formed(period)


@pytest.mark.parametrize("length", [0, 8, -1])
def test_invalid_length(length):
    with pytest.raises(ValueError):
        generate_period(date(2024, 1, 8), length)


def test_default_period_policy():
    wednesday = date(2024, 1, 10)
    assert generate_default_period(wednesday, policy="weekdays").start_date == date(2024, 1, 8)
    rolling = generate_default_period(wednesday, policy="rolling", length=7)
    assert rolling.start_date == wednesday
    assert len(rolling.days) == 7
    with pytest.raises(ValueError):
        generate_default_period(wednesday, policy="fortnightly")
