import datetime

import pytest

from portfolio.experience import InvalidDateError, compute_years, parse_date
from portfolio.experience.years import round_tenths

UTC = datetime.timezone.utc
START = datetime.datetime(2019, 1, 1, tzinfo=UTC)


def _after(days):
    return START + datetime.timedelta(days=days)


def test_future_start_clamps_to_zero():
    future = datetime.datetime(2030, 1, 1, tzinfo=UTC)
    assert compute_years(future, START) == 0


def test_same_instant_is_zero():
    assert compute_years(START, START) == 0.0


def test_730_and_a_half_days_is_two_years():
    assert compute_years(START, _after(730.5)) == 2.0


@pytest.mark.parametrize(
    "days,expected",
    [
        (18.2625, 0.1),  # exactly 0.05 years rounds half-up
        (14.61, 0.0),  # 0.04 years
        (456.5625, 1.3),  # exactly 1.25 years
        (365.25 * 3.14, 3.1),
        (365.25 * 3.16, 3.2),
    ],
)
def test_rounds_half_up_to_tenths(days, expected):
    assert compute_years(START, _after(days)) == expected


def test_round_tenths_is_not_bankers_rounding():
    assert round_tenths(0.25) == 0.3
    assert round_tenths(0.35) == 0.4
    assert round_tenths(2.0) == 2.0


def test_reference_defaults_to_clock():
    years = compute_years(START, clock=lambda: datetime.datetime(2024, 1, 1, tzinfo=UTC))
    assert years == 5.0


def test_accepts_strings_and_dates():
    assert compute_years("2019-01-01", "2021-01-01T12:00:00Z") == 2.0
    assert compute_years(datetime.date(2019, 1, 1), datetime.date(2020, 1, 1)) == 1.0


def test_naive_datetimes_are_treated_as_utc():
    naive = datetime.datetime(2019, 1, 1)
    assert parse_date(naive) == START


def test_parse_date_rejects_garbage():
    with pytest.raises(InvalidDateError):
        parse_date("not a date")
    with pytest.raises(InvalidDateError):
        parse_date("")
    with pytest.raises(InvalidDateError):
        parse_date(12345)


def test_compute_years_is_pure():
    ref = _after(1000)
    assert compute_years(START, ref) == compute_years(START, ref)
