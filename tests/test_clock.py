"""Tests for dayblocks/clock.py — calendar adapters."""

import pytest

from dayblocks.clock import FixedClock, SystemClock, previous_day, trailing_dates


def test_trailing_dates_oldest_first():
    assert trailing_dates("2024-03-02", 3) == ["2024-02-29", "2024-03-01", "2024-03-02"]


def test_trailing_dates_across_year():
    days = trailing_dates("2024-01-03", 7)
    assert len(days) == 7
    assert days[0] == "2023-12-28"
    assert days[-1] == "2024-01-03"


def test_previous_day():
    assert previous_day("2024-01-01") == "2023-12-31"


def test_fixed_clock():
    clock = FixedClock("2024-01-31")
    assert clock.today() == "2024-01-31"
    assert clock.advance() == "2024-02-01"
    assert clock.trailing(2) == ["2024-01-31", "2024-02-01"]


def test_fixed_clock_rejects_bad_date():
    with pytest.raises(ValueError):
        FixedClock("31/01/2024")


def test_system_clock_returns_iso_date():
    today = SystemClock().today()
    assert len(today) == 10
    assert today[4] == "-" and today[7] == "-"
    assert SystemClock().trailing(7)[-1] == today
