from datetime import date, datetime

import pandas as pd
import pytest
from hypothesis import given, strategies as st

from utils.helpers import (
    StoredTimestamp,
    to_datetime,
    to_date,
    get_monthly_dates,
    is_date_in_range,
    format_date_time,
    format_date,
)


def test_to_datetime_normalizes_all_representations():
    expected = datetime(2025, 1, 15, 9, 30)
    assert to_datetime(expected) == expected
    assert to_datetime(pd.Timestamp(expected)) == expected
    assert to_datetime(StoredTimestamp.from_datetime(expected)) == expected
    assert to_datetime("2025-01-15 09:30:00") == expected
    assert to_datetime(date(2025, 1, 15)) == datetime(2025, 1, 15, 0, 0)


def test_to_datetime_rejects_garbage():
    with pytest.raises(ValueError):
        to_datetime("not a date")


def test_stored_timestamp_round_trip_keeps_microseconds():
    dt = datetime(2024, 12, 31, 23, 59, 59, 123456)
    ts = StoredTimestamp.from_datetime(dt)
    assert ts.to_datetime() == dt
    assert ts == StoredTimestamp(ts.seconds, 123456000)


def test_to_date():
    assert to_date("2020-03-01") == date(2020, 3, 1)
    assert to_date("") is None
    assert to_date(None) is None
    assert to_date("abc") is None


def test_get_monthly_dates():
    assert get_monthly_dates(2024, 2) == ("2024-02-01", "2024-02-29")
    assert get_monthly_dates(2025, 12) == ("2025-12-01", "2025-12-31")


def test_range_is_inclusive():
    d = datetime(2025, 1, 15, 9, 0)
    assert is_date_in_range(d, d, d)
    assert is_date_in_range(d, datetime(2025, 1, 1), datetime(2025, 1, 31))
    assert not is_date_in_range(datetime(2025, 2, 1), datetime(2025, 1, 1), datetime(2025, 1, 31))


def test_format_date_time_drops_seconds():
    assert format_date_time(datetime(2025, 1, 5, 9, 7, 33)) == "2025-01-05T09:07"
    assert format_date_time("2025-01-05 17:00:00") == "2025-01-05T17:00"


def test_format_date():
    assert format_date(datetime(2025, 1, 5, 23, 59)) == "2025-01-05"
    assert format_date(date(2024, 2, 29)) == "2024-02-29"


@given(st.dates(min_value=date(1900, 1, 1), max_value=date(2200, 12, 31)))
def test_format_date_is_stable(d):
    formatted = format_date(d)
    assert format_date(to_datetime(formatted)) == formatted
