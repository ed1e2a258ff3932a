from datetime import date, datetime

import pytz

from assethub.services.dates import (
    parse_date,
    month_window,
    previous_month,
    months_between,
    elapsed_contract_months,
    is_valid_month,
    current_year_month,
    today_in,
)


def test_parse_date_accepts_common_shapes():
    assert parse_date(date(2024, 3, 15)) == date(2024, 3, 15)
    assert parse_date(datetime(2024, 3, 15, 23, 59)) == date(2024, 3, 15)
    assert parse_date("2024-03-15") == date(2024, 3, 15)
    assert parse_date("2024-03-15T09:00:00Z") == date(2024, 3, 15)


def test_parse_date_treats_garbage_as_missing():
    assert parse_date(None) is None
    assert parse_date("") is None
    assert parse_date("not a date") is None
    assert parse_date("2024-02-30") is None


def test_month_window_is_inclusive_calendar_month():
    assert month_window(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_window(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))


def test_previous_month_wraps_year():
    assert previous_month(2024, 1) == (2023, 12)
    assert previous_month(2024, 7) == (2024, 6)


def test_months_between_counts_calendar_months():
    assert months_between(date(2024, 1, 31), 2024, 1) == 0
    assert months_between(date(2024, 1, 31), 2024, 2) == 1
    assert months_between(date(2023, 11, 1), 2024, 2) == 3
    assert months_between(date(2024, 6, 1), 2024, 3) == -3


def test_elapsed_contract_months_counts_end_month_by_day():
    assert elapsed_contract_months(date(2024, 1, 1), date(2024, 3, 15)) == 3
    assert elapsed_contract_months(date(2024, 1, 20), date(2024, 3, 15)) == 2
    assert elapsed_contract_months(date(2024, 1, 20), date(2024, 3, 20)) == 3


def test_elapsed_contract_months_never_below_one():
    assert elapsed_contract_months(date(2024, 3, 20), date(2024, 3, 5)) == 1
    assert elapsed_contract_months(date(2024, 5, 1), date(2024, 3, 1)) == 1


def test_is_valid_month():
    assert is_valid_month(2024, 1)
    assert is_valid_month(2024, 12)
    assert not is_valid_month(2024, 0)
    assert not is_valid_month(2024, 13)


def test_current_year_month_falls_back_to_utc_for_unknown_zone():
    year, month = current_year_month("Not/AZone")
    assert 1 <= month <= 12
    assert year >= 2024


def test_today_in_falls_back_to_utc_for_unknown_zone():
    before = datetime.now(pytz.UTC).date()
    today = today_in("Not/AZone")
    after = datetime.now(pytz.UTC).date()
    assert before <= today <= after


def test_today_in_uses_named_zone():
    tokyo = pytz.timezone("Asia/Tokyo")
    before = datetime.now(tokyo).date()
    today = today_in("Asia/Tokyo")
    after = datetime.now(tokyo).date()
    assert before <= today <= after
