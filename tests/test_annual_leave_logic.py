from datetime import date, datetime

import pytest

import config
from db import queries_employee as q_emp
from db import queries_leave as q_leave
from services.annual_leave_logic import (
    get_current_annual_period,
    calculate_annual_leave_balance,
    get_employee_annual_leave_balance,
    get_annual_leave_summary,
)
from services.leave_request_logic import build_leave_request

NOW = datetime(2025, 1, 10, 8, 0)


def _insert_leave(conn, employee_id, start, end, status=config.STATUS_APPROVED, leave_type='特休'):
    record = build_leave_request(employee_id, leave_type, start, end, '休假', now=start)
    record['status'] = status
    return q_leave.insert_leave_request(conn, record)


def test_current_period_contains_now():
    start, end = get_current_annual_period(date(2020, 3, 1), NOW)
    assert start == datetime(2024, 3, 1)
    assert end == datetime(2025, 3, 1)


def test_current_period_starts_on_anniversary_day():
    start, end = get_current_annual_period(date(2020, 1, 10), NOW)
    assert (start, end) == (datetime(2025, 1, 10), datetime(2026, 1, 10))


def test_current_period_before_entry_is_first_year():
    start, end = get_current_annual_period(date(2025, 6, 1), NOW)
    assert (start, end) == (datetime(2025, 6, 1), datetime(2026, 6, 1))


def test_current_period_for_leap_day_entry():
    start, end = get_current_annual_period(date(2020, 2, 29), datetime(2023, 3, 15))
    assert (start, end) == (datetime(2023, 2, 28), datetime(2024, 2, 29))


def test_balance_rounds_to_two_decimals():
    balance = calculate_annual_leave_balance(date(2020, 3, 1), 13, NOW)
    assert balance == {'total': 14, 'used': 1.62, 'remaining': 12.38}


def test_employee_balance_counts_only_approved_annual_leave_in_period(conn, employee_id):
    _insert_leave(conn, employee_id, datetime(2024, 6, 12, 9, 0), datetime(2024, 6, 12, 17, 0))
    _insert_leave(conn, employee_id, datetime(2023, 6, 14, 9, 0), datetime(2023, 6, 14, 17, 0))
    _insert_leave(conn, employee_id, datetime(2024, 7, 10, 9, 0), datetime(2024, 7, 10, 17, 0),
                  status=config.STATUS_PENDING)
    _insert_leave(conn, employee_id, datetime(2024, 8, 14, 9, 0), datetime(2024, 8, 14, 17, 0),
                  leave_type='病假')

    balance = get_employee_annual_leave_balance(conn, employee_id, NOW)
    assert balance == {'total': 14, 'used': 1.0, 'remaining': 13.0}


def test_employee_balance_errors(conn):
    with pytest.raises(ValueError, match='找不到員工'):
        get_employee_annual_leave_balance(conn, 999, NOW)

    emp_id = q_emp.add_employee(conn, {'hr_code': 'B002', 'name_ch': '李小華'})
    with pytest.raises(ValueError, match='缺少到職日'):
        get_employee_annual_leave_balance(conn, emp_id, NOW)


def test_annual_leave_summary(conn, employee_id):
    q_emp.add_employee(conn, {'hr_code': 'B002', 'name_ch': '李小華'})
    q_emp.add_employee(conn, {'hr_code': 'C003', 'name_ch': '陳大同', 'entry_date': '2015-05-01',
                              'resign_date': '2024-01-01'})
    _insert_leave(conn, employee_id, datetime(2024, 6, 12, 9, 0), datetime(2024, 6, 12, 17, 0))

    summary, skipped = get_annual_leave_summary(conn, NOW)

    assert skipped == ['李小華']
    assert len(summary) == 1
    row = summary.iloc[0]
    assert row['員工編號'] == 'A001'
    assert row['到職日'] == '2020-03-01'
    assert row['年資'] == '4 年 10 個月'
    assert row['本期特休年度'] == '2024-03-01 ~ 2025-02-28'
    assert row['本期應有特休天數'] == 14
    assert row['本期已休特休天數'] == 1.0
    assert row['本期剩餘特休天數'] == 13.0


def test_annual_leave_summary_without_employees(conn):
    summary, skipped = get_annual_leave_summary(conn, NOW)
    assert summary.empty
    assert skipped == []
