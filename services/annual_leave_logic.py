# services/annual_leave_logic.py
import pandas as pd
from datetime import datetime
from dateutil.relativedelta import relativedelta

import config
from db import queries_employee as q_emp
from db import queries_leave as q_leave
from services.leave_logic import calculate_annual_leave, format_years_of_service
from utils.helpers import to_datetime, to_date, format_date


def get_current_annual_period(entry_date, now=None):
    """
    以到職日為週年起點，找出 now 所在的特休年度 [period_start, period_end)。
    到職日在 now 之後時，回傳以到職日起算的第一個年度。
    """
    start = to_datetime(entry_date)
    now = to_datetime(now) if now is not None else datetime.now()

    years = 0
    period_start = start
    period_end = start + relativedelta(years=1)
    while period_end <= now:
        years += 1
        period_start = start + relativedelta(years=years)
        period_end = start + relativedelta(years=years + 1)
    return period_start, period_end


def calculate_annual_leave_balance(entry_date, used_hours, now=None):
    total = calculate_annual_leave(entry_date, now)
    used = round(used_hours / config.HOURS_PER_LEAVE_DAY, 2)
    return {
        'total': total,
        'used': used,
        'remaining': round(total - used, 2),
    }


def get_employee_annual_leave_balance(conn, employee_id, now=None):
    """查詢單一員工本期特休的應有、已休與剩餘天數。"""
    employee = q_emp.get_employee_by_id(conn, employee_id)
    if employee is None:
        raise ValueError(f"找不到員工 ID：{employee_id}")
    entry_date = to_date(employee.get('entry_date'))
    if entry_date is None:
        raise ValueError(f"員工 {employee['name_ch']} 缺少到職日資料")

    now = to_datetime(now) if now is not None else datetime.now()
    period_start, period_end = get_current_annual_period(entry_date, now)
    used_hours = q_leave.get_leave_hours_for_period(
        conn, employee_id, config.ANNUAL_LEAVE_TYPE, period_start, period_end
    )
    return calculate_annual_leave_balance(entry_date, used_hours, now)


def get_annual_leave_summary(conn, now=None):
    """
    計算所有在職員工在當前週年制年度的特休天數、已使用天數與剩餘天數。

    Returns:
        tuple[pd.DataFrame, list]: (特休總表, 因缺少到職日而略過的員工姓名)
    """
    employees = q_emp.get_on_duty_employees(conn)
    if employees.empty:
        return pd.DataFrame(), []

    now = to_datetime(now) if now is not None else datetime.now()
    summaries = []
    skipped_employees = []

    for _, emp in employees.iterrows():
        entry_date = to_date(emp['entry_date'])
        if entry_date is None:
            skipped_employees.append(emp['name_ch'])
            continue

        period_start, period_end = get_current_annual_period(entry_date, now)
        used_hours = q_leave.get_leave_hours_for_period(
            conn, int(emp['id']), config.ANNUAL_LEAVE_TYPE, period_start, period_end
        )
        balance = calculate_annual_leave_balance(entry_date, used_hours, now)

        summaries.append({
            '員工編號': emp['hr_code'],
            '員工姓名': emp['name_ch'],
            '到職日': format_date(entry_date),
            '年資': format_years_of_service(entry_date, now),
            '本期特休年度': f"{format_date(period_start)} ~ {format_date(period_end - relativedelta(days=1))}",
            '本期應有特休天數': balance['total'],
            '本期已休特休天數': balance['used'],
            '本期剩餘特休天數': balance['remaining'],
        })
    return pd.DataFrame(summaries), skipped_employees
