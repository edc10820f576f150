# services/leave_logic.py
"""
此模組包含請假與特休相關的核心計算邏輯。
- 依到職日計算年資，並依勞基法第 38 條換算特休天數。
- 計算請假區間內的工作時數（排除週末），並換算為請假天數。
- 產生假單編號。
"""
import math
import secrets
import string
from datetime import datetime, timedelta
from typing import NamedTuple
from dateutil.relativedelta import relativedelta

import config
from utils.helpers import to_datetime


class Tenure(NamedTuple):
    years: int
    months: int


# 勞基法特休級距：(年資上限(不含), 天數)，由小到大第一個符合者為準
LEAVE_ENTITLEMENT_TABLE = (
    (0.5, 0),
    (1, 3),
    (2, 7),
    (3, 10),
    (5, 14),
    (10, 15),
    (11, 16),
    (12, 17),
    (13, 18),
    (14, 19),
    (15, 20),
    (16, 21),
    (17, 22),
    (18, 23),
    (19, 24),
    (20, 25),
    (21, 26),
    (22, 27),
    (23, 28),
    (24, 29),
)
MAX_LEAVE_ENTITLEMENT = 30

_ID_ALPHABET = string.digits + string.ascii_uppercase

# --- 年資與特休 ---

def calculate_tenure(start_date, now) -> Tenure:
    """
    計算從到職日到 now 的年資 (整年 + 剩餘整月)。

    以日曆月份差計算，相隔剛好一個日曆月即為 1 個月，與當月天數無關。
    now 早於到職日時會得到負的年資，不做防呆；月數取 divmod 的非負餘數，
    例如早一個月為 (-1, 11)。
    """
    start = to_datetime(start_date)
    diff = relativedelta(to_datetime(now), start)
    total_months = diff.years * 12 + diff.months
    years, months = divmod(total_months, 12)
    return Tenure(years, months)


def format_years_of_service(start_date, now=None) -> str:
    years, months = calculate_tenure(start_date, now or datetime.now())
    if years == 0:
        return f"{months} 個月"
    if months == 0:
        return f"{years} 年"
    return f"{years} 年 {months} 個月"


def calculate_leave_entitlement(years_of_service):
    for upper_bound, days in LEAVE_ENTITLEMENT_TABLE:
        if years_of_service < upper_bound:
            return days
    return MAX_LEAVE_ENTITLEMENT


def calculate_annual_leave(start_date, now=None) -> int:
    """根據台灣勞基法，以到職日計算目前應有的特休天數。"""
    years, months = calculate_tenure(start_date, now or datetime.now())
    return calculate_leave_entitlement(years + months / 12)

# --- 請假時數 ---

def _clock_hours(value):
    return value.hour + value.minute / 60


def calculate_working_hours(start_dt, end_dt) -> float:
    """
    計算請假區間內的工作時數。

    - 同一天：週末為 0，否則直接以結束時間減開始時間 (不修正為非負)。
    - 跨天：逐日累計，週末不計；第一天算到 17:00，最後一天從 08:00 起算，
      兩者各自不小於 0；中間的平日一律以 8 小時計。
    """
    start = to_datetime(start_dt)
    end = to_datetime(end_dt)

    if start.date() == end.date():
        if start.weekday() >= 5:
            return 0.0
        return _clock_hours(end) - _clock_hours(start)

    work_start = _clock_hours(config.WORK_START)
    work_end = _clock_hours(config.WORK_END)

    total_hours = 0.0
    current_date = start.date()
    while current_date <= end.date():
        if current_date.weekday() >= 5:
            current_date += timedelta(days=1)
            continue

        if current_date == start.date():
            total_hours += max(0.0, work_end - _clock_hours(start))
        elif current_date == end.date():
            total_hours += max(0.0, _clock_hours(end) - work_start)
        else:
            total_hours += config.HOURS_PER_LEAVE_DAY

        current_date += timedelta(days=1)

    return total_hours


def calculate_leave_days(start_dt, end_dt) -> int:
    """請假天數：工作時數除以 8 後無條件進位。"""
    hours = calculate_working_hours(start_dt, end_dt)
    return math.ceil(hours / config.HOURS_PER_LEAVE_DAY)

# --- 假單編號 ---

def generate_leave_id(now=None) -> str:
    """產生 'LR-YYYYMMDD-XXX' 格式的假單編號，僅供顯示，不保證唯一。"""
    now = to_datetime(now) if now is not None else datetime.now()
    suffix = ''.join(secrets.choice(_ID_ALPHABET) for _ in range(config.LEAVE_ID_SUFFIX_LENGTH))
    return f"{config.LEAVE_ID_PREFIX}-{now.strftime('%Y%m%d')}-{suffix}"
