# utils/helpers.py
import pandas as pd
from calendar import monthrange
from datetime import datetime, date, time, timedelta


class StoredTimestamp:
    """
    後端回傳的時間戳記 (epoch 秒 + 奈秒)。

    與 datetime 可互換使用，計算前一律透過 to_datetime() 轉成本地時間。
    """

    def __init__(self, seconds: int, nanoseconds: int = 0):
        self.seconds = int(seconds)
        self.nanoseconds = int(nanoseconds)

    @classmethod
    def from_datetime(cls, dt: datetime):
        seconds = int(dt.replace(microsecond=0).timestamp())
        return cls(seconds, dt.microsecond * 1000)

    def to_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.seconds) + timedelta(microseconds=self.nanoseconds // 1000)

    def __eq__(self, other):
        if not isinstance(other, StoredTimestamp):
            return NotImplemented
        return (self.seconds, self.nanoseconds) == (other.seconds, other.nanoseconds)

    def __hash__(self):
        return hash((self.seconds, self.nanoseconds))

    def __repr__(self):
        return f"StoredTimestamp(seconds={self.seconds}, nanoseconds={self.nanoseconds})"


def to_datetime(value) -> datetime:
    """
    將各種日期時間表示法統一轉為 datetime 物件。

    Args:
        value: datetime / pandas.Timestamp / date / 具 to_datetime() 的後端時間戳記 /
               資料庫中的日期字串。

    Returns:
        datetime: 本地時間 (不含時區)。
    """
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if hasattr(value, 'to_datetime'):
        return value.to_datetime()
    return pd.to_datetime(value).to_pydatetime()


def get_monthly_dates(year, month):
    """
    根據給定的年和月，回傳該月的第一天和最後一天的字串。

    Args:
        year (int): 年份。
        month (int): 月份。

    Returns:
        tuple[str, str]: (第一天字串, 最後一天字串)，格式為 'YYYY-MM-DD'。
    """
    first_day_str = f"{year}-{month:02d}-01"
    _, last_day_num = monthrange(year, month)
    last_day_str = f"{year}-{month:02d}-{last_day_num}"
    return first_day_str, last_day_str


def to_date(date_string):
    """
    安全地將日期字串轉換為 date 物件，處理 None 或無效格式。
    """
    if date_string and pd.notna(date_string):
        try:
            return pd.to_datetime(date_string).date()
        except (ValueError, TypeError):
            return None
    return None


def is_date_in_range(value, start, end) -> bool:
    """檢查日期是否落在 [start, end] 區間內 (含頭尾)。"""
    return to_datetime(start) <= to_datetime(value) <= to_datetime(end)


def format_date_time(value) -> str:
    """格式化為 'YYYY-MM-DDTHH:MM' (本地時間，不含秒與時區)。"""
    return to_datetime(value).strftime('%Y-%m-%dT%H:%M')


def format_date(value) -> str:
    """格式化為 'YYYY-MM-DD'。"""
    return to_datetime(value).strftime('%Y-%m-%d')
