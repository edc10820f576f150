# db/queries_leave.py
"""
資料庫查詢：專門處理「請假(leave_record)」與「假單簽核(leave_approval)」相關的資料庫操作。
"""
import pandas as pd

import config
from utils.helpers import StoredTimestamp, get_monthly_dates

LEAVE_RECORD_COLUMNS = [
    'request_id', 'employee_id', 'leave_type', 'start_date', 'end_date',
    'duration', 'leave_days', 'reason', 'status', 'created_at', 'note'
]


def _to_epoch(value):
    return value.seconds if isinstance(value, StoredTimestamp) else value


def insert_leave_request(conn, record: dict):
    """
    新增一張假單與其簽核關卡，兩者在同一個交易中寫入。
    """
    cursor = conn.cursor()
    try:
        cursor.execute("BEGIN TRANSACTION")

        sql = """
        INSERT INTO leave_record (
            request_id, employee_id, leave_type, start_date, end_date,
            duration, leave_days, reason, status, created_at, updated_at, note
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """
        created_at = _to_epoch(record.get('created_at'))
        cursor.execute(sql, (
            record['request_id'],
            record['employee_id'],
            record['leave_type'],
            record['start_date'],
            record['end_date'],
            record['total_hours'],
            record.get('leave_days'),
            record.get('reason'),
            record.get('status', config.STATUS_PENDING),
            created_at,
            created_at,
            record.get('note'),
        ))

        approval_rows = [
            (record['request_id'], entry['id'], role, entry['status'], _to_epoch(entry.get('updated_at')))
            for role, entries in record.get('approval_flow', {}).items()
            for entry in entries
        ]
        if approval_rows:
            cursor.executemany(
                "INSERT INTO leave_approval (request_id, approver_id, role, status, updated_at) VALUES (?, ?, ?, ?, ?)",
                approval_rows
            )

        conn.commit()
        return record['request_id']

    except Exception as e:
        conn.rollback()
        raise e


def get_approval_flow(conn, request_id):
    """取得假單的簽核關卡，依 APPROVAL_ORDER 分組。"""
    rows = conn.execute(
        "SELECT approver_id, role, status, updated_at FROM leave_approval WHERE request_id = ? ORDER BY id",
        (request_id,)
    ).fetchall()
    flow = {role: [] for role in config.APPROVAL_ORDER}
    for approver_id, role, status, updated_at in rows:
        flow.setdefault(role, []).append({
            'id': approver_id,
            'status': status,
            'updated_at': StoredTimestamp(updated_at) if updated_at is not None else None,
        })
    return flow


def get_leave_request(conn, request_id):
    """根據假單編號取得單筆假單 (含簽核關卡)，查無資料時回傳 None。"""
    df = pd.read_sql_query("SELECT * FROM leave_record WHERE request_id = ?", conn, params=(request_id,))
    if df.empty:
        return None
    record = df.to_dict('records')[0]
    record['total_hours'] = record.pop('duration')
    if pd.notna(record.get('created_at')):
        record['created_at'] = StoredTimestamp(record['created_at'])
    record['approval_flow'] = get_approval_flow(conn, request_id)
    return record


def update_leave_review(conn, request_id, approval_flow: dict, status, updated_at):
    """更新假單各關卡的簽核狀態與假單總狀態。"""
    cursor = conn.cursor()
    try:
        cursor.execute("BEGIN TRANSACTION")
        epoch = _to_epoch(updated_at)
        for role, entries in approval_flow.items():
            for entry in entries:
                cursor.execute(
                    "UPDATE leave_approval SET status = ?, updated_at = ? WHERE request_id = ? AND approver_id = ? AND role = ?",
                    (entry['status'], _to_epoch(entry.get('updated_at')), request_id, entry['id'], role)
                )
        cursor.execute(
            "UPDATE leave_record SET status = ?, updated_at = ? WHERE request_id = ?",
            (status, epoch, request_id)
        )
        conn.commit()
        return cursor.rowcount
    except Exception as e:
        conn.rollback()
        raise e


def get_leave_records_by_month(conn, year: int, month: int):
    """
    根據年月查詢所有請假紀錄 (以開始時間歸屬月份)。
    """
    first_day, last_day = get_monthly_dates(year, month)
    query = """
    SELECT
        lr.request_id, lr.employee_id, e.name_ch, lr.leave_type, lr.start_date,
        lr.end_date, lr.duration, lr.leave_days, lr.reason, lr.status
    FROM leave_record lr
    JOIN employee e ON lr.employee_id = e.id
    WHERE date(lr.start_date) BETWEEN ? AND ?
    ORDER BY e.name_ch, lr.start_date
    """
    return pd.read_sql_query(query, conn, params=(first_day, last_day))


def get_leave_records_by_employee(conn, employee_id):
    """查詢指定員工的所有請假紀錄，依開始時間由新到舊排序。"""
    query = """
    SELECT
        lr.request_id, lr.employee_id, e.name_ch, lr.leave_type, lr.start_date,
        lr.end_date, lr.duration, lr.leave_days, lr.reason, lr.status
    FROM leave_record lr
    JOIN employee e ON lr.employee_id = e.id
    WHERE lr.employee_id = ?
    ORDER BY lr.start_date DESC
    """
    return pd.read_sql_query(query, conn, params=(employee_id,))


def get_leave_hours_for_period(conn, employee_id, leave_type, start_date, end_date):
    """
    查詢指定員工已通過的特定假別，在 [start_date, end_date) 區間內開始的總時數。
    """
    sql = """
    SELECT SUM(duration)
    FROM leave_record
    WHERE employee_id = ?
      AND leave_type = ?
      AND status = ?
      AND start_date >= ? AND start_date < ?
    """
    cursor = conn.cursor()
    result = cursor.execute(sql, (
        employee_id, leave_type, config.STATUS_APPROVED,
        start_date.strftime('%Y-%m-%d %H:%M:%S'), end_date.strftime('%Y-%m-%d %H:%M:%S')
    )).fetchone()
    return result[0] if result and result[0] is not None else 0
