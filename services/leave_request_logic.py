# services/leave_request_logic.py
"""
此模組包含假單申請與簽核流程的商業邏輯。
- 在寫入資料庫前檢查假單欄位與請假時數。
- 依「代理人 -> 主任 -> 經理 -> 協理」的順序推進簽核。
- 請假紀錄的區間篩選與顯示格式整理。
"""
from datetime import datetime

import config
from db import queries_leave as q_leave
from services.leave_logic import calculate_working_hours, calculate_leave_days, generate_leave_id
from utils.helpers import StoredTimestamp, to_datetime, is_date_in_range, format_date_time

HISTORY_COLUMNS_MAP = {
    'request_id': '假單ID',
    'name_ch': '員工姓名',
    'leave_type': '假別',
    'start_date': '開始時間',
    'end_date': '結束時間',
    'duration': '時數',
    'leave_days': '天數',
    'reason': '事由',
    'status': '狀態',
}

# --- 假單建立 ---

def build_approval_flow(deputies=(), supervisors=(), managers=(), directors=()):
    """建立各關卡皆為待審核的簽核流程；簽核人 ID 一律存成字串，與資料庫讀回的型別一致。"""
    members = dict(zip(config.APPROVAL_ORDER, (deputies, supervisors, managers, directors)))
    return {
        role: [{'id': str(approver_id), 'status': config.STATUS_PENDING, 'updated_at': None} for approver_id in ids]
        for role, ids in members.items()
    }


def build_leave_request(employee_id, leave_type, start, end, reason,
                        deputies=(), supervisors=(), managers=(), directors=(), now=None):
    """
    檢查並組成一張新假單。

    欄位不完整、假別不存在、結束時間不晚於開始時間，或核算後的工作時數
    不大於 0 時，拋出 ValueError。
    """
    if not employee_id or not leave_type or start is None or end is None or not reason:
        raise ValueError("請完整填寫所有欄位")
    if leave_type not in config.LEAVE_TYPES:
        raise ValueError(f"不支援的假別：{leave_type}")

    start_dt = to_datetime(start)
    end_dt = to_datetime(end)
    if end_dt <= start_dt:
        raise ValueError("結束時間必須晚於開始時間")

    total_hours = calculate_working_hours(start_dt, end_dt)
    if total_hours <= 0:
        raise ValueError("請假時數必須大於 0")

    now = to_datetime(now) if now is not None else datetime.now()
    approval_flow = build_approval_flow(deputies, supervisors, managers, directors)

    return {
        'request_id': generate_leave_id(now),
        'employee_id': employee_id,
        'leave_type': leave_type,
        'start_date': start_dt.strftime('%Y-%m-%d %H:%M:%S'),
        'end_date': end_dt.strftime('%Y-%m-%d %H:%M:%S'),
        'total_hours': total_hours,
        'leave_days': calculate_leave_days(start_dt, end_dt),
        'reason': reason,
        'status': config.STATUS_PENDING,
        'created_at': StoredTimestamp.from_datetime(now),
        'approval_flow': approval_flow,
        'current_approvers': get_pending_approvers(approval_flow),
    }


def submit_leave_request(conn, employee_id, leave_type, start, end, reason, **kwargs):
    """建立假單並寫入資料庫，回傳假單編號。"""
    record = build_leave_request(employee_id, leave_type, start, end, reason, **kwargs)
    return q_leave.insert_leave_request(conn, record)

# --- 簽核流程 ---

def _tier_approved(entries):
    return any(e['status'] == config.STATUS_APPROVED for e in entries)


def is_fully_approved(flow: dict) -> bool:
    """代理人須全數同意，其餘各層級只要有一人同意即可 (無人的層級視為完成)。"""
    deputies = flow.get('deputy', [])
    if not all(d['status'] == config.STATUS_APPROVED for d in deputies):
        return False
    return all(
        not flow.get(role) or _tier_approved(flow[role])
        for role in config.APPROVAL_ORDER[1:]
    )


def get_pending_approvers(flow: dict) -> list:
    """回傳目前應簽核的人員 ID 清單。"""
    deputies = flow.get('deputy', [])
    if not all(d['status'] == config.STATUS_APPROVED for d in deputies):
        return [d['id'] for d in deputies if d['status'] == config.STATUS_PENDING]

    for role in config.APPROVAL_ORDER[1:]:
        entries = flow.get(role, [])
        if _tier_approved(entries):
            continue
        pending = [e['id'] for e in entries if e['status'] == config.STATUS_PENDING]
        if pending:
            return pending
    return []


def _mark(flow: dict, approver_id, status, now):
    found = False
    for entries in flow.values():
        for entry in entries:
            if entry['id'] == str(approver_id):
                entry['status'] = status
                entry['updated_at'] = StoredTimestamp.from_datetime(now)
                found = True
    if not found:
        raise ValueError(f"{approver_id} 不是此假單的簽核人")
    return flow


def approve(flow: dict, approver_id, now=None):
    return _mark(flow, approver_id, config.STATUS_APPROVED, now or datetime.now())


def reject(flow: dict, approver_id, now=None):
    return _mark(flow, approver_id, config.STATUS_REJECTED, now or datetime.now())


def next_status(flow: dict) -> str:
    if any(e['status'] == config.STATUS_REJECTED for entries in flow.values() for e in entries):
        return config.STATUS_REJECTED
    if is_fully_approved(flow):
        return config.STATUS_APPROVED
    return config.STATUS_PENDING


def review_leave_request(conn, request_id, approver_id, approved: bool, now=None):
    """
    由簽核人同意或拒絕假單，並回傳更新後的假單狀態。
    """
    record = q_leave.get_leave_request(conn, request_id)
    if record is None:
        raise ValueError(f"找不到假單：{request_id}")
    if record['status'] != config.STATUS_PENDING:
        raise ValueError(f"假單 {request_id} 已結案 ({config.STATUS_LABELS.get(record['status'], record['status'])})")

    flow = record['approval_flow']
    if str(approver_id) not in get_pending_approvers(flow):
        raise ValueError(f"{approver_id} 目前不是此假單的待簽核人")

    now = now or datetime.now()
    if approved:
        approve(flow, approver_id, now)
    else:
        reject(flow, approver_id, now)

    status = next_status(flow)
    q_leave.update_leave_review(conn, request_id, flow, status, StoredTimestamp.from_datetime(now))
    return status

# --- 請假紀錄 ---

def filter_leaves_in_range(df, start, end):
    """篩選出開始時間落在 [start, end] 區間內的請假紀錄。"""
    if df.empty:
        return df.copy()
    mask = df['start_date'].apply(lambda value: is_date_in_range(value, start, end))
    return df[mask].copy()


def format_leave_history(df):
    """整理請假紀錄為顯示用的表格：時間格式化、狀態中文化、欄位改為中文。"""
    display_df = df.copy()
    for col in ['start_date', 'end_date']:
        if col in display_df.columns:
            display_df[col] = display_df[col].apply(format_date_time)
    if 'status' in display_df.columns:
        display_df['status'] = display_df['status'].map(lambda s: config.STATUS_LABELS.get(s, s))

    existing_cols = [col for col in HISTORY_COLUMNS_MAP if col in display_df.columns]
    return display_df[existing_cols].rename(columns=HISTORY_COLUMNS_MAP)
