# config.py
import os
from datetime import time
from dotenv import load_dotenv

load_dotenv()

# --- 資料庫設定 ---
DB_PATH = os.getenv("HR_DB_PATH", os.path.join("data", "hr_system.db"))

# --- 工時設定 (請假時數核算用) ---
WORK_START = time(8, 0)
WORK_END = time(17, 0)
HOURS_PER_LEAVE_DAY = 8

# --- 假單編號設定 ---
LEAVE_ID_PREFIX = "LR"
LEAVE_ID_SUFFIX_LENGTH = 3

# --- 假別 ---
LEAVE_TYPES = ['特休', '事假', '病假', '其他']
ANNUAL_LEAVE_TYPE = '特休'

# --- 假單狀態 ---
STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'
STATUS_REJECTED = 'rejected'

STATUS_LABELS = {
    STATUS_PENDING: '待審核',
    STATUS_APPROVED: '已通過',
    STATUS_REJECTED: '已拒絕',
}

# --- 簽核順序：代理人 -> 主任 -> 經理 -> 協理 ---
APPROVAL_ORDER = ['deputy', 'supervisor', 'manager', 'director']
