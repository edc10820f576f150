# services/report_generator.py
"""
特休與請假紀錄的 Excel 報表。
- 標題列凍結並上色，數值欄位附「合計」列 (SUBTOTAL，篩選後仍正確)。
- 欄寬依內容估算，中文字元以兩個字寬計算。
"""
import io
from datetime import datetime

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import PatternFill, Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from services.annual_leave_logic import get_annual_leave_summary
from services.leave_request_logic import format_leave_history
from db import queries_leave as q_leave

HEADER_FILL = PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid")
TOTAL_FILL = PatternFill(start_color="FCE4D6", end_color="FCE4D6", fill_type="solid")
BOLD = Font(bold=True)
ANNUAL_LEAVE_TOTAL_COLUMNS = ['本期已休特休天數', '本期剩餘特休天數']
LEAVE_HISTORY_TOTAL_COLUMNS = ['時數', '天數']


def _display_width(value) -> int:
    return sum(2 if '\u4e00' <= char <= '\u9fff' else 1 for char in str(value))


def _style_header(ws):
    for cell in ws[1]:
        cell.fill = HEADER_FILL
        cell.font = BOLD
    ws.freeze_panes = "A2"


def _append_total_row(ws, columns, total_cols):
    last_data_row = ws.max_row
    total_row = last_data_row + 1
    label = ws.cell(row=total_row, column=1, value="合計")
    label.font, label.fill = BOLD, TOTAL_FILL

    for col_idx, col_name in enumerate(columns, 1):
        if col_name not in total_cols:
            continue
        letter = get_column_letter(col_idx)
        cell = ws.cell(row=total_row, column=col_idx, value=f"=SUBTOTAL(9, {letter}2:{letter}{last_data_row})")
        cell.font, cell.fill = BOLD, TOTAL_FILL
        cell.number_format = '#,##0.00'


def _fit_column_widths(ws):
    # 公式不代表實際顯示寬度，略過合計列
    for col_idx, column in enumerate(ws.iter_cols(), 1):
        widths = [
            _display_width(cell.value) for cell in column
            if cell.value is not None and not str(cell.value).startswith('=')
        ]
        ws.column_dimensions[get_column_letter(col_idx)].width = max(widths, default=0) + 2


def _write_styled_excel(df: pd.DataFrame, sheet_name: str, total_cols=()) -> io.BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    for row in dataframe_to_rows(df, index=False, header=True):
        ws.append(row)

    _style_header(ws)
    if total_cols and not df.empty:
        _append_total_row(ws, df.columns, total_cols)
    _fit_column_widths(ws)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output


def generate_annual_leave_excel(conn, now=None):
    """
    產生週年制特休總表 Excel。

    Returns:
        tuple[io.BytesIO, list]: (Excel 檔案內容, 因缺少到職日而略過的員工姓名)
    """
    summary_df, skipped = get_annual_leave_summary(conn, now)
    if summary_df.empty:
        raise ValueError("資料庫中目前沒有符合資格的在職員工可供計算。")
    output = _write_styled_excel(summary_df, "特休總表", ANNUAL_LEAVE_TOTAL_COLUMNS)
    return output, skipped


def generate_leave_history_excel(conn, year: int, month: int):
    """產生指定月份的請假紀錄 Excel。"""
    df = q_leave.get_leave_records_by_month(conn, year, month)
    if df.empty:
        raise ValueError(f"在 {year} 年 {month} 月中，找不到任何請假紀錄。")
    return _write_styled_excel(format_leave_history(df), f"{year}-{month:02d} 請假紀錄", LEAVE_HISTORY_TOTAL_COLUMNS)


def get_report_file_name(prefix, now=None):
    return f"{prefix}_{(now or datetime.now()).strftime('%Y%m%d')}.xlsx"
