# db/queries_employee.py
"""
資料庫查詢：專門處理「員工(employee)」相關的資料庫操作。
"""
import pandas as pd


def get_on_duty_employees(conn):
    """取得所有在職 (未填離職日) 的員工。"""
    query = """
    SELECT * FROM employee
    WHERE resign_date IS NULL OR resign_date = ''
    ORDER BY hr_code
    """
    return pd.read_sql_query(query, conn)


def get_employee_by_id(conn, emp_id):
    """根據 ID 取得單筆員工資料，查無資料時回傳 None。"""
    df = pd.read_sql_query("SELECT * FROM employee WHERE id = ?", conn, params=(emp_id,))
    return df.to_dict('records')[0] if not df.empty else None


def add_employee(conn, data: dict):
    """新增一筆員工資料，回傳新紀錄的 ID。"""
    cursor = conn.cursor()
    cols = ', '.join(data.keys())
    placeholders = ', '.join('?' for _ in data)
    sql = f'INSERT INTO employee ({cols}) VALUES ({placeholders})'
    cursor.execute(sql, list(data.values()))
    conn.commit()
    return cursor.lastrowid
