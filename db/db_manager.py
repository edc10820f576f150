# db/db_manager.py
import sqlite3
from pathlib import Path

import config

# --- 資料庫設定 ---
# 相對路徑一律以專案根目錄為基準
BASE_PATH = Path(__file__).parent.parent
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def resolve_db_path(db_path=None):
    """回傳資料庫檔案路徑；':memory:' 直接回傳。"""
    db_path = db_path or config.DB_PATH
    if db_path == ":memory:":
        return db_path
    path = Path(db_path)
    if not path.is_absolute():
        path = BASE_PATH / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def init_connection(db_path=None):
    """建立資料庫連線。"""
    path = resolve_db_path(db_path)
    print(f"--- [INFO] Connecting to database at: {path} ---")
    try:
        conn = sqlite3.connect(path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn
    except sqlite3.Error as e:
        print(f"資料庫連線失敗: {e}")
        return None


def init_db(conn):
    """讀取 schema.sql 檔案並執行以建立所有資料表。"""
    if not SCHEMA_PATH.exists():
        raise FileNotFoundError(f"找不到資料庫結構檔案 {SCHEMA_PATH}")

    print("--- [INFO] Initializing database tables... ---")
    with open(SCHEMA_PATH, 'r', encoding='utf-8') as f:
        schema_sql = f.read()
    try:
        conn.executescript(schema_sql)
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    print("--- [SUCCESS] Database tables initialized successfully. ---")


if __name__ == '__main__':
    print(f"Database file is located at: {resolve_db_path()}")
    action = input("Type 'init' to create or update database tables from schema.sql: ").strip().lower()
    if action == 'init':
        connection = init_connection()
        if connection:
            init_db(connection)
            connection.close()
    else:
        print("Invalid action.")
