import pytest

from db.db_manager import init_connection, init_db
from db import queries_employee as q_emp


@pytest.fixture
def conn():
    connection = init_connection(":memory:")
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture
def employee_id(conn):
    return q_emp.add_employee(conn, {
        'hr_code': 'A001',
        'name_ch': '王小明',
        'dept': '服務',
        'entry_date': '2020-03-01',
    })
