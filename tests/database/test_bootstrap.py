from __future__ import annotations

import pytest

from src.edutrack.edutrack.database.bootstrap import iter_sql_statements
from src.edutrack.edutrack.database.tables import TABLE_DDL, TableInitializer, Tables


def test_sql_splitter_respects_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES (\"c;d\");\n-- tail\nSELECT 1"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "-- tail\nSELECT 1",
    ]


class CountingCursor:
    def __init__(self):
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append(sql)

    def close(self):
        pass


class CountingConnFactory:
    def __init__(self):
        self.cur = CountingCursor()

    def connect(self):
        factory = self

        class _Conn:
            def cursor(self, dictionary=True):
                return factory.cur

            def commit(self):
                pass

            def rollback(self):
                pass

            def close(self):
                pass

        return _Conn()


@pytest.fixture(autouse=True)
def _fresh_table_cache():
    TableInitializer.reset()
    yield
    TableInitializer.reset()


def test_tables_are_created_once_per_process():
    factory = CountingConnFactory()

    TableInitializer(factory).ensure(Tables.ATTENDANCE_BY_DATE, Tables.ATTENDANCE_BY_STUDENT)
    TableInitializer(factory).ensure(Tables.ATTENDANCE_BY_DATE)
    TableInitializer(factory).ensure(Tables.STUDENTS)

    assert factory.cur.executed == [
        TABLE_DDL[Tables.ATTENDANCE_BY_DATE],
        TABLE_DDL[Tables.ATTENDANCE_BY_STUDENT],
        TABLE_DDL[Tables.STUDENTS],
    ]


def test_view_tables_key_matches_view_keys():
    assert "PRIMARY KEY (partition_key, student_id)" in TABLE_DDL[Tables.ATTENDANCE_BY_DATE]
    assert "PRIMARY KEY (student_id, attendance_date)" in TABLE_DDL[Tables.ATTENDANCE_BY_STUDENT]
